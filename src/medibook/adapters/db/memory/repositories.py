"""
In-memory repositories with the same write contract as the MongoDB ones.

Entities are deep-copied on the way in and out so callers never share
state with the store. Each call yields to the event loop once, the way a
round trip to the database would, so concurrent requests interleave.
"""

import asyncio
from copy import deepcopy
from datetime import datetime
from typing import Dict, List, Optional

from medibook.application.dto.booking_dto import PatientContact
from medibook.application.ports.repositories.appointment_repo import AppointmentRepository
from medibook.application.ports.repositories.doctor_repo import DoctorRepository
from medibook.application.ports.repositories.patient_directory import PatientDirectory
from medibook.domain.entities.appointment import Appointment
from medibook.domain.entities.doctor import Doctor
from medibook.domain.entities.slot_set import BookedSlot
from medibook.domain.errors import (
    ConcurrentModificationError,
    DoctorNotFoundError,
    SlotNotAvailableError,
)
from medibook.domain.value_objects.object_id import AppointmentId, DoctorId


class InMemoryDoctorRepository(DoctorRepository):
    """Doctor store keyed by id, with version-checked slot writes."""

    def __init__(self) -> None:
        self._doctors: Dict[str, Doctor] = {}

    async def find_by_id(self, doctor_id: DoctorId) -> Optional[Doctor]:
        await asyncio.sleep(0)
        doctor = self._doctors.get(doctor_id.value)
        return deepcopy(doctor) if doctor else None

    async def save_slots(self, doctor: Doctor) -> Doctor:
        await asyncio.sleep(0)
        stored = self._doctors.get(doctor.id)
        if stored is None:
            raise DoctorNotFoundError(doctor.id)
        if stored.version != doctor.version:
            raise ConcurrentModificationError(doctor.id, doctor.version)

        stored.slots = deepcopy(doctor.slots)
        stored.version += 1
        stored.updated_at = datetime.utcnow()

        doctor.version = stored.version
        doctor.updated_at = stored.updated_at
        return doctor

    async def book_slot(self, doctor_id: DoctorId, booked: BookedSlot) -> int:
        await asyncio.sleep(0)
        stored = self._doctors.get(doctor_id.value)
        if stored is None:
            raise DoctorNotFoundError(doctor_id.value)
        idx = stored.slots.find_available(booked.date, booked.time)
        if idx is None:
            raise SlotNotAvailableError(booked.date, booked.time)

        stored.slots.available.pop(idx)
        stored.slots.booked.append(deepcopy(booked))
        stored.version += 1
        stored.updated_at = datetime.utcnow()
        return stored.version

    async def create(self, doctor: Doctor) -> Doctor:
        await asyncio.sleep(0)
        if doctor.id in self._doctors:
            raise ValueError(f"Doctor '{doctor.id}' already exists")
        self._doctors[doctor.id] = deepcopy(doctor)
        return deepcopy(doctor)


class InMemoryAppointmentRepository(AppointmentRepository):
    """Appointment store keyed by id."""

    def __init__(self) -> None:
        self._appointments: Dict[str, Appointment] = {}

    async def create(self, appointment: Appointment) -> Appointment:
        await asyncio.sleep(0)
        if appointment.id in self._appointments:
            raise ValueError(f"Appointment '{appointment.id}' already exists")
        self._appointments[appointment.id] = deepcopy(appointment)
        return deepcopy(appointment)

    async def find_by_id(self, appointment_id: AppointmentId) -> Optional[Appointment]:
        await asyncio.sleep(0)
        appointment = self._appointments.get(appointment_id.value)
        return deepcopy(appointment) if appointment else None

    async def delete(self, appointment_id: AppointmentId) -> bool:
        await asyncio.sleep(0)
        return self._appointments.pop(appointment_id.value, None) is not None

    async def find_by_patient(self, patient_id: str) -> List[Appointment]:
        await asyncio.sleep(0)
        matches = [a for a in self._appointments.values() if a.belongs_to(patient_id)]
        return [deepcopy(a) for a in _newest_first(matches)]

    async def find_all(self, limit: int = 100, offset: int = 0) -> List[Appointment]:
        await asyncio.sleep(0)
        ordered = _newest_first(list(self._appointments.values()))
        return [deepcopy(a) for a in ordered[offset:offset + limit]]


class InMemoryPatientDirectory(PatientDirectory):
    """Patient contacts registered up front."""

    def __init__(self) -> None:
        self._contacts: Dict[str, PatientContact] = {}

    def register(self, contact: PatientContact) -> None:
        self._contacts[str(contact.patient_id)] = contact

    async def find_contact(self, patient_id: str) -> Optional[PatientContact]:
        await asyncio.sleep(0)
        contact = self._contacts.get(str(patient_id))
        return deepcopy(contact) if contact else None


def _newest_first(appointments: List[Appointment]) -> List[Appointment]:
    return sorted(appointments, key=lambda a: a.created_at, reverse=True)
