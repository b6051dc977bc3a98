"""Appointment domain entity."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..value_objects.object_id import AppointmentId
from ..value_objects.snapshots import DoctorSnapshot, PatientSnapshot
from .slot_set import BookedSlot


@dataclass
class Appointment:
    """A booked visit.

    Holds its own copy of the slot coordinates and of the patient and doctor
    details, so it can still be shown (and its slot restored) if the doctor
    document later disagrees with it.
    """

    appointment_id: AppointmentId
    patient_id: str
    doctor_id: str
    patient_snapshot: PatientSnapshot
    doctor_snapshot: DoctorSnapshot
    slot_date: str
    slot_time: str
    amount: float
    canceled: bool = False
    payment: bool = False
    is_completed: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def id(self) -> str:
        return self.appointment_id.value

    @classmethod
    def from_booking(
        cls,
        booked: BookedSlot,
        patient: PatientSnapshot,
        doctor: DoctorSnapshot,
        now: Optional[datetime] = None,
    ) -> "Appointment":
        """Build the appointment for a slot that has just been booked."""
        now = now or datetime.utcnow()
        return cls(
            appointment_id=AppointmentId.generate(),
            patient_id=str(patient.id),
            doctor_id=doctor.id,
            patient_snapshot=patient,
            doctor_snapshot=doctor,
            slot_date=booked.date,
            slot_time=booked.time,
            amount=doctor.fees,
            created_at=now,
            updated_at=now,
        )

    def belongs_to(self, patient_id: str) -> bool:
        return str(self.patient_id) == str(patient_id)
