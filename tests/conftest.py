"""
Shared fixtures for booking tests.

All tests run against the in-memory repositories and a fixed clock.
"""

from datetime import datetime
from typing import List, Tuple

import pytest

from medibook.adapters.db.memory import (
    InMemoryAppointmentRepository,
    InMemoryDoctorRepository,
    InMemoryPatientDirectory,
)
from medibook.application.dto.booking_dto import PatientContact
from medibook.application.use_cases.allocate_slot import SlotAllocator
from medibook.application.use_cases.book_appointment import BookingCoordinator
from medibook.application.use_cases.cancel_appointment import CancellationReconciler
from medibook.application.use_cases.manage_availability import AvailabilityManager
from medibook.domain.entities.doctor import Doctor
from medibook.domain.entities.slot_set import SlotSet
from medibook.domain.value_objects.object_id import DoctorId
from medibook.domain.value_objects.slot import Slot

# "Now" for every test: 2025-05-20 08:00 local
NOW = datetime(2025, 5, 20, 8, 0)

PATIENT_1 = "665f1c2ab4d3e9a1f0c0aa01"
PATIENT_2 = "665f1c2ab4d3e9a1f0c0aa02"


def fixed_clock() -> datetime:
    return NOW


def make_doctor(slots: List[Tuple[str, str]] = (), fees: float = 50.0, **fields) -> Doctor:
    """Build a doctor with the given available (date, time) slots."""
    return Doctor(
        doctor_id=DoctorId.generate(),
        name=fields.pop("name", "Dr. Richard James"),
        fees=fees,
        speciality=fields.pop("speciality", "General physician"),
        degree=fields.pop("degree", "MBBS"),
        experience=fields.pop("experience", "4 Years"),
        slots=SlotSet(available=[Slot(d, t) for d, t in slots]),
        **fields,
    )


@pytest.fixture
def doctor_repo() -> InMemoryDoctorRepository:
    return InMemoryDoctorRepository()


@pytest.fixture
def appointment_repo() -> InMemoryAppointmentRepository:
    return InMemoryAppointmentRepository()


@pytest.fixture
def patient_directory() -> InMemoryPatientDirectory:
    directory = InMemoryPatientDirectory()
    directory.register(
        PatientContact(patient_id=PATIENT_1, name="Alice", email="alice@example.com", phone="555-0101")
    )
    directory.register(PatientContact(patient_id=PATIENT_2, name="Bob", email="bob@example.com"))
    return directory


@pytest.fixture
def allocator(doctor_repo) -> SlotAllocator:
    return SlotAllocator(doctor_repo, clock=fixed_clock)


@pytest.fixture
def coordinator(allocator, appointment_repo, patient_directory) -> BookingCoordinator:
    return BookingCoordinator(allocator, appointment_repo, patient_directory)


@pytest.fixture
def reconciler(appointment_repo, doctor_repo) -> CancellationReconciler:
    return CancellationReconciler(appointment_repo, doctor_repo)


@pytest.fixture
def availability(doctor_repo) -> AvailabilityManager:
    return AvailabilityManager(doctor_repo, clock=fixed_clock)


DOCTOR_ID = "665f1c2ab4d3e9a1f0c0dd01"

API_KEYS = ",".join([
    f"patient-key:patient:{PATIENT_1}",
    f"other-patient-key:patient:{PATIENT_2}",
    f"doctor-key:doctor:{DOCTOR_ID}",
    "admin-key:admin:ops",
])


@pytest.fixture
def api_client(monkeypatch):
    """TestClient over a fresh app using the in-memory backend."""
    from fastapi.testclient import TestClient

    from medibook.api.deps import clear_dependency_cache
    from medibook.app import create_app
    from medibook.core.auth import reset_auth_service
    from medibook.core.config import reset_settings

    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setenv("MONGO_BACKEND", "memory")
    monkeypatch.setenv("SECURITY_API_KEYS", API_KEYS)
    reset_settings()
    reset_auth_service()
    clear_dependency_cache()

    with TestClient(create_app()) as client:
        yield client

    reset_settings()
    reset_auth_service()
    clear_dependency_cache()
