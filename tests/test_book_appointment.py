"""
BookingCoordinator tests.
"""

import asyncio
import json
import logging

import pytest

from medibook.application.dto.booking_dto import BookAppointmentRequest
from medibook.domain.errors import (
    BookingValidationError,
    DoctorNotFoundError,
    PersistenceFailureError,
    SlotNotAvailableError,
)
from medibook.domain.value_objects.object_id import DoctorId

from conftest import NOW, PATIENT_1, PATIENT_2, make_doctor

UNREGISTERED_PATIENT = "665f1c2ab4d3e9a1f0c0aa99"


def request(patient_id, doctor_id, slot_date="2025-06-01", slot_time="09:00"):
    return BookAppointmentRequest(
        patient_id=patient_id, doctor_id=doctor_id, slot_date=slot_date, slot_time=slot_time
    )


@pytest.mark.asyncio
async def test_booking_creates_appointment_with_snapshots(coordinator, doctor_repo, appointment_repo):
    doctor = await doctor_repo.create(make_doctor([("2025-06-01", "09:00")], fees=80.0))

    appointment = await coordinator.book(request(PATIENT_1, doctor.id))

    assert appointment.amount == 80.0
    assert appointment.slot_date == "2025-06-01"
    assert appointment.slot_time == "09:00"
    assert appointment.patient_snapshot.name == "Alice"
    assert appointment.patient_snapshot.email == "alice@example.com"
    assert appointment.doctor_snapshot.name == "Dr. Richard James"
    assert appointment.doctor_snapshot.speciality == "General physician"
    assert not appointment.canceled and not appointment.payment and not appointment.is_completed

    stored = await appointment_repo.find_by_id(appointment.appointment_id)
    assert stored is not None
    assert stored.patient_id == PATIENT_1

    doctor_after = await doctor_repo.find_by_id(doctor.doctor_id)
    assert doctor_after.slots.available == []
    booked = doctor_after.slots.booked[0]
    assert (booked.date, booked.time, booked.patient_id, booked.status.value) == (
        "2025-06-01", "09:00", PATIENT_1, "confirmed"
    )


@pytest.mark.asyncio
async def test_unknown_patient_degrades_to_placeholder_contact(coordinator, doctor_repo):
    doctor = await doctor_repo.create(make_doctor([("2025-06-01", "09:00")]))

    appointment = await coordinator.book(request(UNREGISTERED_PATIENT, doctor.id))

    assert appointment.patient_snapshot.name == "Unknown"
    assert appointment.patient_snapshot.email == ""
    assert appointment.patient_snapshot.phone == ""


@pytest.mark.asyncio
async def test_partial_contact_fills_missing_fields(coordinator, doctor_repo):
    doctor = await doctor_repo.create(make_doctor([("2025-06-01", "09:00")]))

    appointment = await coordinator.book(request(PATIENT_2, doctor.id))

    assert appointment.patient_snapshot.name == "Bob"
    assert appointment.patient_snapshot.phone == ""


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "doctor_id,slot_date,slot_time,field",
    [
        ("", "2025-06-01", "09:00", "doctor_id"),
        ("665f1c2ab4d3e9a1f0c0bb01", "", "09:00", "slot_date"),
        ("665f1c2ab4d3e9a1f0c0bb01", "2025-06-01", None, "slot_time"),
        ("not-an-object-id", "2025-06-01", "09:00", "doctor_id"),
    ],
)
async def test_invalid_requests_are_rejected(coordinator, doctor_id, slot_date, slot_time, field):
    with pytest.raises(BookingValidationError) as exc_info:
        await coordinator.book(request(PATIENT_1, doctor_id, slot_date, slot_time))

    assert exc_info.value.error_code == "VALIDATION_ERROR"
    assert exc_info.value.details["field"] == field


@pytest.mark.asyncio
async def test_missing_doctor(coordinator):
    with pytest.raises(DoctorNotFoundError):
        await coordinator.book(request(PATIENT_1, DoctorId.generate().value))


@pytest.mark.asyncio
async def test_past_slot_still_in_storage_is_rejected(coordinator, doctor_repo, appointment_repo):
    doctor = await doctor_repo.create(make_doctor([("2024-01-01", "09:00")]))

    with pytest.raises(SlotNotAvailableError):
        await coordinator.book(request(PATIENT_1, doctor.id, "2024-01-01", "09:00"))

    assert await appointment_repo.find_all() == []
    stored = await doctor_repo.find_by_id(doctor.doctor_id)
    assert stored.slots.available == []


@pytest.mark.asyncio
async def test_concurrent_bookings_create_one_appointment(coordinator, doctor_repo, appointment_repo):
    doctor = await doctor_repo.create(make_doctor([("2025-06-01", "09:00")]))

    results = await asyncio.gather(
        coordinator.book(request(PATIENT_1, doctor.id)),
        coordinator.book(request(PATIENT_2, doctor.id)),
        return_exceptions=True,
    )

    assert sum(1 for r in results if isinstance(r, SlotNotAvailableError)) == 1
    appointments = await appointment_repo.find_all()
    assert len(appointments) == 1


@pytest.mark.asyncio
async def test_appointment_insert_failure_is_logged_and_slot_stays_booked(
    coordinator, doctor_repo, appointment_repo, monkeypatch, caplog
):
    doctor = await doctor_repo.create(make_doctor([("2025-06-01", "09:00")]))

    async def failing_create(_appointment):
        raise PersistenceFailureError("create_appointment", "write concern timeout")

    monkeypatch.setattr(appointment_repo, "create", failing_create)

    with caplog.at_level(logging.ERROR, logger="medibook.booking"):
        with pytest.raises(PersistenceFailureError):
            await coordinator.book(request(PATIENT_1, doctor.id))

    events = [json.loads(r.getMessage()) for r in caplog.records if r.name == "medibook.booking"]
    orphan = [e for e in events if e["event"] == "booked slot without appointment"]
    assert len(orphan) == 1
    assert orphan[0]["slot_date"] == "2025-06-01"
    assert orphan[0]["slot_time"] == "09:00"
    assert orphan[0]["doctor_id"] == doctor.id

    stored = await doctor_repo.find_by_id(doctor.doctor_id)
    assert [b.patient_id for b in stored.slots.booked] == [PATIENT_1]


@pytest.mark.asyncio
async def test_appointment_timestamps_come_from_clock(allocator, appointment_repo, patient_directory, doctor_repo):
    from medibook.application.use_cases.book_appointment import BookingCoordinator

    coordinator = BookingCoordinator(allocator, appointment_repo, patient_directory, clock=lambda: NOW)
    doctor = await doctor_repo.create(make_doctor([("2025-06-01", "09:00")]))

    appointment = await coordinator.book(request(PATIENT_1, doctor.id))

    assert appointment.created_at == NOW
    assert appointment.updated_at == NOW
