"""
CancellationReconciler tests, including drift between appointments and doctor slots.
"""

import pytest

from medibook.application.dto.booking_dto import BookAppointmentRequest
from medibook.application.use_cases.cancel_appointment import CancellationReconciler
from medibook.domain.entities.appointment import Appointment
from medibook.domain.entities.slot_set import BookedSlot
from medibook.domain.errors import (
    AppointmentNotFoundError,
    BookingValidationError,
    ForbiddenActionError,
    PersistenceFailureError,
)
from medibook.domain.value_objects.actor import AdminActor, PatientActor
from medibook.domain.value_objects.object_id import AppointmentId
from medibook.domain.value_objects.slot import Slot
from medibook.domain.value_objects.snapshots import DoctorSnapshot, PatientSnapshot

from conftest import PATIENT_1, PATIENT_2, make_doctor

SLOT = ("2025-06-01", "09:00")


async def book(coordinator, doctor_repo, patient_id=PATIENT_1):
    doctor = await doctor_repo.create(make_doctor([SLOT]))
    appointment = await coordinator.book(
        BookAppointmentRequest(
            patient_id=patient_id, doctor_id=doctor.id, slot_date=SLOT[0], slot_time=SLOT[1]
        )
    )
    return doctor, appointment


@pytest.mark.asyncio
async def test_patient_cancel_returns_slot(coordinator, reconciler, doctor_repo, appointment_repo):
    doctor, appointment = await book(coordinator, doctor_repo)

    result = await reconciler.cancel(appointment.id, PatientActor(PATIENT_1))

    assert (result.appointment_id, result.slot_date, result.slot_time) == (appointment.id, *SLOT)
    assert result.slot_restored is True
    assert await appointment_repo.find_by_id(appointment.appointment_id) is None

    stored = await doctor_repo.find_by_id(doctor.doctor_id)
    assert stored.slots.available == [Slot(*SLOT)]
    assert stored.slots.booked == []


@pytest.mark.asyncio
async def test_admin_cancel_needs_no_ownership(coordinator, reconciler, doctor_repo, appointment_repo):
    doctor, appointment = await book(coordinator, doctor_repo)

    await reconciler.cancel(appointment.id, AdminActor())

    assert await appointment_repo.find_by_id(appointment.appointment_id) is None
    stored = await doctor_repo.find_by_id(doctor.doctor_id)
    assert stored.slots.available == [Slot(*SLOT)]
    assert stored.slots.booked == []


@pytest.mark.asyncio
async def test_other_patient_is_forbidden(coordinator, reconciler, doctor_repo, appointment_repo):
    doctor, appointment = await book(coordinator, doctor_repo)

    with pytest.raises(ForbiddenActionError):
        await reconciler.cancel(appointment.id, PatientActor(PATIENT_2))

    assert await appointment_repo.find_by_id(appointment.appointment_id) is not None
    stored = await doctor_repo.find_by_id(doctor.doctor_id)
    assert stored.slots.available == []
    assert len(stored.slots.booked) == 1


@pytest.mark.asyncio
async def test_second_cancel_is_not_found_and_restores_once(coordinator, reconciler, doctor_repo):
    doctor, appointment = await book(coordinator, doctor_repo)

    await reconciler.cancel(appointment.id, PatientActor(PATIENT_1))
    with pytest.raises(AppointmentNotFoundError):
        await reconciler.cancel(appointment.id, PatientActor(PATIENT_1))

    stored = await doctor_repo.find_by_id(doctor.doctor_id)
    assert stored.slots.available == [Slot(*SLOT)]


@pytest.mark.asyncio
async def test_invalid_appointment_id(reconciler):
    with pytest.raises(BookingValidationError):
        await reconciler.cancel("12345", PatientActor(PATIENT_1))


@pytest.mark.asyncio
async def test_unknown_appointment(reconciler):
    with pytest.raises(AppointmentNotFoundError):
        await reconciler.cancel(AppointmentId.generate().value, AdminActor())


@pytest.mark.asyncio
async def test_missing_booked_entry_still_restores_slot(coordinator, reconciler, doctor_repo):
    doctor, appointment = await book(coordinator, doctor_repo)

    # Booked entry removed out of band
    drifted = await doctor_repo.find_by_id(doctor.doctor_id)
    drifted.slots.booked = []
    await doctor_repo.save_slots(drifted)

    result = await reconciler.cancel(appointment.id, PatientActor(PATIENT_1))

    assert result.slot_restored is True
    stored = await doctor_repo.find_by_id(doctor.doctor_id)
    assert stored.slots.available == [Slot(*SLOT)]


@pytest.mark.asyncio
async def test_drift_with_slot_already_available_adds_no_duplicate(coordinator, reconciler, doctor_repo):
    doctor, appointment = await book(coordinator, doctor_repo)

    drifted = await doctor_repo.find_by_id(doctor.doctor_id)
    drifted.slots.booked = []
    drifted.slots.available = [Slot(*SLOT)]
    await doctor_repo.save_slots(drifted)
    version_before = (await doctor_repo.find_by_id(doctor.doctor_id)).version

    result = await reconciler.cancel(appointment.id, PatientActor(PATIENT_1))

    assert result.slot_restored is False
    stored = await doctor_repo.find_by_id(doctor.doctor_id)
    assert stored.slots.available == [Slot(*SLOT)]
    assert stored.version == version_before


@pytest.mark.asyncio
async def test_patient_cancel_leaves_other_patients_entry_alone(coordinator, reconciler, doctor_repo):
    doctor, appointment = await book(coordinator, doctor_repo)

    # Same coordinates now held by another patient
    drifted = await doctor_repo.find_by_id(doctor.doctor_id)
    drifted.slots.booked = [BookedSlot(SLOT[0], SLOT[1], PATIENT_2, "Bob")]
    await doctor_repo.save_slots(drifted)

    result = await reconciler.cancel(appointment.id, PatientActor(PATIENT_1))

    assert result.slot_restored is False
    stored = await doctor_repo.find_by_id(doctor.doctor_id)
    assert [b.patient_id for b in stored.slots.booked] == [PATIENT_2]
    assert stored.slots.available == []


@pytest.mark.asyncio
async def test_missing_doctor_does_not_fail_cancellation(reconciler, appointment_repo):
    appointment = Appointment(
        appointment_id=AppointmentId.generate(),
        patient_id=PATIENT_1,
        doctor_id="665f1c2ab4d3e9a1f0c0bbff",
        patient_snapshot=PatientSnapshot(id=PATIENT_1, name="Alice"),
        doctor_snapshot=DoctorSnapshot(id="665f1c2ab4d3e9a1f0c0bbff", name="Dr. Gone"),
        slot_date=SLOT[0],
        slot_time=SLOT[1],
        amount=50.0,
    )
    await appointment_repo.create(appointment)

    result = await reconciler.cancel(appointment.id, PatientActor(PATIENT_1))

    assert result.slot_restored is False
    assert await appointment_repo.find_by_id(appointment.appointment_id) is None


@pytest.mark.asyncio
async def test_malformed_doctor_id_skips_slot_return(reconciler, appointment_repo):
    appointment = Appointment(
        appointment_id=AppointmentId.generate(),
        patient_id=PATIENT_1,
        doctor_id="legacy-doctor",
        patient_snapshot=PatientSnapshot(id=PATIENT_1, name="Alice"),
        doctor_snapshot=DoctorSnapshot(id="legacy-doctor", name="Dr. Legacy"),
        slot_date=SLOT[0],
        slot_time=SLOT[1],
        amount=50.0,
    )
    await appointment_repo.create(appointment)

    result = await reconciler.cancel(appointment.id, AdminActor())

    assert result.slot_restored is False


@pytest.mark.asyncio
async def test_slot_return_retries_after_concurrent_write(coordinator, reconciler, doctor_repo, monkeypatch):
    doctor, appointment = await book(coordinator, doctor_repo)
    original_find = doctor_repo.find_by_id
    calls = {"n": 0}

    async def find_with_one_interleaved_write(doctor_id):
        loaded = await original_find(doctor_id)
        calls["n"] += 1
        if calls["n"] == 1:
            doctor_repo._doctors[doctor_id.value].version += 1
        return loaded

    monkeypatch.setattr(doctor_repo, "find_by_id", find_with_one_interleaved_write)

    result = await reconciler.cancel(appointment.id, PatientActor(PATIENT_1))

    assert result.slot_restored is True
    assert calls["n"] == 2
    stored = await original_find(doctor.doctor_id)
    assert stored.slots.available == [Slot(*SLOT)]


@pytest.mark.asyncio
async def test_slot_return_gives_up_after_max_attempts(coordinator, appointment_repo, doctor_repo, monkeypatch, caplog):
    doctor, appointment = await book(coordinator, doctor_repo)
    reconciler = CancellationReconciler(appointment_repo, doctor_repo, max_attempts=2)
    original_find = doctor_repo.find_by_id

    async def find_then_bump(doctor_id):
        loaded = await original_find(doctor_id)
        doctor_repo._doctors[doctor_id.value].version += 1
        return loaded

    monkeypatch.setattr(doctor_repo, "find_by_id", find_then_bump)

    with caplog.at_level("ERROR", logger="medibook.booking"):
        result = await reconciler.cancel(appointment.id, PatientActor(PATIENT_1))

    assert result.slot_restored is False
    assert await appointment_repo.find_by_id(AppointmentId(appointment.id)) is None
    assert any("slot_return_failed" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_storage_error_on_slot_return_still_cancels(coordinator, reconciler, appointment_repo, doctor_repo, monkeypatch):
    doctor, appointment = await book(coordinator, doctor_repo)

    async def failing_save(_doctor):
        raise PersistenceFailureError("save_doctor_slots", "connection reset")

    monkeypatch.setattr(doctor_repo, "save_slots", failing_save)

    result = await reconciler.cancel(appointment.id, PatientActor(PATIENT_1))

    assert result.slot_restored is False
    assert (result.slot_date, result.slot_time) == SLOT
    assert await appointment_repo.find_by_id(AppointmentId(appointment.id)) is None


@pytest.mark.asyncio
async def test_book_cancel_book_again(coordinator, reconciler, doctor_repo, appointment_repo):
    doctor, first = await book(coordinator, doctor_repo)
    await reconciler.cancel(first.id, PatientActor(PATIENT_1))

    second = await coordinator.book(
        BookAppointmentRequest(
            patient_id=PATIENT_2, doctor_id=doctor.id, slot_date=SLOT[0], slot_time=SLOT[1]
        )
    )

    stored = await doctor_repo.find_by_id(doctor.doctor_id)
    assert stored.slots.available == []
    assert [b.patient_id for b in stored.slots.booked] == [PATIENT_2]
    assert [a.id for a in await appointment_repo.find_all()] == [second.id]
