"""Cancel Appointment use case: delete the appointment and give its slot back."""

from typing import Optional

from ...core.structured_logger import get_logger
from ...domain.entities.slot_set import SlotSet
from ...domain.errors import (
    AppointmentNotFoundError,
    BookedSlotNotFoundError,
    BookingValidationError,
    ConcurrentModificationError,
    ForbiddenActionError,
    PersistenceFailureError,
)
from ...domain.value_objects.actor import Actor
from ...domain.value_objects.object_id import AppointmentId, DoctorId
from ..dto.booking_dto import CancellationResult
from ..ports.repositories.appointment_repo import AppointmentRepository
from ..ports.repositories.doctor_repo import DEFAULT_MAX_ATTEMPTS, DoctorRepository

logger = get_logger("medibook.booking", component="reconciler")


class CancellationReconciler:
    """Use case for cancelling an appointment as a patient or an admin.

    The appointment is removed first. Returning the slot to the doctor is
    best effort: drift, a missing doctor, storage errors and a doctor that
    keeps changing are logged and reported as ``slot_restored=False``, but
    never fail a cancellation that already deleted the appointment.
    """

    def __init__(
        self,
        appointment_repository: AppointmentRepository,
        doctor_repository: DoctorRepository,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        self._appointment_repository = appointment_repository
        self._doctor_repository = doctor_repository
        self._max_attempts = max_attempts

    async def cancel(self, appointment_id: str, actor: Actor) -> CancellationResult:
        """Execute the cancellation."""
        if not AppointmentId.is_valid(appointment_id):
            raise BookingValidationError(
                "Invalid appointment ID", field="appointment_id", value=appointment_id
            )
        key = AppointmentId(appointment_id)

        appointment = await self._appointment_repository.find_by_id(key)
        if appointment is None:
            raise AppointmentNotFoundError(appointment_id)

        if not actor.owns(appointment.patient_id):
            raise ForbiddenActionError(details={"appointment_id": appointment_id})

        slot_date = appointment.slot_date
        slot_time = appointment.slot_time
        doctor_id = appointment.doctor_id

        # Another cancel of the same appointment got here first
        if not await self._appointment_repository.delete(key):
            raise AppointmentNotFoundError(appointment_id)

        restored = await self._return_slot(
            doctor_id, slot_date, slot_time, actor.release_filter
        )

        logger.info(
            "appointment_cancelled",
            appointment_id=appointment_id,
            doctor_id=doctor_id,
            slot_date=slot_date,
            slot_time=slot_time,
            patient_id=appointment.patient_id,
            actor=actor.role.value,
            slot_restored=restored,
        )
        return CancellationResult(
            appointment_id=appointment_id,
            slot_date=slot_date,
            slot_time=slot_time,
            slot_restored=restored,
        )

    async def _return_slot(
        self,
        doctor_id: str,
        slot_date: str,
        slot_time: str,
        patient_id: Optional[str],
    ) -> bool:
        """Put the slot back on the doctor. Returns True if the doctor was written."""
        if not DoctorId.is_valid(doctor_id):
            logger.warning("slot_return_skipped", reason="invalid_doctor_id", doctor_id=doctor_id)
            return False

        try:
            for _ in range(self._max_attempts):
                doctor = await self._doctor_repository.find_by_id(DoctorId(doctor_id))
                if doctor is None:
                    logger.warning("slot_return_skipped", reason="doctor_not_found", doctor_id=doctor_id)
                    return False

                if not reconcile_slot(doctor.slots, slot_date, slot_time, patient_id):
                    return False

                doctor.touch()
                try:
                    await self._doctor_repository.save_slots(doctor)
                    return True
                except ConcurrentModificationError:
                    continue
            reason = f"doctor kept changing after {self._max_attempts} attempts"
        except PersistenceFailureError as e:
            reason = e.message

        # The appointment is already gone; the cancellation stands either way
        logger.error(
            "slot_return_failed",
            doctor_id=doctor_id,
            slot_date=slot_date,
            slot_time=slot_time,
            patient_id=patient_id,
            reason=reason,
        )
        return False


def reconcile_slot(
    slots: SlotSet, slot_date: str, slot_time: str, patient_id: Optional[str] = None
) -> bool:
    """Release the booked entry and make its slot available again.

    When no booked entry matches, the appointment's own coordinates are
    made available anyway, unless another booking still holds them.
    Returns True if ``slots`` changed.
    """
    try:
        released = slots.release_from_booked(slot_date, slot_time, patient_id)
    except BookedSlotNotFoundError:
        logger.warning(
            "booked_slot_missing",
            slot_date=slot_date,
            slot_time=slot_time,
            patient_id=patient_id,
        )
        # Another patient's booking still holds these coordinates
        if slots.is_booked(slot_date, slot_time):
            return False
        return slots.ensure_available(slot_date, slot_time)

    slots.ensure_available(released.date, released.time)
    return True
