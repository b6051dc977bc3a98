"""Slot allocation: the only path from a doctor's available slots to booked ones."""

from datetime import datetime
from typing import Callable

from ...core.structured_logger import get_logger
from ...domain.entities.doctor import Doctor
from ...domain.errors import (
    ConcurrentModificationError,
    DoctorNotFoundError,
    SlotNotAvailableError,
)
from ...domain.value_objects.object_id import DoctorId
from ...domain.value_objects.snapshots import PatientSnapshot
from ..dto.booking_dto import BookingResult
from ..ports.repositories.doctor_repo import DoctorRepository

logger = get_logger("medibook.booking", component="allocator")


class SlotAllocator:
    """Moves one slot from available to booked on a doctor document.

    The slot is checked against a fresh read of the doctor with stale entries
    purged, then committed by a write that only matches while that same slot
    is still available. Two requests for one slot can never both succeed, and
    requests for different slots of the same doctor do not get in each
    other's way.
    """

    def __init__(
        self,
        doctor_repository: DoctorRepository,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._doctor_repository = doctor_repository
        self._clock = clock

    async def allocate(
        self,
        doctor_id: DoctorId,
        slot_date: str,
        slot_time: str,
        patient: PatientSnapshot,
    ) -> BookingResult:
        """Book ``slot_date``/``slot_time`` with ``doctor_id`` for ``patient``.

        Raises DoctorNotFoundError, SlotNotAvailableError or
        PersistenceFailureError. Returns only after the doctor write committed.
        """
        log = logger.bind(
            doctor_id=doctor_id.value,
            slot_date=slot_date,
            slot_time=slot_time,
            patient_id=patient.id,
        )

        doctor = await self._load(doctor_id)
        now = self._clock()
        snapshot = doctor.snapshot()

        purged = doctor.slots.purge_stale(now)
        if purged:
            await self._persist_purge(doctor, log)

        if doctor.slots.find_available(slot_date, slot_time) is None:
            log.info("slot_allocation", outcome="not_available", purged=purged)
            raise SlotNotAvailableError(slot_date, slot_time)

        booked = doctor.slots.move_to_booked(slot_date, slot_time, patient, now=now)
        try:
            version = await self._doctor_repository.book_slot(doctor_id, booked)
        except SlotNotAvailableError:
            log.info("slot_allocation", outcome="taken_concurrently", purged=purged)
            raise

        log.info("slot_allocation", outcome="booked", purged=purged, doctor_version=version)
        return BookingResult(
            booked_slot=booked,
            doctor=snapshot,
            doctor_version=version,
            purged=purged,
        )

    async def _load(self, doctor_id: DoctorId) -> Doctor:
        doctor = await self._doctor_repository.find_by_id(doctor_id)
        if doctor is None:
            raise DoctorNotFoundError(doctor_id.value)
        return doctor

    async def _persist_purge(self, doctor: Doctor, log) -> None:
        # A concurrent writer has its own purge to do; losing here changes nothing.
        try:
            await self._doctor_repository.save_slots(doctor)
        except ConcurrentModificationError:
            log.debug("stale_purge_skipped", doctor_version=doctor.version)
