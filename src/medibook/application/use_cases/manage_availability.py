"""Doctor availability: publish the available slot set and read it back."""

from datetime import datetime
from typing import Any, Callable, List, Mapping

from ...core.structured_logger import get_logger
from ...core.utils.datetime_utils import (
    is_past_date,
    is_valid_slot_date,
    is_valid_slot_time,
)
from ...domain.entities.doctor import Doctor
from ...domain.errors import (
    BookingValidationError,
    ConcurrentModificationError,
    DoctorNotFoundError,
    PersistenceFailureError,
)
from ...domain.value_objects.object_id import DoctorId
from ...domain.value_objects.slot import Slot
from ..ports.repositories.doctor_repo import DEFAULT_MAX_ATTEMPTS, DoctorRepository

logger = get_logger("medibook.availability")


class AvailabilityManager:
    """Use cases over a doctor's available slots."""

    def __init__(
        self,
        doctor_repository: DoctorRepository,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._doctor_repository = doctor_repository
        self._max_attempts = max_attempts
        self._clock = clock

    async def list_availability(self, doctor_id: str) -> List[Slot]:
        """The doctor's stored available slots, as stored."""
        doctor = await self._load(doctor_id)
        return list(doctor.slots.available)

    async def list_bookable_slots(self, doctor_id: str) -> List[Slot]:
        """Slots a patient can book right now. Nothing is written."""
        doctor = await self._load(doctor_id)
        return doctor.slots.bookable(self._clock())

    async def set_availability(self, doctor_id: str, slots: Any) -> List[Slot]:
        """Replace the doctor's available slots with ``slots``.

        Every entry is validated before anything is written; one bad entry
        rejects the whole update. Entries that are already booked are left
        out of the available set.
        """
        validated = validate_slots(slots, self._clock())

        for _ in range(self._max_attempts):
            doctor = await self._load(doctor_id)
            doctor.slots.replace_available(
                slot for slot in validated if not doctor.slots.is_booked(slot.date, slot.time)
            )
            doctor.touch()
            try:
                saved = await self._doctor_repository.save_slots(doctor)
            except ConcurrentModificationError:
                continue
            logger.info(
                "availability_updated",
                doctor_id=doctor.id,
                slots=len(saved.slots.available),
                doctor_version=saved.version,
            )
            return list(saved.slots.available)

        raise PersistenceFailureError(
            "set_availability",
            f"doctor kept changing after {self._max_attempts} attempts",
            {"doctor_id": doctor_id},
        )

    async def _load(self, doctor_id: str) -> Doctor:
        if not DoctorId.is_valid(doctor_id):
            raise BookingValidationError("Invalid doctor ID", field="doctor_id", value=doctor_id)
        doctor = await self._doctor_repository.find_by_id(DoctorId(doctor_id))
        if doctor is None:
            raise DoctorNotFoundError(doctor_id)
        return doctor


def validate_slots(slots: Any, now: datetime) -> List[Slot]:
    """Check a raw slot list and convert it to ``Slot`` values.

    Duplicates collapse to one entry.
    """
    if not isinstance(slots, (list, tuple)):
        raise BookingValidationError("Slots must be an array", field="slots")

    result: List[Slot] = []
    seen = set()
    for index, raw in enumerate(slots):
        slot_date, slot_time = _coordinates(raw)
        if not isinstance(slot_date, str) or not isinstance(slot_time, str) or not slot_date or not slot_time:
            raise BookingValidationError(
                f"Slot {index} must have date and time", field="slots", value=index
            )
        if not is_valid_slot_date(slot_date):
            raise BookingValidationError(
                f"Invalid date format: {slot_date}. Use YYYY-MM-DD", field="date", value=slot_date
            )
        if not is_valid_slot_time(slot_time):
            raise BookingValidationError(
                f"Invalid time format: {slot_time}. Use HH:MM", field="time", value=slot_time
            )
        if is_past_date(slot_date, now):
            raise BookingValidationError(
                f"Cannot add slots for past dates: {slot_date}", field="date", value=slot_date
            )
        if (slot_date, slot_time) in seen:
            continue
        seen.add((slot_date, slot_time))
        result.append(Slot(slot_date, slot_time))
    return result


def _coordinates(raw: Any):
    if isinstance(raw, Slot):
        return raw.date, raw.time
    if isinstance(raw, Mapping):
        return raw.get("date"), raw.get("time")
    return getattr(raw, "date", None), getattr(raw, "time", None)
