"""SlotSet entity: one doctor's available and booked slots.

All operations are in-memory; the owner decides when to persist.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from ...core.utils.datetime_utils import current_slot_coordinates, is_slot_in_past
from ..enums.booking import BookedSlotStatus
from ..errors import BookedSlotNotFoundError, SlotNotAvailableError
from ..value_objects.slot import Slot
from ..value_objects.snapshots import PatientSnapshot


@dataclass
class BookedSlot:
    """A slot reserved for a patient."""

    date: str
    time: str
    patient_id: str
    patient_name: str
    patient_email: str = ""
    patient_phone: str = ""
    booked_at: datetime = field(default_factory=datetime.utcnow)
    status: BookedSlotStatus = BookedSlotStatus.CONFIRMED

    @property
    def slot(self) -> Slot:
        return Slot(self.date, self.time)

    def matches(self, date: str, time: str, patient_id: Optional[str] = None) -> bool:
        if self.date != date or self.time != time:
            return False
        if patient_id is None:
            return True
        return str(self.patient_id) == str(patient_id)


@dataclass
class SlotSet:
    """Available and booked slot collections for a single doctor.

    A (date, time) pair should sit in at most one of the two collections
    once an operation has finished. ``ensure_available`` never creates a
    duplicate available entry.
    """

    available: List[Slot] = field(default_factory=list)
    booked: List[BookedSlot] = field(default_factory=list)

    def purge_stale(self, now: Optional[datetime] = None) -> int:
        """Drop available slots whose time has already been reached.

        Returns the number of entries removed.
        """
        today, current_time = current_slot_coordinates(now)
        kept = []
        for slot in self.available:
            if not slot.date or not slot.time:
                continue
            if slot.date < today:
                continue
            if slot.date == today and slot.time <= current_time:
                continue
            kept.append(slot)

        removed = len(self.available) - len(kept)
        self.available = kept
        return removed

    def find_available(self, date: str, time: str) -> Optional[int]:
        """Index of the available slot with exactly this date and time."""
        for idx, slot in enumerate(self.available):
            if slot.matches(date, time):
                return idx
        return None

    def move_to_booked(
        self,
        date: str,
        time: str,
        patient: PatientSnapshot,
        now: Optional[datetime] = None,
    ) -> BookedSlot:
        """Take a slot out of ``available`` and record it as booked for ``patient``.

        Stale entries are not purged here; callers run ``purge_stale`` first.
        """
        idx = self.find_available(date, time)
        if idx is None:
            raise SlotNotAvailableError(date, time)

        moved = self.available.pop(idx)
        booked = BookedSlot(
            date=moved.date,
            time=moved.time,
            patient_id=str(patient.id),
            patient_name=patient.name,
            patient_email=patient.email,
            patient_phone=patient.phone,
            booked_at=now or datetime.utcnow(),
            status=BookedSlotStatus.CONFIRMED,
        )
        self.booked.append(booked)
        return booked

    def release_from_booked(
        self, date: str, time: str, patient_id: Optional[str] = None
    ) -> Slot:
        """Remove a booked entry and return its coordinates.

        With ``patient_id`` the entry must also belong to that patient;
        without it any patient's booking at that date and time matches.
        """
        for idx, entry in enumerate(self.booked):
            if entry.matches(date, time, patient_id):
                removed = self.booked.pop(idx)
                return removed.slot
        raise BookedSlotNotFoundError(date, time, patient_id)

    def ensure_available(self, date: str, time: str) -> bool:
        """Add the slot to ``available`` unless it is already there.

        Returns True when an entry was added.
        """
        if self.find_available(date, time) is not None:
            return False
        self.available.append(Slot(date, time))
        return True

    def replace_available(self, slots: Iterable[Slot]) -> None:
        """Replace the whole available set, sorted by date then time."""
        self.available = sorted(slots, key=lambda s: s.key)

    def is_booked(self, date: str, time: str) -> bool:
        return any(
            entry.matches(date, time) and entry.status.occupies_slot
            for entry in self.booked
        )

    def bookable(self, now: Optional[datetime] = None) -> List[Slot]:
        """Available slots that are neither booked nor in the past. Read-only."""
        occupied = {
            (entry.date, entry.time)
            for entry in self.booked
            if entry.status.occupies_slot
        }
        result = []
        for slot in self.available:
            if slot.key in occupied:
                continue
            if is_slot_in_past(slot.date, slot.time, now):
                continue
            result.append(slot)
        return result
