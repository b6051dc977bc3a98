"""
Doctor repository interface for data access abstraction.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ....domain.entities.doctor import Doctor
from ....domain.entities.slot_set import BookedSlot
from ....domain.value_objects.object_id import DoctorId

# Tries for a version-checked write before giving up
DEFAULT_MAX_ATTEMPTS = 5


class DoctorRepository(ABC):
    """Abstract repository for doctor documents and their slot sets."""

    @abstractmethod
    async def find_by_id(self, doctor_id: DoctorId) -> Optional[Doctor]:
        """Find a doctor by ID. The returned entity carries the stored version."""
        pass

    @abstractmethod
    async def save_slots(self, doctor: Doctor) -> Doctor:
        """Write the doctor's slot collections if the stored version still equals ``doctor.version``.

        On success the stored version is incremented and the doctor is
        returned with the new version. A stale version raises
        ``ConcurrentModificationError`` and nothing is written; a missing
        doctor raises ``DoctorNotFoundError``. Storage failures raise
        ``PersistenceFailureError``.
        """
        pass

    @abstractmethod
    async def book_slot(self, doctor_id: DoctorId, booked: BookedSlot) -> int:
        """Move one available slot into the booked collection in a single write.

        The write is conditional on the slot at ``booked.date``/``booked.time``
        still being available, so bookings of other slots never conflict with
        it. Returns the new doctor version. Raises ``SlotNotAvailableError``
        when the slot is gone and ``DoctorNotFoundError`` when the doctor is.
        """
        pass

    @abstractmethod
    async def create(self, doctor: Doctor) -> Doctor:
        """Insert a new doctor document."""
        pass
