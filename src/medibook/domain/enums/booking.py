"""
Status enums for booked slots and actor roles.
"""

from enum import Enum


class BookedSlotStatus(str, Enum):
    """Lifecycle of a doctor's booked slot entry."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    # Never written by the cancellation path, which removes the entry instead
    CANCELLED = "cancelled"

    @property
    def occupies_slot(self) -> bool:
        return self is not BookedSlotStatus.CANCELLED


class ActorRole(str, Enum):
    """Who is calling into the booking core."""
    PATIENT = "patient"
    DOCTOR = "doctor"
    ADMIN = "admin"
