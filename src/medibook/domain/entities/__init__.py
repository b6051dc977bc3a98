"""
Domain entities package.
"""

from .appointment import Appointment
from .doctor import Doctor
from .slot_set import BookedSlot, SlotSet

__all__ = [
    "Appointment",
    "BookedSlot",
    "Doctor",
    "SlotSet",
]
