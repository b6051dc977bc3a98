"""
Utility helpers shared across layers.
"""

from .datetime_utils import current_slot_coordinates, is_past_date, is_valid_slot_date, is_valid_slot_time
from .tasks import run_to_completion

__all__ = [
    "current_slot_coordinates",
    "is_past_date",
    "is_valid_slot_date",
    "is_valid_slot_time",
    "run_to_completion",
]
