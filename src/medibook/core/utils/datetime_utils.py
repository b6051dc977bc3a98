"""
Date and time helpers for slot coordinates.

Slot dates and times are plain local strings (``YYYY-MM-DD`` / ``HH:MM``).
Ordering and equality are lexicographic on those strings, which coincides
with calendar ordering for these formats. Nothing here converts a slot into
a timezone-aware datetime.
"""

import re
from datetime import datetime
from typing import Optional, Tuple

SLOT_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
SLOT_TIME_PATTERN = re.compile(r"[0-9]{2}:[0-9]{2}")


def current_slot_coordinates(now: Optional[datetime] = None) -> Tuple[str, str]:
    """Return ``(today, current_time)`` formatted like slot coordinates."""
    now = now or datetime.now()
    return now.strftime("%Y-%m-%d"), now.strftime("%H:%M")


def is_valid_slot_date(value: str) -> bool:
    return bool(value) and bool(SLOT_DATE_PATTERN.fullmatch(value))


def is_valid_slot_time(value: str) -> bool:
    return bool(value) and bool(SLOT_TIME_PATTERN.fullmatch(value))


def is_past_date(slot_date: str, now: Optional[datetime] = None) -> bool:
    """Check whether a slot date is strictly before today."""
    today, _ = current_slot_coordinates(now)
    return slot_date < today


def is_slot_in_past(slot_date: str, slot_time: str, now: Optional[datetime] = None) -> bool:
    """A slot is stale once its date is before today, or it is today and its time has been reached."""
    today, current_time = current_slot_coordinates(now)
    if slot_date < today:
        return True
    return slot_date == today and slot_time <= current_time
