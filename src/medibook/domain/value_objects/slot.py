"""
Slot value object: one bookable (date, time) window.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Slot:
    """Immutable (date, time) pair.

    Both fields are opaque strings. Two slots are the same slot only when
    both strings are equal; no normalisation is applied.
    """

    date: str
    time: str

    def __str__(self) -> str:
        return f"{self.date} {self.time}"

    @property
    def key(self) -> Tuple[str, str]:
        """Sort and lookup key, ordered by date then time."""
        return (self.date, self.time)

    def matches(self, date: str, time: str) -> bool:
        return self.date == date and self.time == time
