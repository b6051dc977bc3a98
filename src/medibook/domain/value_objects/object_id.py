"""
Identifier value objects for documents keyed by a 24-hex object id.
"""

from dataclasses import dataclass
from typing import Any

from bson import ObjectId


@dataclass(frozen=True)
class _ObjectIdentifier:
    """Immutable object-id backed identifier."""

    value: str

    label = "Identifier"

    def __post_init__(self) -> None:
        """Validate identifier format."""
        if not self.value:
            raise ValueError(f"{self.label} cannot be empty")

        if not isinstance(self.value, str):
            raise ValueError(f"{self.label} must be a string")

        if not ObjectId.is_valid(self.value):
            raise ValueError(f"{self.label} must be a 24-character hex object id")

    def __str__(self) -> str:
        """String representation."""
        return self.value

    def __eq__(self, other: Any) -> bool:
        """Equality comparison."""
        if not isinstance(other, type(self)):
            return False
        return self.value == other.value

    def __hash__(self) -> int:
        """Hash for use in sets and dictionaries."""
        return hash(self.value)

    @classmethod
    def is_valid(cls, value: Any) -> bool:
        return isinstance(value, str) and ObjectId.is_valid(value)

    @classmethod
    def generate(cls):
        """Generate a new identifier."""
        return cls(str(ObjectId()))

    def to_object_id(self) -> ObjectId:
        return ObjectId(self.value)


@dataclass(frozen=True, eq=False)
class DoctorId(_ObjectIdentifier):
    label = "Doctor ID"


@dataclass(frozen=True, eq=False)
class AppointmentId(_ObjectIdentifier):
    label = "Appointment ID"
