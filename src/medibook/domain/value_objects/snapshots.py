"""
Snapshots of patient and doctor data frozen into an appointment at booking time.

Later profile edits must not rewrite appointment history, so these are
copies, not references.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class PatientSnapshot:
    """Patient identity and contact as known when the slot was booked."""

    id: str
    name: str
    email: str = ""
    phone: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DoctorSnapshot:
    """Doctor profile fields shown alongside an appointment."""

    id: str
    name: str
    image: str = ""
    speciality: str = ""
    degree: str = ""
    experience: str = ""
    fees: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
