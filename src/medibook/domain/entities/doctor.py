"""Doctor domain entity: profile fields used for booking plus the doctor's SlotSet."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..value_objects.object_id import DoctorId
from ..value_objects.snapshots import DoctorSnapshot
from .slot_set import SlotSet


@dataclass
class Doctor:
    """Doctor aggregate.

    The doctor document is the unit of consistency for slot changes:
    ``version`` is bumped by every committed write and a write carrying a
    stale version is rejected by the repository.
    """

    doctor_id: DoctorId
    name: str
    fees: float
    email: str = ""
    image: str = ""
    speciality: str = ""
    degree: str = ""
    experience: str = ""
    available: bool = True
    slots: SlotSet = field(default_factory=SlotSet)
    version: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Doctor name cannot be empty")
        if self.fees is None or self.fees < 0:
            raise ValueError("Doctor fees must be a non-negative number")

    @property
    def id(self) -> str:
        return self.doctor_id.value

    def snapshot(self) -> DoctorSnapshot:
        """Freeze the profile fields an appointment keeps."""
        return DoctorSnapshot(
            id=self.id,
            name=self.name,
            image=self.image or "",
            speciality=self.speciality or "",
            degree=self.degree or "",
            experience=self.experience or "",
            fees=self.fees,
        )

    def touch(self, now: Optional[datetime] = None) -> None:
        self.updated_at = now or datetime.utcnow()
