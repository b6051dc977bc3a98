"""
Actor value objects: who requested a cancellation.
"""

from dataclasses import dataclass
from typing import Optional, Union

from ..enums.booking import ActorRole


@dataclass(frozen=True)
class PatientActor:
    """A patient acting on their own appointments."""

    patient_id: str
    role = ActorRole.PATIENT

    def __post_init__(self) -> None:
        if not self.patient_id:
            raise ValueError("Patient ID cannot be empty")

    def owns(self, patient_id: str) -> bool:
        return str(patient_id) == str(self.patient_id)

    @property
    def release_filter(self) -> Optional[str]:
        """Patient id that a released booked slot must carry."""
        return self.patient_id


@dataclass(frozen=True)
class AdminActor:
    """An administrator; may act on any patient's appointment."""

    admin_id: str = "admin"
    role = ActorRole.ADMIN

    def owns(self, patient_id: str) -> bool:
        return True

    @property
    def release_filter(self) -> Optional[str]:
        return None


Actor = Union[PatientActor, AdminActor]
