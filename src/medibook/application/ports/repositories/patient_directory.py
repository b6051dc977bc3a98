"""
Patient contact lookup port.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ...dto.booking_dto import PatientContact


class PatientDirectory(ABC):
    """Read-only source of patient contact details."""

    @abstractmethod
    async def find_contact(self, patient_id: str) -> Optional[PatientContact]:
        """Return contact details, or None when the patient is unknown."""
        pass
