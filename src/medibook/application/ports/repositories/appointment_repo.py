"""
Appointment repository interface for data access abstraction.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ....domain.entities.appointment import Appointment
from ....domain.value_objects.object_id import AppointmentId


class AppointmentRepository(ABC):
    """Abstract repository for appointment data access."""

    @abstractmethod
    async def create(self, appointment: Appointment) -> Appointment:
        """Insert a new appointment."""
        pass

    @abstractmethod
    async def find_by_id(self, appointment_id: AppointmentId) -> Optional[Appointment]:
        """Find an appointment by ID."""
        pass

    @abstractmethod
    async def delete(self, appointment_id: AppointmentId) -> bool:
        """Delete an appointment. Returns False if it was already gone."""
        pass

    @abstractmethod
    async def find_by_patient(self, patient_id: str) -> List[Appointment]:
        """Appointments of one patient, newest first."""
        pass

    @abstractmethod
    async def find_all(self, limit: int = 100, offset: int = 0) -> List[Appointment]:
        """All appointments, newest first."""
        pass
