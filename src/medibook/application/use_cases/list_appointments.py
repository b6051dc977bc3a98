"""Appointment listings for patients and administrators."""

from typing import List

from ...domain.entities.appointment import Appointment
from ...domain.errors import BookingValidationError
from ..ports.repositories.appointment_repo import AppointmentRepository


class AppointmentQueries:
    """Read-only appointment queries, newest first."""

    def __init__(self, appointment_repository: AppointmentRepository):
        self._appointment_repository = appointment_repository

    async def list_for_patient(self, patient_id: str) -> List[Appointment]:
        if not patient_id:
            raise BookingValidationError("Patient ID is required", field="patient_id")
        return await self._appointment_repository.find_by_patient(patient_id)

    async def list_all(self, limit: int = 100, offset: int = 0) -> List[Appointment]:
        if limit < 1 or offset < 0:
            raise BookingValidationError("Invalid pagination parameters", field="limit", value=limit)
        return await self._appointment_repository.find_all(limit=limit, offset=offset)
