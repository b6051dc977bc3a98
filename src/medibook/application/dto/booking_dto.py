"""Booking DTOs passed between the use cases and the API layer."""

from dataclasses import dataclass
from typing import Optional

from ...domain.entities.slot_set import BookedSlot
from ...domain.value_objects.snapshots import DoctorSnapshot


@dataclass
class PatientContact:
    """Contact fields of a patient profile; any of them may be missing."""

    patient_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


@dataclass
class BookAppointmentRequest:
    """Request DTO for booking a slot."""

    patient_id: str
    doctor_id: str
    slot_date: str
    slot_time: str


@dataclass
class BookingResult:
    """Outcome of a committed slot allocation."""

    booked_slot: BookedSlot
    doctor: DoctorSnapshot
    doctor_version: int
    purged: int = 0


@dataclass
class CancellationResult:
    """Slot coordinates freed by a cancellation."""

    appointment_id: str
    slot_date: str
    slot_time: str
    slot_restored: bool = False
