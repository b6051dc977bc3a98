"""
Request and response schemas for booking, cancellation and availability.

Request fields are optional strings so the booking core can
report missing or malformed values with its own error codes.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ...application.dto.booking_dto import CancellationResult
from ...domain.entities.appointment import Appointment
from ...domain.value_objects.slot import Slot


class BookAppointmentIn(BaseModel):
    """Book a slot with a doctor."""

    doctor_id: Optional[str] = Field(None, description="Doctor ID (24-hex object id)")
    slot_date: Optional[str] = Field(None, description="Slot date (YYYY-MM-DD)")
    slot_time: Optional[str] = Field(None, description="Slot time (HH:MM)")


class SlotIn(BaseModel):
    date: Optional[str] = Field(None, description="Slot date (YYYY-MM-DD)")
    time: Optional[str] = Field(None, description="Slot time (HH:MM)")


class AvailabilityIn(BaseModel):
    """Replace the caller's available slots."""

    slots: List[SlotIn] = Field(..., description="Complete list of available slots")


class SlotOut(BaseModel):
    date: str
    time: str

    @classmethod
    def from_slot(cls, slot: Slot) -> "SlotOut":
        return cls(date=slot.date, time=slot.time)


class AvailabilityOut(BaseModel):
    doctor_id: str
    slots: List[SlotOut]

    @classmethod
    def build(cls, doctor_id: str, slots: List[Slot]) -> "AvailabilityOut":
        return cls(doctor_id=doctor_id, slots=[SlotOut.from_slot(s) for s in slots])


class PatientDataOut(BaseModel):
    id: str
    name: str
    email: str = ""
    phone: str = ""


class DoctorDataOut(BaseModel):
    id: str
    name: str
    image: str = ""
    speciality: str = ""
    degree: str = ""
    experience: str = ""
    fees: float = 0.0


class AppointmentOut(BaseModel):
    """Appointment as returned to patients and admins."""

    id: str
    patient_id: str
    doctor_id: str
    slot_date: str
    slot_time: str
    patient_data: PatientDataOut
    doctor_data: DoctorDataOut
    amount: float
    canceled: bool
    payment: bool
    is_completed: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, appointment: Appointment) -> "AppointmentOut":
        return cls(
            id=appointment.id,
            patient_id=appointment.patient_id,
            doctor_id=appointment.doctor_id,
            slot_date=appointment.slot_date,
            slot_time=appointment.slot_time,
            patient_data=PatientDataOut(**appointment.patient_snapshot.to_dict()),
            doctor_data=DoctorDataOut(**appointment.doctor_snapshot.to_dict()),
            amount=appointment.amount,
            canceled=appointment.canceled,
            payment=appointment.payment,
            is_completed=appointment.is_completed,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
        )


class CancellationOut(BaseModel):
    appointment_id: str
    slot_date: str
    slot_time: str

    @classmethod
    def from_result(cls, result: CancellationResult) -> "CancellationOut":
        return cls(
            appointment_id=result.appointment_id,
            slot_date=result.slot_date,
            slot_time=result.slot_time,
        )
