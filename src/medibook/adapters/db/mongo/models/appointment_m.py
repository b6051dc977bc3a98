"""MongoDB Beanie model for Appointment documents."""

from datetime import datetime

from beanie import Document
from pydantic import BaseModel, Field


class PatientSnapshotMongo(BaseModel):
    """Embedded copy of the patient's contact at booking time."""
    id: str = Field(..., description="Patient ID")
    name: str = Field(default="Unknown")
    email: str = Field(default="")
    phone: str = Field(default="")


class DoctorSnapshotMongo(BaseModel):
    """Embedded copy of the doctor's profile at booking time."""
    id: str = Field(..., description="Doctor ID")
    name: str = Field(...)
    image: str = Field(default="")
    speciality: str = Field(default="")
    degree: str = Field(default="")
    experience: str = Field(default="")
    fees: float = Field(default=0.0)


class AppointmentMongo(Document):
    """MongoDB model for Appointment entity."""

    patient_id: str = Field(..., description="Patient who booked")
    doctor_id: str = Field(..., description="Doctor booked with")
    slot_date: str = Field(..., description="Slot date (YYYY-MM-DD)")
    slot_time: str = Field(..., description="Slot time (HH:MM)")
    patient_data: PatientSnapshotMongo
    doctor_data: DoctorSnapshotMongo
    amount: float = Field(..., description="Doctor fee at booking time")
    canceled: bool = Field(default=False)
    payment: bool = Field(default=False)
    is_completed: bool = Field(default=False)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "appointments"
        indexes = [
            "patient_id",
            "doctor_id",
            "created_at",
        ]
