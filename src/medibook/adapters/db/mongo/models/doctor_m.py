"""MongoDB Beanie model for Doctor documents."""

from datetime import datetime
from typing import List, Optional

from beanie import Document
from pydantic import BaseModel, Field


class AvailableSlotMongo(BaseModel):
    """Embedded available slot."""
    date: str = Field(..., description="Slot date (YYYY-MM-DD)")
    time: str = Field(..., description="Slot time (HH:MM)")


class BookedSlotMongo(BaseModel):
    """Embedded booked slot with the patient's contact at booking time."""
    date: str = Field(..., description="Slot date (YYYY-MM-DD)")
    time: str = Field(..., description="Slot time (HH:MM)")
    patient_id: str = Field(..., description="Patient who holds the slot")
    patient_name: str = Field(default="Unknown")
    patient_email: str = Field(default="")
    patient_phone: str = Field(default="")
    booked_at: datetime = Field(default_factory=datetime.utcnow)
    status: str = Field(default="confirmed", description="pending, confirmed, completed, cancelled")


class DoctorMongo(Document):
    """MongoDB model for Doctor entity.

    ``version`` is incremented by every slot write; writers match on it to
    detect concurrent updates.
    """

    name: str = Field(..., description="Doctor display name")
    email: Optional[str] = Field(None, description="Doctor email address")
    image: str = Field(default="")
    speciality: str = Field(default="")
    degree: str = Field(default="")
    experience: str = Field(default="")
    fees: float = Field(..., ge=0, description="Consultation fee")
    available: bool = Field(default=True)
    slots_available: List[AvailableSlotMongo] = Field(default_factory=list)
    slots_booked: List[BookedSlotMongo] = Field(default_factory=list)
    version: int = Field(default=0, description="Slot write counter")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "doctors"
        indexes = [
            "speciality",
            "available",
            "created_at",
        ]
