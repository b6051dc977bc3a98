"""MongoDB Beanie model for patient profile documents (contact source only)."""

from datetime import datetime
from typing import Optional

from beanie import Document
from pydantic import Field


class PatientMongo(Document):
    """MongoDB model for the patient profile fields the booking flow reads."""

    name: Optional[str] = Field(None, description="Patient display name")
    email: Optional[str] = Field(None, description="Patient email address")
    phone: Optional[str] = Field(None, description="Patient phone number")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "patients"
        indexes = [
            "email",
        ]
