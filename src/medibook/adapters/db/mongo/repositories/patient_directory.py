"""
MongoDB implementation of PatientDirectory.
"""

from typing import Optional

from beanie import PydanticObjectId
from bson import ObjectId

from medibook.application.dto.booking_dto import PatientContact
from medibook.application.ports.repositories.patient_directory import PatientDirectory

from ..models.patient_m import PatientMongo
from .storage_errors import storage_operation


class MongoPatientDirectory(PatientDirectory):
    """Reads contact fields from patient profile documents."""

    async def find_contact(self, patient_id: str) -> Optional[PatientContact]:
        if not ObjectId.is_valid(str(patient_id)):
            return None

        with storage_operation("find_patient"):
            patient_mongo = await PatientMongo.get(PydanticObjectId(str(patient_id)))

        if not patient_mongo:
            return None

        return PatientContact(
            patient_id=str(patient_mongo.id),
            name=patient_mongo.name,
            email=patient_mongo.email,
            phone=patient_mongo.phone,
        )
