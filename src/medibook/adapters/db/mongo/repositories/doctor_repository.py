"""
MongoDB implementation of DoctorRepository.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from beanie import PydanticObjectId
from pymongo import ReturnDocument

from medibook.application.ports.repositories.doctor_repo import DoctorRepository
from medibook.domain.entities.doctor import Doctor
from medibook.domain.entities.slot_set import BookedSlot, SlotSet
from medibook.domain.enums.booking import BookedSlotStatus
from medibook.domain.errors import (
    ConcurrentModificationError,
    DoctorNotFoundError,
    SlotNotAvailableError,
)
from medibook.domain.value_objects.object_id import DoctorId
from medibook.domain.value_objects.slot import Slot

from ..models.doctor_m import AvailableSlotMongo, BookedSlotMongo, DoctorMongo
from .storage_errors import storage_operation


class MongoDoctorRepository(DoctorRepository):
    """MongoDB implementation of DoctorRepository."""

    async def find_by_id(self, doctor_id: DoctorId) -> Optional[Doctor]:
        """Find a doctor by ID."""
        with storage_operation("find_doctor"):
            doctor_mongo = await DoctorMongo.get(PydanticObjectId(doctor_id.value))

        if not doctor_mongo:
            return None

        return self._mongo_to_domain(doctor_mongo)

    async def save_slots(self, doctor: Doctor) -> Doctor:
        """Write both slot collections in one update guarded by the version field."""
        collection = DoctorMongo.get_motor_collection()
        oid = doctor.doctor_id.to_object_id()
        updated_at = datetime.utcnow()

        with storage_operation("save_doctor_slots"):
            result = await collection.update_one(
                {"_id": oid, "version": doctor.version},
                {
                    "$set": {**self._slots_to_mongo(doctor.slots), "updated_at": updated_at},
                    "$inc": {"version": 1},
                },
            )
            if result.matched_count == 0:
                exists = await collection.count_documents({"_id": oid}, limit=1)
                if not exists:
                    raise DoctorNotFoundError(doctor.id)
                raise ConcurrentModificationError(doctor.id, doctor.version)

        doctor.version += 1
        doctor.updated_at = updated_at
        return doctor

    async def book_slot(self, doctor_id: DoctorId, booked: BookedSlot) -> int:
        """Pull the slot from available and push the booking, matched on the slot itself."""
        collection = DoctorMongo.get_motor_collection()
        oid = doctor_id.to_object_id()
        coordinates = {"date": booked.date, "time": booked.time}

        with storage_operation("book_doctor_slot"):
            updated = await collection.find_one_and_update(
                {"_id": oid, "slots_available": {"$elemMatch": coordinates}},
                {
                    "$pull": {"slots_available": coordinates},
                    "$push": {"slots_booked": self._booked_to_mongo(booked)},
                    "$set": {"updated_at": datetime.utcnow()},
                    "$inc": {"version": 1},
                },
                projection={"version": 1},
                return_document=ReturnDocument.AFTER,
            )
            if updated is None:
                exists = await collection.count_documents({"_id": oid}, limit=1)
                if not exists:
                    raise DoctorNotFoundError(doctor_id.value)
                raise SlotNotAvailableError(booked.date, booked.time)

        return updated["version"]

    async def create(self, doctor: Doctor) -> Doctor:
        """Insert a new doctor document."""
        slots = self._slots_to_mongo(doctor.slots)
        doctor_mongo = DoctorMongo(
            id=PydanticObjectId(doctor.id),
            name=doctor.name,
            email=doctor.email or None,
            image=doctor.image,
            speciality=doctor.speciality,
            degree=doctor.degree,
            experience=doctor.experience,
            fees=doctor.fees,
            available=doctor.available,
            slots_available=[AvailableSlotMongo(**s) for s in slots["slots_available"]],
            slots_booked=[BookedSlotMongo(**b) for b in slots["slots_booked"]],
            version=doctor.version,
            created_at=doctor.created_at,
            updated_at=doctor.updated_at,
        )
        with storage_operation("create_doctor"):
            await doctor_mongo.insert()
        return self._mongo_to_domain(doctor_mongo)

    def _slots_to_mongo(self, slots: SlotSet) -> Dict[str, Any]:
        return {
            "slots_available": [{"date": s.date, "time": s.time} for s in slots.available],
            "slots_booked": [self._booked_to_mongo(b) for b in slots.booked],
        }

    def _booked_to_mongo(self, booked: BookedSlot) -> Dict[str, Any]:
        return {
            "date": booked.date,
            "time": booked.time,
            "patient_id": booked.patient_id,
            "patient_name": booked.patient_name,
            "patient_email": booked.patient_email,
            "patient_phone": booked.patient_phone,
            "booked_at": booked.booked_at,
            "status": booked.status.value,
        }

    def _mongo_to_domain(self, doctor_mongo: DoctorMongo) -> Doctor:
        """Convert MongoDB model to domain entity."""
        slots = SlotSet(
            available=[Slot(s.date, s.time) for s in doctor_mongo.slots_available],
            booked=[
                BookedSlot(
                    date=b.date,
                    time=b.time,
                    patient_id=b.patient_id,
                    patient_name=b.patient_name,
                    patient_email=b.patient_email or "",
                    patient_phone=b.patient_phone or "",
                    booked_at=b.booked_at,
                    status=BookedSlotStatus(b.status),
                )
                for b in doctor_mongo.slots_booked
            ],
        )
        return Doctor(
            doctor_id=DoctorId(str(doctor_mongo.id)),
            name=doctor_mongo.name,
            fees=doctor_mongo.fees,
            email=doctor_mongo.email or "",
            image=doctor_mongo.image,
            speciality=doctor_mongo.speciality,
            degree=doctor_mongo.degree,
            experience=doctor_mongo.experience,
            available=doctor_mongo.available,
            slots=slots,
            version=doctor_mongo.version,
            created_at=doctor_mongo.created_at,
            updated_at=doctor_mongo.updated_at,
        )
