"""
MongoDB implementation of AppointmentRepository.
"""

from typing import List, Optional

from beanie import PydanticObjectId

from medibook.application.ports.repositories.appointment_repo import AppointmentRepository
from medibook.domain.entities.appointment import Appointment
from medibook.domain.value_objects.object_id import AppointmentId
from medibook.domain.value_objects.snapshots import DoctorSnapshot, PatientSnapshot

from ..models.appointment_m import (
    AppointmentMongo,
    DoctorSnapshotMongo,
    PatientSnapshotMongo,
)
from .storage_errors import storage_operation


class MongoAppointmentRepository(AppointmentRepository):
    """MongoDB implementation of AppointmentRepository."""

    async def create(self, appointment: Appointment) -> Appointment:
        """Insert an appointment document."""
        appointment_mongo = self._domain_to_mongo(appointment)
        with storage_operation("create_appointment"):
            await appointment_mongo.insert()
        return self._mongo_to_domain(appointment_mongo)

    async def find_by_id(self, appointment_id: AppointmentId) -> Optional[Appointment]:
        """Find an appointment by ID."""
        with storage_operation("find_appointment"):
            appointment_mongo = await AppointmentMongo.get(PydanticObjectId(appointment_id.value))

        if not appointment_mongo:
            return None

        return self._mongo_to_domain(appointment_mongo)

    async def delete(self, appointment_id: AppointmentId) -> bool:
        """Delete an appointment by ID."""
        collection = AppointmentMongo.get_motor_collection()
        with storage_operation("delete_appointment"):
            result = await collection.delete_one({"_id": appointment_id.to_object_id()})
        return result.deleted_count == 1

    async def find_by_patient(self, patient_id: str) -> List[Appointment]:
        """Find appointments for a patient, newest first."""
        with storage_operation("find_patient_appointments"):
            appointments_mongo = await AppointmentMongo.find(
                AppointmentMongo.patient_id == str(patient_id)
            ).sort([("created_at", -1)]).to_list()

        return [self._mongo_to_domain(a) for a in appointments_mongo]

    async def find_all(self, limit: int = 100, offset: int = 0) -> List[Appointment]:
        """Find all appointments with pagination, newest first."""
        with storage_operation("find_all_appointments"):
            appointments_mongo = await AppointmentMongo.find().sort(
                [("created_at", -1)]
            ).skip(offset).limit(limit).to_list()

        return [self._mongo_to_domain(a) for a in appointments_mongo]

    def _domain_to_mongo(self, appointment: Appointment) -> AppointmentMongo:
        """Convert domain entity to MongoDB model."""
        return AppointmentMongo(
            id=PydanticObjectId(appointment.id),
            patient_id=appointment.patient_id,
            doctor_id=appointment.doctor_id,
            slot_date=appointment.slot_date,
            slot_time=appointment.slot_time,
            patient_data=PatientSnapshotMongo(**appointment.patient_snapshot.to_dict()),
            doctor_data=DoctorSnapshotMongo(**appointment.doctor_snapshot.to_dict()),
            amount=appointment.amount,
            canceled=appointment.canceled,
            payment=appointment.payment,
            is_completed=appointment.is_completed,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
        )

    def _mongo_to_domain(self, appointment_mongo: AppointmentMongo) -> Appointment:
        """Convert MongoDB model to domain entity."""
        return Appointment(
            appointment_id=AppointmentId(str(appointment_mongo.id)),
            patient_id=appointment_mongo.patient_id,
            doctor_id=appointment_mongo.doctor_id,
            patient_snapshot=PatientSnapshot(**appointment_mongo.patient_data.model_dump()),
            doctor_snapshot=DoctorSnapshot(**appointment_mongo.doctor_data.model_dump()),
            slot_date=appointment_mongo.slot_date,
            slot_time=appointment_mongo.slot_time,
            amount=appointment_mongo.amount,
            canceled=appointment_mongo.canceled,
            payment=appointment_mongo.payment,
            is_completed=appointment_mongo.is_completed,
            created_at=appointment_mongo.created_at,
            updated_at=appointment_mongo.updated_at,
        )
