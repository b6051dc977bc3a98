"""Book Appointment use case: allocate a slot, then record the appointment."""

from datetime import datetime
from typing import Callable

from ...core.structured_logger import get_logger
from ...domain.entities.appointment import Appointment
from ...domain.errors import BookingValidationError, PersistenceFailureError
from ...domain.value_objects.object_id import DoctorId
from ...domain.value_objects.snapshots import PatientSnapshot
from ..dto.booking_dto import BookAppointmentRequest
from ..ports.repositories.appointment_repo import AppointmentRepository
from ..ports.repositories.patient_directory import PatientDirectory
from .allocate_slot import SlotAllocator

logger = get_logger("medibook.booking", component="coordinator")


class BookingCoordinator:
    """Use case for booking a slot with a doctor.

    The doctor write always commits before the appointment insert. If the
    insert then fails the slot stays booked with no appointment behind it;
    that case is logged at error level for an operator to release.
    """

    def __init__(
        self,
        allocator: SlotAllocator,
        appointment_repository: AppointmentRepository,
        patient_directory: PatientDirectory,
        unknown_patient_name: str = "Unknown",
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self._allocator = allocator
        self._appointment_repository = appointment_repository
        self._patient_directory = patient_directory
        self._unknown_patient_name = unknown_patient_name
        self._clock = clock

    async def book(self, request: BookAppointmentRequest) -> Appointment:
        """Execute the booking."""
        doctor_id = self._validate(request)
        patient = await self._patient_snapshot(request.patient_id)

        result = await self._allocator.allocate(
            doctor_id, request.slot_date, request.slot_time, patient
        )

        appointment = Appointment.from_booking(
            result.booked_slot, patient, result.doctor, now=self._clock()
        )
        try:
            saved = await self._appointment_repository.create(appointment)
        except PersistenceFailureError as e:
            logger.error(
                "booked slot without appointment",
                doctor_id=doctor_id.value,
                slot_date=request.slot_date,
                slot_time=request.slot_time,
                patient_id=patient.id,
                appointment_id=appointment.id,
                reason=e.message,
            )
            raise

        logger.info(
            "appointment_booked",
            appointment_id=saved.id,
            doctor_id=saved.doctor_id,
            slot_date=saved.slot_date,
            slot_time=saved.slot_time,
            patient_id=saved.patient_id,
            amount=saved.amount,
        )
        return saved

    def _validate(self, request: BookAppointmentRequest) -> DoctorId:
        if not request.patient_id:
            raise BookingValidationError("Patient ID is required", field="patient_id")
        missing = [
            name
            for name, value in (
                ("doctor_id", request.doctor_id),
                ("slot_date", request.slot_date),
                ("slot_time", request.slot_time),
            )
            if not value
        ]
        if missing:
            raise BookingValidationError(
                f"Missing required fields: {', '.join(missing)}", field=missing[0]
            )
        if not DoctorId.is_valid(request.doctor_id):
            raise BookingValidationError(
                "Invalid doctor ID", field="doctor_id", value=request.doctor_id
            )
        return DoctorId(request.doctor_id)

    async def _patient_snapshot(self, patient_id: str) -> PatientSnapshot:
        contact = await self._patient_directory.find_contact(patient_id)
        if contact is None:
            return PatientSnapshot(id=str(patient_id), name=self._unknown_patient_name)
        return PatientSnapshot(
            id=str(patient_id),
            name=contact.name or self._unknown_patient_name,
            email=contact.email or "",
            phone=contact.phone or "",
        )
