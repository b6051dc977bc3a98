"""FastAPI dependency providers."""

from functools import lru_cache
from typing import Annotated, Callable

from fastapi import Depends, Request

from ..adapters.db.memory import (
    InMemoryAppointmentRepository,
    InMemoryDoctorRepository,
    InMemoryPatientDirectory,
)
from ..adapters.db.mongo.repositories import (
    MongoAppointmentRepository,
    MongoDoctorRepository,
    MongoPatientDirectory,
)
from ..application.ports.repositories.appointment_repo import AppointmentRepository
from ..application.ports.repositories.doctor_repo import DoctorRepository
from ..application.ports.repositories.patient_directory import PatientDirectory
from ..application.use_cases.allocate_slot import SlotAllocator
from ..application.use_cases.book_appointment import BookingCoordinator
from ..application.use_cases.cancel_appointment import CancellationReconciler
from ..application.use_cases.list_appointments import AppointmentQueries
from ..application.use_cases.manage_availability import AvailabilityManager
from ..core.auth import Identity
from ..core.config import get_settings
from ..domain.enums.booking import ActorRole
from .errors import ForbiddenError, UnauthorizedError


@lru_cache()
def get_doctor_repository() -> DoctorRepository:
    """Get doctor repository instance."""
    if get_settings().database.is_memory:
        return InMemoryDoctorRepository()
    return MongoDoctorRepository()


@lru_cache()
def get_appointment_repository() -> AppointmentRepository:
    """Get appointment repository instance."""
    if get_settings().database.is_memory:
        return InMemoryAppointmentRepository()
    return MongoAppointmentRepository()


@lru_cache()
def get_patient_directory() -> PatientDirectory:
    """Get patient contact directory instance."""
    if get_settings().database.is_memory:
        return InMemoryPatientDirectory()
    return MongoPatientDirectory()


def get_slot_allocator() -> SlotAllocator:
    return SlotAllocator(get_doctor_repository())


def get_booking_coordinator() -> BookingCoordinator:
    settings = get_settings()
    return BookingCoordinator(
        get_slot_allocator(),
        get_appointment_repository(),
        get_patient_directory(),
        unknown_patient_name=settings.booking.unknown_patient_name,
    )


def get_cancellation_reconciler() -> CancellationReconciler:
    settings = get_settings()
    return CancellationReconciler(
        get_appointment_repository(),
        get_doctor_repository(),
        max_attempts=settings.booking.max_allocation_attempts,
    )


def get_availability_manager() -> AvailabilityManager:
    settings = get_settings()
    return AvailabilityManager(
        get_doctor_repository(),
        max_attempts=settings.booking.max_allocation_attempts,
    )


def get_appointment_queries() -> AppointmentQueries:
    return AppointmentQueries(get_appointment_repository())


def clear_dependency_cache() -> None:
    """Drop cached repositories, e.g. after the persistence backend changed."""
    get_doctor_repository.cache_clear()
    get_appointment_repository.cache_clear()
    get_patient_directory.cache_clear()


def get_identity(request: Request) -> Identity:
    """Identity resolved by the authentication middleware."""
    identity = getattr(request.state, "identity", None)
    if identity is None:
        raise UnauthorizedError("Authentication required for this endpoint")
    return identity


def require_role(role: ActorRole) -> Callable[[Identity], Identity]:
    def _check(identity: Annotated[Identity, Depends(get_identity)]) -> Identity:
        if identity.role is not role:
            raise ForbiddenError(
                f"This endpoint requires the {role.value} role",
                {"role": identity.role.value},
            )
        return identity

    return _check


PatientIdentityDep = Annotated[Identity, Depends(require_role(ActorRole.PATIENT))]
DoctorIdentityDep = Annotated[Identity, Depends(require_role(ActorRole.DOCTOR))]
AdminIdentityDep = Annotated[Identity, Depends(require_role(ActorRole.ADMIN))]

BookingCoordinatorDep = Annotated[BookingCoordinator, Depends(get_booking_coordinator)]
CancellationReconcilerDep = Annotated[CancellationReconciler, Depends(get_cancellation_reconciler)]
AvailabilityManagerDep = Annotated[AvailabilityManager, Depends(get_availability_manager)]
AppointmentQueriesDep = Annotated[AppointmentQueries, Depends(get_appointment_queries)]
