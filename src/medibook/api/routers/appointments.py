"""
Patient appointment endpoints: book, list own, cancel own.
"""

from typing import List

from fastapi import APIRouter, Request

from ...application.dto.booking_dto import BookAppointmentRequest
from ...core.utils.tasks import run_to_completion
from ...domain.value_objects.actor import PatientActor
from ..deps import (
    AppointmentQueriesDep,
    BookingCoordinatorDep,
    CancellationReconcilerDep,
    PatientIdentityDep,
)
from ..schemas.booking import AppointmentOut, BookAppointmentIn, CancellationOut
from ..schemas.common import ApiResponse
from ..utils.responses import ok

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.post("", status_code=201, response_model=ApiResponse[AppointmentOut])
async def book_appointment(
    request: Request,
    payload: BookAppointmentIn,
    identity: PatientIdentityDep,
    coordinator: BookingCoordinatorDep,
):
    """
    Book a slot with a doctor for the calling patient.

    409 when the slot is taken, past, or was never offered.
    """
    appointment = await run_to_completion(
        coordinator.book(
            BookAppointmentRequest(
                patient_id=identity.subject,
                doctor_id=payload.doctor_id,
                slot_date=payload.slot_date,
                slot_time=payload.slot_time,
            )
        )
    )
    return ok(request, data=AppointmentOut.from_entity(appointment), message="Appointment booked")


@router.get("", response_model=ApiResponse[List[AppointmentOut]])
async def list_my_appointments(
    request: Request,
    identity: PatientIdentityDep,
    queries: AppointmentQueriesDep,
):
    """List the calling patient's appointments, newest first."""
    appointments = await queries.list_for_patient(identity.subject)
    return ok(request, data=[AppointmentOut.from_entity(a) for a in appointments])


@router.post("/{appointment_id}/cancel", response_model=ApiResponse[CancellationOut])
async def cancel_appointment(
    request: Request,
    appointment_id: str,
    identity: PatientIdentityDep,
    reconciler: CancellationReconcilerDep,
):
    """Cancel one of the calling patient's appointments and free its slot."""
    result = await run_to_completion(
        reconciler.cancel(appointment_id, PatientActor(identity.subject))
    )
    return ok(request, data=CancellationOut.from_result(result), message="Appointment cancelled")
