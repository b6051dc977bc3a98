"""
Doctor slot endpoints.

``/doctors/{doctor_id}/slots`` is public and read-only; the availability
endpoints act on the calling doctor's own document.
"""

from fastapi import APIRouter, Request

from ...core.utils.tasks import run_to_completion
from ..deps import AvailabilityManagerDep, DoctorIdentityDep
from ..schemas.booking import AvailabilityIn, AvailabilityOut
from ..schemas.common import ApiResponse
from ..utils.responses import ok

router = APIRouter(prefix="/doctors", tags=["doctors"])


@router.get("/me/availability", response_model=ApiResponse[AvailabilityOut])
async def get_my_availability(
    request: Request,
    identity: DoctorIdentityDep,
    manager: AvailabilityManagerDep,
):
    slots = await manager.list_availability(identity.subject)
    return ok(request, data=AvailabilityOut.build(identity.subject, slots))


@router.put("/me/availability", response_model=ApiResponse[AvailabilityOut])
async def set_my_availability(
    request: Request,
    payload: AvailabilityIn,
    identity: DoctorIdentityDep,
    manager: AvailabilityManagerDep,
):
    """Replace the calling doctor's available slots."""
    slots = await run_to_completion(
        manager.set_availability(identity.subject, [s.model_dump() for s in payload.slots])
    )
    return ok(request, data=AvailabilityOut.build(identity.subject, slots), message="Availability updated")


@router.get("/{doctor_id}/slots", response_model=ApiResponse[AvailabilityOut])
async def list_bookable_slots(
    request: Request,
    doctor_id: str,
    manager: AvailabilityManagerDep,
):
    """Slots patients can book now: not booked and not in the past."""
    slots = await manager.list_bookable_slots(doctor_id)
    return ok(request, data=AvailabilityOut.build(doctor_id, slots))
