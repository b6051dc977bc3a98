"""
Admin endpoints: list every appointment and cancel any of them.
"""

from typing import List

from fastapi import APIRouter, Query, Request

from ...core.utils.tasks import run_to_completion
from ...domain.value_objects.actor import AdminActor
from ..deps import AdminIdentityDep, AppointmentQueriesDep, CancellationReconcilerDep
from ..schemas.booking import AppointmentOut, CancellationOut
from ..schemas.common import ApiResponse
from ..utils.responses import ok

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/appointments", response_model=ApiResponse[List[AppointmentOut]])
async def list_all_appointments(
    request: Request,
    identity: AdminIdentityDep,
    queries: AppointmentQueriesDep,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
):
    appointments = await queries.list_all(limit=limit, offset=offset)
    return ok(request, data=[AppointmentOut.from_entity(a) for a in appointments])


@router.post("/appointments/{appointment_id}/cancel", response_model=ApiResponse[CancellationOut])
async def cancel_any_appointment(
    request: Request,
    appointment_id: str,
    identity: AdminIdentityDep,
    reconciler: CancellationReconcilerDep,
):
    """Cancel an appointment on behalf of its patient."""
    result = await run_to_completion(
        reconciler.cancel(appointment_id, AdminActor(identity.subject))
    )
    return ok(request, data=CancellationOut.from_result(result), message="Appointment cancelled")
