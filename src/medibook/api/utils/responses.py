"""Envelope builders shared by routers, exception handlers and middleware."""

from typing import Any, Dict, Optional

from fastapi import Request

from ..schemas.common import ApiResponse, ErrorResponse


def request_id_of(request: Request) -> str:
    """Id assigned by RequestIDMiddleware; empty outside of it."""
    return getattr(request.state, "request_id", None) or ""


def ok(request: Request, data: Any = None, message: str = "") -> ApiResponse[Any]:
    return ApiResponse(success=True, message=message, request_id=request_id_of(request), data=data)


def fail(
    request: Request,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> ErrorResponse:
    """Error envelope carrying the caller's request id."""
    return ErrorResponse(
        error=error,
        message=message,
        request_id=request_id_of(request),
        details=details or {},
    )
