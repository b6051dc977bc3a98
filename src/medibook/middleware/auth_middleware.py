"""
Authentication middleware - resolves the caller before request processing.

Public endpoints (health checks, docs, a doctor's bookable slots) are
excluded. Every other endpoint needs a configured API key; the resolved
identity is stored on ``request.state.identity``.
"""
import logging
import re

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ..api.utils.responses import fail
from ..core.auth import get_auth_service

logger = logging.getLogger(__name__)


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """
    Middleware to enforce authentication on booking endpoints.
    """

    PUBLIC_PATHS = {
        "/",
        "/favicon.ico",
        "/docs",
        "/redoc",
        "/openapi.json",
        "/health",
        "/health/ready",
    }

    PUBLIC_PATH_PREFIXES = {
        "/docs",
        "/redoc",
    }

    PUBLIC_PATH_PATTERNS = (
        re.compile(r"^/doctors/[^/]+/slots$"),
    )

    def is_public_endpoint(self, path: str) -> bool:
        """Check if endpoint is public and doesn't require authentication."""
        normalized_path = path.rstrip("/") or "/"

        if normalized_path in self.PUBLIC_PATHS:
            return True

        for prefix in self.PUBLIC_PATH_PREFIXES:
            if path.startswith(prefix + "/"):
                return True

        if normalized_path.startswith("/doctors/me/"):
            return False
        return any(pattern.match(normalized_path) for pattern in self.PUBLIC_PATH_PATTERNS)

    async def dispatch(self, request: Request, call_next):
        if self.is_public_endpoint(request.url.path):
            return await call_next(request)

        auth_service = get_auth_service()

        api_key = request.headers.get("X-API-Key")
        auth_header = request.headers.get("Authorization")

        try:
            identity = auth_service.get_identity_from_request(
                api_key=api_key,
                auth_header=auth_header,
            )
        except HTTPException as e:
            logger.warning(
                f"Authentication failed for {request.method} {request.url.path}: {e.detail} "
                f"(IP: {request.client.host if request.client else 'unknown'})"
            )
            return JSONResponse(
                status_code=401,
                content=fail(
                    request,
                    error="UNAUTHORIZED",
                    message="Authentication required for this endpoint",
                    details={
                        "path": request.url.path,
                        "method": request.method,
                        "hint": "Provide X-API-Key header or Authorization Bearer token",
                    },
                ).model_dump(),
                headers={"WWW-Authenticate": "Bearer"},
            )

        request.state.identity = identity
        logger.debug(f"Authenticated {identity.role.value} {identity.subject} accessing {request.url.path}")
        return await call_next(request)
