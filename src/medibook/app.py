"""
FastAPI application factory and main app configuration.
"""

from contextlib import asynccontextmanager
import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.errors import APIError, status_for_domain_error
from .api.routers import admin, appointments, doctors, health
from .api.utils.responses import fail, request_id_of
from .core.config import get_settings
from .core.structured_logger import configure_logging
from .domain.errors import DomainError
from .middleware.auth_middleware import AuthenticationMiddleware
from .middleware.request_id_middleware import RequestIDMiddleware

logger = logging.getLogger("medibook")


async def _init_database(settings):
    """Connect to MongoDB and register the Beanie document models."""
    from beanie import init_beanie
    from motor.motor_asyncio import AsyncIOMotorClient
    import certifi

    from .adapters.db.mongo.models import DOCUMENT_MODELS

    mongo_uri = settings.database.uri
    timeout_ms = settings.database.server_selection_timeout_ms

    # Enable TLS only for Atlas SRV URIs
    if mongo_uri.startswith("mongodb+srv://"):
        client = AsyncIOMotorClient(
            mongo_uri,
            serverSelectionTimeoutMS=timeout_ms,
            tls=True,
            tlsCAFile=certifi.where(),
            tlsAllowInvalidCertificates=False,
        )
    else:
        client = AsyncIOMotorClient(mongo_uri, serverSelectionTimeoutMS=timeout_ms)

    await init_beanie(database=client[settings.database.db_name], document_models=DOCUMENT_MODELS)
    return client


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.app_version} ({settings.app_env})")

    client = None
    if settings.database.is_memory:
        logger.warning("Using in-memory persistence; data is lost on restart")
    else:
        try:
            client = await _init_database(settings)
            logger.info("Database connection established")
        except Exception as e:
            logger.error(f"Database connection failed: {type(e).__name__}: {e}")
            logger.error(f"Traceback:\n{traceback.format_exc()}")
            raise

    yield

    if client is not None:
        client.close()
    logger.info(f"Shutting down {settings.app_name}")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.logging.level, settings.logging.format)

    app = FastAPI(
        title=settings.app_name,
        description="Doctor slot booking and appointment consistency service",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allowed_origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allowed_methods,
        allow_headers=settings.cors.allowed_headers,
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(AuthenticationMiddleware)
    # Added last so it wraps everything and the request id exists for auth failures
    app.add_middleware(RequestIDMiddleware)

    app.include_router(health.router)
    app.include_router(appointments.router)
    app.include_router(doctors.router)
    app.include_router(admin.router)

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        req_id = request_id_of(request)
        status_code = status_for_domain_error(exc)
        log = logger.error if status_code >= 500 else logger.info
        log(f"DomainError: {exc.error_code} ({status_code}) {exc.message} | request_id={req_id}")
        return JSONResponse(
            status_code=status_code,
            content=fail(request, error=exc.error_code or "DOMAIN_ERROR", message=exc.message, details=exc.details or {}).model_dump(),
        )

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        req_id = request_id_of(request)
        logger.warning(f"APIError: {exc.code} ({exc.http_status}) {exc.message} | request_id={req_id}")
        return JSONResponse(
            status_code=exc.http_status,
            content=fail(request, error=exc.code, message=exc.message, details=exc.details or {}).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        req_id = request_id_of(request)
        error_details = exc.errors()
        logger.info(f"ValidationError on {request.method} {request.url.path}: {error_details} | request_id={req_id}")

        error_messages = []
        errors = []
        for error in error_details:
            loc = " -> ".join(str(x) for x in error.get("loc", []))
            msg = error.get("msg", "Validation error")
            error_messages.append(f"{loc}: {msg}")
            errors.append({"loc": list(error.get("loc", [])), "msg": msg, "type": error.get("type")})

        return JSONResponse(
            status_code=422,
            content=fail(
                request,
                error="INVALID_INPUT",
                message=f"Input validation failed: {'; '.join(error_messages)}",
                details={"errors": errors, "path": request.url.path},
            ).model_dump(),
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        req_id = request_id_of(request)
        logger.error(f"Unhandled error: {type(exc).__name__}: {exc} | request_id={req_id}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=fail(
                request,
                error="INTERNAL_ERROR",
                message="An unexpected error has occurred. Please try again later.",
            ).model_dump(),
        )

    @app.get("/", tags=["health"])
    async def root():
        """Root endpoint with API information."""
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.app_env,
            "status": "running",
            "docs": "/docs",
            "endpoints": {
                "health": "GET /health",
                "book_appointment": "POST /appointments",
                "my_appointments": "GET /appointments",
                "cancel_appointment": "POST /appointments/{appointment_id}/cancel",
                "bookable_slots": "GET /doctors/{doctor_id}/slots",
                "my_availability": "GET|PUT /doctors/me/availability",
                "all_appointments": "GET /admin/appointments",
                "admin_cancel": "POST /admin/appointments/{appointment_id}/cancel",
            },
        }

    return app
