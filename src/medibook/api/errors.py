from ..domain.errors import DomainError


class APIError(Exception):
    def __init__(self, code: str, message: str, http_status: int = 400, details: dict = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.http_status = http_status
        self.details = details


class UnauthorizedError(APIError):
    def __init__(self, message: str = "Unauthorized", details: dict = None):
        super().__init__("UNAUTHORIZED", message, 401, details)


class ForbiddenError(APIError):
    def __init__(self, message: str = "Forbidden", details: dict = None):
        super().__init__("FORBIDDEN", message, 403, details)


# Domain error code -> HTTP status
DOMAIN_ERROR_STATUS = {
    "VALIDATION_ERROR": 422,
    "DOCTOR_NOT_FOUND": 404,
    "APPOINTMENT_NOT_FOUND": 404,
    "SLOT_NOT_AVAILABLE": 409,
    "FORBIDDEN": 403,
    "PERSISTENCE_FAILURE": 503,
}


def status_for_domain_error(exc: DomainError) -> int:
    return DOMAIN_ERROR_STATUS.get(exc.error_code or "", 400)
