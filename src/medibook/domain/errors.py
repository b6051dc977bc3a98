"""
Domain-specific error types for booking rule violations.

Every failure that leaves the booking core is one of these. The
``error_code`` is what the API layer uses to pick a status code.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class BookingValidationError(DomainError):
    """Malformed or missing request fields."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None) -> None:
        details = {"field": field, "value": value} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class DoctorNotFoundError(DomainError):
    """Doctor not found."""

    def __init__(self, doctor_id: str) -> None:
        message = f"Doctor with ID '{doctor_id}' not found"
        super().__init__(message, "DOCTOR_NOT_FOUND", {"doctor_id": doctor_id})


class AppointmentNotFoundError(DomainError):
    """Appointment not found."""

    def __init__(self, appointment_id: str) -> None:
        message = f"Appointment with ID '{appointment_id}' not found"
        super().__init__(message, "APPOINTMENT_NOT_FOUND", {"appointment_id": appointment_id})


class SlotNotAvailableError(DomainError):
    """Requested slot is taken, in the past, or was never offered."""

    def __init__(self, slot_date: str, slot_time: str) -> None:
        message = f"Slot {slot_date} {slot_time} is not available"
        super().__init__(
            message, "SLOT_NOT_AVAILABLE", {"slot_date": slot_date, "slot_time": slot_time}
        )


class BookedSlotNotFoundError(DomainError):
    """No booked entry matched a release request."""

    def __init__(self, slot_date: str, slot_time: str, patient_id: Optional[str] = None) -> None:
        message = f"No booked slot at {slot_date} {slot_time}"
        if patient_id:
            message += f" for patient '{patient_id}'"
        super().__init__(
            message,
            "BOOKED_SLOT_NOT_FOUND",
            {"slot_date": slot_date, "slot_time": slot_time, "patient_id": patient_id},
        )


class ForbiddenActionError(DomainError):
    """Actor is not allowed to act on the resource."""

    def __init__(self, message: str = "Not allowed to cancel this appointment", details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "FORBIDDEN", details)


class PersistenceFailureError(DomainError):
    """Storage failed to read or write a booking document."""

    def __init__(self, operation: str, reason: str, details: Optional[Dict[str, Any]] = None) -> None:
        message = f"Storage failure during {operation}: {reason}"
        super().__init__(message, "PERSISTENCE_FAILURE", {"operation": operation, **(details or {})})


class ConcurrentModificationError(DomainError):
    """A compare-and-swap write lost against a concurrent update of the same doctor."""

    def __init__(self, doctor_id: str, expected_version: int) -> None:
        message = f"Doctor '{doctor_id}' changed concurrently (expected version {expected_version})"
        super().__init__(
            message,
            "CONCURRENT_MODIFICATION",
            {"doctor_id": doctor_id, "expected_version": expected_version},
        )
