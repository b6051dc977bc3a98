"""
Exception handling for MediBook infrastructure.

Business rule violations live in ``medibook.domain.errors``; this module
holds errors raised while wiring the application together.
"""

from typing import Any, Dict, Optional


class MediBookException(Exception):
    """Base exception class for MediBook infrastructure."""

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


class ConfigurationError(MediBookException):
    """Raised when there's a configuration error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "CONFIG_ERROR", details)
