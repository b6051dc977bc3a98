"""
Authentication service.

Callers are identified by an API key (``X-API-Key`` header or
``Authorization: Bearer``). Each configured key maps to a role and the id
of the patient, doctor or admin it acts as; the booking core trusts that
identity as given.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException

from ..domain.enums.booking import ActorRole
from .config import get_settings
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Authenticated caller."""

    role: ActorRole
    subject: str


class AuthService:
    """Authentication service for validating API keys"""

    def __init__(self, api_keys: Optional[str] = None):
        """Initialize with a ``key:role:subject`` list, defaulting to settings."""
        self.api_keys: dict[str, Identity] = {}
        if api_keys is None:
            api_keys = get_settings().security.api_keys
        self._parse_api_keys(api_keys)
        if not self.api_keys:
            logger.warning("No API keys configured. Authentication will fail for all requests.")

    def _parse_api_keys(self, api_keys_str: str) -> None:
        """
        Parse API keys string.
        Format: "key1:patient:<id>,key2:admin:ops" (comma-separated triples)
        """
        if not api_keys_str or not api_keys_str.strip():
            return

        for entry in api_keys_str.split(","):
            entry = entry.strip()
            if not entry:
                continue

            parts = [p.strip() for p in entry.split(":", 2)]
            if len(parts) != 3 or not all(parts):
                raise ConfigurationError(
                    "API key entries must look like 'key:role:subject'",
                    details={"entry": entry.split(":", 1)[0][:6] + "..."},
                )
            key, role, subject = parts
            try:
                self.api_keys[key] = Identity(role=ActorRole(role.lower()), subject=subject)
            except ValueError as e:
                raise ConfigurationError(
                    f"Unknown role '{role}' in API key configuration",
                    details={"valid_roles": [r.value for r in ActorRole]},
                ) from e

    def validate_api_key(self, api_key: Optional[str]) -> Identity:
        """
        Validate API key and return the caller identity.

        Raises:
            HTTPException: If API key is invalid or missing
        """
        if not api_key:
            raise HTTPException(
                status_code=401,
                detail="Authentication required. Provide X-API-Key header or Authorization Bearer token.",
                headers={"WWW-Authenticate": "Bearer"},
            )

        if api_key.startswith("Bearer "):
            api_key = api_key[7:].strip()

        identity = self.api_keys.get(api_key)
        if identity is not None:
            logger.debug(f"API key validated for {identity.role.value}: {identity.subject}")
            return identity

        logger.warning(f"Invalid API key attempted: {api_key[:6]}...")
        raise HTTPException(
            status_code=401,
            detail="Invalid API key or token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    def get_identity_from_request(
        self, api_key: Optional[str] = None, auth_header: Optional[str] = None
    ) -> Identity:
        """
        Resolve the caller from request headers.

        Priority:
        1. X-API-Key header
        2. Authorization Bearer token
        """
        if api_key:
            return self.validate_api_key(api_key)

        if auth_header and auth_header.startswith("Bearer "):
            return self.validate_api_key(auth_header[7:].strip())

        return self.validate_api_key(None)


_auth_service: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    """Get or create the global authentication service"""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service


def reset_auth_service() -> None:
    """Forget the cached service so the next call re-reads settings."""
    global _auth_service
    _auth_service = None
