"""
Settings and API key configuration tests.
"""

import pytest
from pydantic import ValidationError

from medibook.core.auth import AuthService
from medibook.core.config import Settings, get_settings, reset_settings
from medibook.core.exceptions import ConfigurationError
from medibook.domain.enums.booking import ActorRole


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for name in ("MONGO_BACKEND", "MONGO_URI", "MONGO_DB_NAME", "BOOKING_MAX_ALLOCATION_ATTEMPTS", "APP_ENV"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


def test_mongo_backend_requires_uri(monkeypatch):
    monkeypatch.setenv("MONGO_BACKEND", "mongo")

    with pytest.raises(ValidationError):
        Settings()


def test_mongo_uri_scheme_is_checked(monkeypatch):
    monkeypatch.setenv("MONGO_URI", "postgres://localhost/db")

    with pytest.raises(ValidationError):
        Settings()


def test_memory_backend_needs_no_uri(monkeypatch):
    monkeypatch.setenv("MONGO_BACKEND", "MEMORY")

    settings = Settings()

    assert settings.database.is_memory
    assert settings.booking.max_allocation_attempts == 5
    assert settings.booking.unknown_patient_name == "Unknown"


def test_mongo_settings_from_environment(monkeypatch):
    monkeypatch.setenv("MONGO_URI", "mongodb+srv://cluster.example.net")
    monkeypatch.setenv("MONGO_DB_NAME", "bookings")

    settings = get_settings()

    assert settings.database.backend == "mongo"
    assert settings.database.db_name == "bookings"
    assert get_settings() is settings


@pytest.mark.parametrize("attempts", ["0", "21"])
def test_allocation_attempts_bounds(monkeypatch, attempts):
    monkeypatch.setenv("MONGO_BACKEND", "memory")
    monkeypatch.setenv("BOOKING_MAX_ALLOCATION_ATTEMPTS", attempts)

    with pytest.raises(ValidationError):
        Settings()


def test_invalid_app_env(monkeypatch):
    monkeypatch.setenv("MONGO_BACKEND", "memory")
    monkeypatch.setenv("APP_ENV", "qa")

    with pytest.raises(ValidationError):
        Settings()


def test_api_keys_map_to_identities():
    service = AuthService("k1:patient:p-1, k2:ADMIN:ops,,k3:doctor:d-9")

    assert service.validate_api_key("k1").role is ActorRole.PATIENT
    assert service.validate_api_key("Bearer k2").subject == "ops"
    assert service.get_identity_from_request(auth_header="Bearer k3").role is ActorRole.DOCTOR


@pytest.mark.parametrize("raw", ["k1:patient", "k1:nurse:n-1", ":patient:p-1"])
def test_malformed_api_keys_are_configuration_errors(raw):
    with pytest.raises(ConfigurationError):
        AuthService(raw)
