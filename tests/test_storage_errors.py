"""
Driver error translation tests.
"""

import pytest
from pymongo.errors import AutoReconnect, DuplicateKeyError

from medibook.adapters.db.mongo.repositories.storage_errors import storage_operation
from medibook.domain.errors import PersistenceFailureError, SlotNotAvailableError


@pytest.mark.parametrize("error", [AutoReconnect("primary stepped down"), DuplicateKeyError("dup")])
def test_driver_errors_become_persistence_failures(error):
    with pytest.raises(PersistenceFailureError) as exc_info:
        with storage_operation("save_doctor_slots"):
            raise error

    assert exc_info.value.error_code == "PERSISTENCE_FAILURE"
    assert exc_info.value.details["operation"] == "save_doctor_slots"
    assert exc_info.value.__cause__ is error


def test_domain_errors_pass_through():
    with pytest.raises(SlotNotAvailableError):
        with storage_operation("allocate"):
            raise SlotNotAvailableError("2025-06-01", "09:00")
