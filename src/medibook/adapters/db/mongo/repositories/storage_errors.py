"""
Translation of driver errors into domain persistence failures.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from pymongo.errors import PyMongoError

from medibook.domain.errors import PersistenceFailureError

logger = logging.getLogger("medibook")


@contextmanager
def storage_operation(operation: str) -> Iterator[None]:
    """Raise ``PersistenceFailureError`` for any driver error inside the block."""
    try:
        yield
    except PyMongoError as e:
        logger.error(f"MongoDB {operation} failed: {type(e).__name__}: {e}")
        raise PersistenceFailureError(operation, str(e)) from e
