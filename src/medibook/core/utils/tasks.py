"""
Helpers for running booking operations independently of the caller's lifetime.
"""

import asyncio
import logging
from typing import Awaitable, TypeVar

T = TypeVar("T")

logger = logging.getLogger("medibook")


def _report_detached_failure(task: "asyncio.Future") -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug(f"Booking operation finished with error: {type(exc).__name__}: {exc}")


async def run_to_completion(operation: Awaitable[T]) -> T:
    """Run ``operation`` so that cancelling the awaiting request does not cancel it.

    Once a booking or cancellation has committed its first write it has to
    finish the remaining writes. The operation is scheduled as its own task
    and shielded; if the request is cancelled (client disconnect) the task
    keeps running to completion on the event loop.
    """
    task = asyncio.ensure_future(operation)
    task.add_done_callback(_report_detached_failure)
    return await asyncio.shield(task)
