"""Caller-side polling for analysis and report jobs.

The clients never loop on their own.  This helper drives any one-shot poll
target (``get_analysis``, ``get_report``, ``get_scm_report``, usually
wrapped in a ``functools.partial``) until the job reaches a terminal
status, an error result comes back, or the deadline passes.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

from code_client.analysis import is_terminal, poll_status
from code_client.constants import ErrorCodes
from code_client.result import Result, build_error
from code_client.taxonomy import GENERIC_ERROR_MESSAGES

logger = logging.getLogger(__name__)


async def poll_until_terminal(
    fetch: Callable[[], Awaitable[Result[Any]]],
    *,
    interval_seconds: float = 0.5,
    timeout_seconds: float = 600.0,
    api_name: str = "poll",
) -> Result[Any]:
    """Await *fetch* until its body reports ``COMPLETE`` or ``FAILED``.

    Returns:
        The first error result, the first result with a terminal status,
        or a ``TIMEOUT`` error once *timeout_seconds* have elapsed.
    """
    deadline = time.monotonic() + timeout_seconds
    attempt = 0

    while True:
        attempt += 1
        result = await fetch()
        if not result.is_success:
            return result

        status = poll_status(result.value)
        if is_terminal(status):
            logger.info("%s reached %s after %d poll(s)", api_name, status.value, attempt)
            return result

        progress = result.value.get("progress") if isinstance(result.value, dict) else None
        logger.debug("%s poll %d: status=%s progress=%s", api_name, attempt, status, progress)

        if time.monotonic() + interval_seconds > deadline:
            logger.warning("%s did not finish within %.0fs", api_name, timeout_seconds)
            return build_error(
                ErrorCodes.TIMEOUT,
                GENERIC_ERROR_MESSAGES,
                api_name,
                f"Polling timed out after {timeout_seconds:g}s",
            )
        await asyncio.sleep(interval_seconds)
