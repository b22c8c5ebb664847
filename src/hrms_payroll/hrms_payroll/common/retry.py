from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

from ..core.constants import (
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_BASE_DELAY_SECONDS,
    DEFAULT_RETRY_TIMEOUT_SECONDS,
)
from ..core.exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_call(
    fn: Callable[[], T],
    *,
    is_transient: Callable[[BaseException], bool],
    max_attempts: int = DEFAULT_RETRY_ATTEMPTS,
    base_delay: float = DEFAULT_RETRY_BASE_DELAY_SECONDS,
    timeout: float = DEFAULT_RETRY_TIMEOUT_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> T:
    """Call ``fn`` and retry transient failures with exponential backoff.

    Delay before attempt ``n + 1`` is ``base_delay * 2 ** n`` (200ms, 400ms, ...
    with the default base). Non-transient errors propagate immediately. Once
    ``timeout`` seconds have passed since the first attempt no new attempt is
    started and :class:`StorageUnavailableError` is raised.
    """
    started = clock()
    last_error: BaseException | None = None

    for attempt in range(1, int(max_attempts) + 1):
        if clock() - started > timeout:
            raise StorageUnavailableError(f"Database operation timed out after {timeout:g}s") from last_error
        try:
            return fn()
        except Exception as e:
            if not is_transient(e):
                raise
            last_error = e
            if attempt < max_attempts:
                delay = base_delay * (2 ** attempt)
                logger.warning("Database attempt %d/%d failed (%s), retrying in %.0fms", attempt, max_attempts, e, delay * 1000)
                sleep(delay)

    raise StorageUnavailableError(f"Database unavailable after {max_attempts} attempts") from last_error
