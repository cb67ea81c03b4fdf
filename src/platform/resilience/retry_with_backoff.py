from collections.abc import Awaitable, Callable
from typing import Optional, TypeVar

import anyio

from src.platform.exception.exceptions import TransientError
from src.platform.logging.loguru_io import Logger


_T = TypeVar('_T')


async def retry_with_backoff(
    operation: Callable[[], Awaitable[_T]],
    *,
    label: str,
    retry_on: tuple[type[Exception], ...],
    max_attempts: int,
    base_delay: float,
    timeout: Optional[float] = None,
) -> _T:
    """
    Await ``operation`` until it succeeds, doubling the delay between attempts.

    Each attempt is a fresh call, so the operation must be safe to repeat.
    With ``timeout`` set, an attempt exceeding it counts as a retryable failure.
    Exhausting every attempt raises TransientError chained to the last failure.
    """
    retryable = retry_on + (TimeoutError,) if timeout is not None else retry_on
    attempts, delay = max(1, max_attempts), base_delay

    for attempt in range(1, attempts + 1):
        try:
            if timeout is None:
                return await operation()
            with anyio.fail_after(timeout):
                return await operation()
        except retryable as e:
            if attempt == attempts:
                Logger.base.error(f'❌ [{label}] Giving up after {attempts} attempts: {e!r}')
                raise TransientError(f'{label} failed after {attempts} attempts') from e
            Logger.base.warning(
                f'⏳ [{label}] {attempt}/{attempts}: {type(e).__name__}, retry in {delay:.2f}s'
            )
            await anyio.sleep(delay)
            delay *= 2

    raise TransientError(f'{label} failed')  # pragma: no cover
