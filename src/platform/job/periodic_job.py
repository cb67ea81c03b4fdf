from collections.abc import Awaitable, Callable
from typing import Any

import anyio

from src.platform.logging.loguru_io import Logger


async def run_periodically(
    *, name: str, interval_seconds: float, job: Callable[[], Awaitable[Any]]
) -> None:
    """
    Run ``job`` forever on a fixed cadence inside the app lifespan task group.

    A failed tick is logged and the next tick still runs; the loop only stops
    when the task group is cancelled on shutdown.
    """
    Logger.base.info(f'⏰ [JOB:{name}] Started (every {interval_seconds}s)')
    while True:
        try:
            await job()
        except Exception as e:
            Logger.base.exception(f'❌ [JOB:{name}] Tick failed: {type(e).__name__}: {e}')
        await anyio.sleep(interval_seconds)
