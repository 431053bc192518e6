"""
Periodic roster sync.
Runs ScrapeDirectoryUseCase every N minutes as a background asyncio task.
A failed run is logged and the loop carries on; nothing propagates to the
host process or to request handling.
"""

import asyncio
import logging
from typing import Optional

from ..use_cases.scrape_directory import ScrapeDirectoryUseCase

logger = logging.getLogger(__name__)


async def run_scrape_once(use_case: ScrapeDirectoryUseCase) -> bool:
    """Run one scrape, logging instead of raising. Returns True on success."""
    try:
        result = await use_case.execute()
    except Exception as e:
        logger.error(f"[Scheduler] Scheduled scrape failed: {e!r}", exc_info=True)
        return False
    logger.info(
        f"[Scheduler] Scheduled scrape ok: found={result.found} "
        f"upserted={result.upserted} created={result.created}"
    )
    return True


async def scrape_periodically(
    use_case: ScrapeDirectoryUseCase,
    interval_seconds: float,
    max_runs: Optional[int] = None,
) -> None:
    runs = 0
    logger.info(f"[Scheduler] Roster sync every {interval_seconds:g}s")
    while max_runs is None or runs < max_runs:
        await asyncio.sleep(interval_seconds)
        await run_scrape_once(use_case)
        runs += 1


def start_scheduler(
    use_case: ScrapeDirectoryUseCase, interval_minutes: int
) -> Optional[asyncio.Task]:
    """Start the background loop, or return None when the interval is 0."""
    if interval_minutes <= 0:
        logger.info("[Scheduler] SCRAPE_INTERVAL_MINUTES is 0; scheduler disabled")
        return None
    return asyncio.create_task(
        scrape_periodically(use_case, interval_minutes * 60), name="roster-sync"
    )


async def stop_scheduler(task: Optional[asyncio.Task]) -> None:
    if task is None:
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
