"""
ScrapeDirectoryUseCase - one full roster sync.
Directory Scraper → Name Classifier → Roster Reconciler, under a wall-clock
deadline. Used by the admin endpoint, the CLI and the periodic scheduler.
"""

import asyncio
import logging
from dataclasses import dataclass

from ..domain.errors import UpstreamFetchError
from ..domain.interfaces.i_scraper_gateway import IDirectoryScraper
from .reconcile_roster import ReconcileRosterRequest, ReconcileRosterUseCase

logger = logging.getLogger(__name__)

DEADLINE_SECONDS = 120


@dataclass
class ScrapeDirectoryResponse:
    school: str
    source_url: str
    found: int
    upserted: int
    rejected: int
    created: int
    pages_visited: int

    def to_dict(self) -> dict:
        return {
            "ok": True,
            "found": self.found,
            "upserted": self.upserted,
            "rejected": self.rejected,
            "created": self.created,
            "pages_visited": self.pages_visited,
            "school": self.school,
            "source_url": self.source_url,
        }


class ScrapeDirectoryUseCase:
    def __init__(
        self,
        scraper: IDirectoryScraper,
        reconcile: ReconcileRosterUseCase,
        directory_url: str,
        school: str,
        follow_pagination: bool = True,
        deadline_seconds: float = DEADLINE_SECONDS,
    ):
        self.scraper = scraper
        self.reconcile = reconcile
        self.directory_url = directory_url
        self.school = school
        self.follow_pagination = follow_pagination
        self.deadline_seconds = deadline_seconds

    async def execute(self) -> ScrapeDirectoryResponse:
        logger.info(f"[Scrape] Starting roster sync for {self.school!r} from {self.directory_url}")
        try:
            return await asyncio.wait_for(self._run(), timeout=self.deadline_seconds)
        except asyncio.TimeoutError:
            raise UpstreamFetchError(
                f"Directory scrape exceeded {self.deadline_seconds:g}s deadline"
            )

    async def _run(self) -> ScrapeDirectoryResponse:
        scraped = await self.scraper.scrape(
            self.directory_url, follow_pagination=self.follow_pagination
        )
        summary = await self.reconcile.execute(
            ReconcileRosterRequest(
                names=scraped.names,
                school=self.school,
                source_url=scraped.source_url,
            )
        )
        logger.info(
            f"[Scrape] Done: found={scraped.found} upserted={summary.upserted} "
            f"created={summary.created} pages={scraped.pages_visited}"
        )
        return ScrapeDirectoryResponse(
            school=self.school,
            source_url=scraped.source_url,
            found=scraped.found,
            upserted=summary.upserted,
            rejected=summary.rejected,
            created=summary.created,
            pages_visited=scraped.pages_visited,
        )
