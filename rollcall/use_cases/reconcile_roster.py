"""
ReconcileRosterUseCase - merges scraped names into the teacher roster.

Every name is re-checked by the classifier here even though the scraper
already filtered it: the roster accepts names from the CLI seed path too.
Upserts are keyed by (name, school); the store's unique constraint resolves
races between concurrent runs.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable

from ..domain.interfaces.i_data_repository import IDataRepository
from ..domain.name_classifier import looks_like_person_name, normalize_name

logger = logging.getLogger(__name__)


@dataclass
class ReconcileRosterRequest:
    names: Iterable[str]
    school: str
    source_url: str = ""


@dataclass
class RosterSummary:
    considered: int = 0
    upserted: int = 0
    rejected: int = 0
    created: int = 0  # Upserts that added a row rather than refreshing one

    def to_dict(self) -> dict:
        return {
            "considered": self.considered,
            "upserted": self.upserted,
            "rejected": self.rejected,
            "created": self.created,
        }


class ReconcileRosterUseCase:
    def __init__(
        self,
        repository: IDataRepository,
        accept: Callable[[str], bool] = looks_like_person_name,
    ):
        self.repository = repository
        self.accept = accept

    async def execute(self, request: ReconcileRosterRequest) -> RosterSummary:
        summary = RosterSummary()
        existing = await self.repository.get_teacher_names(request.school)
        seen = set()

        for raw in request.names:
            summary.considered += 1
            name = normalize_name(raw)
            if not self.accept(name):
                summary.rejected += 1
                logger.debug(f"[Roster] Rejected candidate {raw!r}")
                continue
            if name in seen:
                continue
            seen.add(name)

            await self.repository.upsert_teacher(
                name=name, school=request.school, source_url=request.source_url
            )
            summary.upserted += 1
            if name not in existing:
                summary.created += 1

        logger.info(
            f"[Roster] {request.school!r}: considered={summary.considered} "
            f"upserted={summary.upserted} rejected={summary.rejected} "
            f"created={summary.created}"
        )
        return summary
