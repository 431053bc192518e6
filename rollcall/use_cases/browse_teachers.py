"""
BrowseTeachersUseCase - the public read side.
Search, teacher profile with approved-only stats, approved review listing,
and the top-rated ranking. Nothing here is cached; each call reads the store.
"""

import logging
from typing import Any, List

from ..domain.entities.review import Review, ReviewStatus
from ..domain.entities.teacher import Teacher
from ..domain.entities.teacher_stats import RankedTeacher, TeacherStats, rank_teachers
from ..domain.errors import NotFoundError
from ..domain.interfaces.i_data_repository import IDataRepository
from ..domain.parsing import clamp_limit, clean_str, parse_id

logger = logging.getLogger(__name__)

MAX_QUERY_LENGTH = 80
SEARCH_LIMIT = 100
PUBLIC_REVIEW_LIMIT = 50
DEFAULT_TOP_LIMIT = 10
MAX_TOP_LIMIT = 50


class BrowseTeachersUseCase:
    def __init__(self, repository: IDataRepository):
        self.repository = repository

    async def search(self, query: Any = "") -> List[Teacher]:
        q = clean_str(query, MAX_QUERY_LENGTH)
        return await self.repository.search_teachers(q, limit=SEARCH_LIMIT)

    async def profile(self, teacher_id: Any) -> dict:
        teacher = await self._get_teacher(teacher_id)
        approved = await self.repository.list_reviews_for_teacher(
            teacher.id, status=ReviewStatus.APPROVED
        )
        stats = TeacherStats.from_reviews(approved)
        return {**teacher.to_summary(), **stats.to_dict()}

    async def approved_reviews(self, teacher_id: Any) -> List[Review]:
        tid = parse_id(teacher_id)
        if tid is None:
            return []
        return await self.repository.list_reviews_for_teacher(
            tid, status=ReviewStatus.APPROVED, limit=PUBLIC_REVIEW_LIMIT
        )

    async def top(self, limit: Any = DEFAULT_TOP_LIMIT) -> List[RankedTeacher]:
        limit = clamp_limit(limit, default=DEFAULT_TOP_LIMIT, maximum=MAX_TOP_LIMIT)
        approved = await self.repository.list_approved_reviews()
        teachers = await self.repository.get_teachers_by_ids(r.teacher_id for r in approved)
        return rank_teachers(teachers, approved, limit)

    async def _get_teacher(self, teacher_id: Any) -> Teacher:
        tid = parse_id(teacher_id)
        teacher = await self.repository.get_teacher(tid) if tid is not None else None
        if teacher is None:
            raise NotFoundError("Not found")
        return teacher
