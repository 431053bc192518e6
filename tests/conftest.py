"""
Root conftest.py - shared fixtures and helpers for the entire test suite.

Provides:
- Teacher / Review factory helpers
- InMemoryRepository: a dict-backed IDataRepository with the same
  upsert and compare-and-swap semantics as the real store
- Mock gateway / repository factories (for use-case tests)
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Set
from unittest.mock import AsyncMock

import pytest

from rollcall.domain.entities.review import Review, ReviewStatus
from rollcall.domain.entities.teacher import Teacher
from rollcall.domain.interfaces.i_data_repository import IDataRepository
from rollcall.domain.interfaces.i_scraper_gateway import DirectoryScrapeResult
from rollcall.infrastructure.config import Config

ADMIN_TOKEN = "s3cret-admin-token-0123"
T0 = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


# ─────────────────────────────────────────────────────────────────────────────
# Domain object factories
# ─────────────────────────────────────────────────────────────────────────────


def make_teacher(
    name: str = "Jane Smith",
    school: str = "Central High",
    teacher_id: Optional[int] = 1,
    source_url: str = "https://central.example.org/staff",
) -> Teacher:
    return Teacher(
        id=teacher_id,
        name=name,
        school=school,
        source_url=source_url,
        created_at=T0,
        updated_at=T0,
    )


def make_review(
    teacher_id: int = 1,
    overall: int = 4,
    clarity: int = 4,
    difficulty: int = 3,
    would_take_again: bool = True,
    comment: str = "Solid class",
    status: ReviewStatus = ReviewStatus.PENDING,
    review_id: Optional[int] = None,
    school: str = "Central High",
    created_at: datetime = T0,
) -> Review:
    return Review(
        id=review_id,
        teacher_id=teacher_id,
        school=school,
        overall=overall,
        clarity=clarity,
        difficulty=difficulty,
        would_take_again=would_take_again,
        comment=comment,
        status=status,
        created_at=created_at,
    )


def make_config(**overrides) -> Config:
    values = dict(
        supabase_url="https://fake.supabase.co",
        supabase_service_key="fake-service-key",
        admin_token=ADMIN_TOKEN,
        directory_url="https://central.example.org/staff?page=1",
        directory_school="Central High",
    )
    values.update(overrides)
    return Config(**values)


# ─────────────────────────────────────────────────────────────────────────────
# In-memory store
# ─────────────────────────────────────────────────────────────────────────────


class InMemoryRepository(IDataRepository):
    """Dict-backed store mirroring the PostgreSQL constraints the app relies on."""

    def __init__(self):
        self.teachers: Dict[int, Teacher] = {}
        self.reviews: Dict[int, Review] = {}
        self._teacher_seq = 0
        self._review_seq = 0
        self._clock = T0

    def tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def add_teacher(self, name: str, school: str = "Central High") -> Teacher:
        self._teacher_seq += 1
        now = self.tick()
        teacher = Teacher(id=self._teacher_seq, name=name, school=school, created_at=now, updated_at=now)
        self.teachers[teacher.id] = teacher
        return teacher

    async def upsert_teacher(self, name: str, school: str, source_url: str) -> None:
        for teacher in self.teachers.values():
            if (teacher.name, teacher.school) == (name, school):
                teacher.source_url = source_url
                teacher.updated_at = self.tick()
                return
        teacher = self.add_teacher(name, school)
        teacher.source_url = source_url

    async def get_teacher_names(self, school: str) -> Set[str]:
        return {t.name for t in self.teachers.values() if t.school == school}

    async def get_teacher(self, teacher_id: int) -> Optional[Teacher]:
        return self.teachers.get(teacher_id)

    async def get_teachers_by_ids(self, teacher_ids: Iterable[int]) -> List[Teacher]:
        return [self.teachers[i] for i in set(teacher_ids) if i in self.teachers]

    async def search_teachers(self, query: str, limit: int = 100) -> List[Teacher]:
        q = query.lower()
        hits = [
            t for t in self.teachers.values()
            if q in t.name.lower() or q in t.school.lower()
        ]
        return sorted(hits, key=lambda t: (t.name, t.id))[:limit]

    async def insert_review(self, review: Review) -> Review:
        self._review_seq += 1
        review.id = self._review_seq
        review.created_at = self.tick()
        self.reviews[review.id] = review
        return review

    def _newest_first(self, reviews: Iterable[Review]) -> List[Review]:
        return sorted(reviews, key=lambda r: r.created_at, reverse=True)

    async def list_reviews_for_teacher(self, teacher_id, status=ReviewStatus.APPROVED, limit=None):
        rows = self._newest_first(
            r for r in self.reviews.values()
            if r.teacher_id == teacher_id and r.status is status
        )
        return rows if limit is None else rows[:limit]

    async def list_approved_reviews(self) -> List[Review]:
        return [r for r in self.reviews.values() if r.status is ReviewStatus.APPROVED]

    async def list_pending_reviews(self, limit: int) -> List[Review]:
        rows = self._newest_first(
            r for r in self.reviews.values() if r.status is ReviewStatus.PENDING
        )[:limit]
        for r in rows:
            teacher = self.teachers.get(r.teacher_id)
            r.teacher_name = teacher.name if teacher else None
        return rows

    async def transition_review(self, review_id: int, target: ReviewStatus) -> int:
        review = self.reviews.get(review_id)
        # Same compare-and-swap as the store: only a pending row changes
        if review is None or review.status is not ReviewStatus.PENDING:
            return 0
        review.status = target
        return 1


# ─────────────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def repo():
    return InMemoryRepository()


@pytest.fixture
def mock_repository():
    """AsyncMock for IDataRepository."""
    mock = AsyncMock()
    mock.get_teacher_names.return_value = set()
    mock.get_teacher.return_value = None
    mock.get_teachers_by_ids.return_value = []
    mock.search_teachers.return_value = []
    mock.list_reviews_for_teacher.return_value = []
    mock.list_approved_reviews.return_value = []
    mock.list_pending_reviews.return_value = []
    mock.transition_review.return_value = 1
    mock.upsert_teacher.return_value = None
    return mock


@pytest.fixture
def mock_scraper():
    """AsyncMock for IDirectoryScraper. Defaults to one page with two names."""
    mock = AsyncMock()
    mock.scrape.return_value = DirectoryScrapeResult(
        source_url="https://central.example.org/staff?page=1",
        names=["Jane Smith", "John Q. Smith"],
        pages_visited=1,
    )
    return mock
