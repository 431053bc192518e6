"""
IDataRepository - Port: the durable store contract.
The domain doesn't know about Supabase, PostgreSQL, or any ORM.
Every method treats caller values as data, never as query text.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Set

from ..entities.review import Review, ReviewStatus
from ..entities.teacher import Teacher


class IDataRepository(ABC):
    """Port for reading and writing teachers and reviews."""

    # ── Roster ───────────────────────────────────────────────────────────

    @abstractmethod
    async def upsert_teacher(self, name: str, school: str, source_url: str) -> None:
        """
        Insert or update keyed by (name, school).
        On conflict only source_url and updated_at change.
        """
        pass

    @abstractmethod
    async def get_teacher_names(self, school: str) -> Set[str]:
        """Names already on the roster for a school."""
        pass

    @abstractmethod
    async def get_teacher(self, teacher_id: int) -> Optional[Teacher]:
        pass

    @abstractmethod
    async def get_teachers_by_ids(self, teacher_ids: Iterable[int]) -> List[Teacher]:
        pass

    @abstractmethod
    async def search_teachers(self, query: str, limit: int = 100) -> List[Teacher]:
        """Case-insensitive substring match on name or school, ordered by name."""
        pass

    # ── Reviews ──────────────────────────────────────────────────────────

    @abstractmethod
    async def insert_review(self, review: Review) -> Review:
        """Persist a new review and return it with its assigned id."""
        pass

    @abstractmethod
    async def list_reviews_for_teacher(
        self,
        teacher_id: int,
        status: ReviewStatus = ReviewStatus.APPROVED,
        limit: Optional[int] = None,
    ) -> List[Review]:
        """Reviews of one teacher in one status, newest first."""
        pass

    @abstractmethod
    async def list_approved_reviews(self) -> List[Review]:
        """Every approved review, for ranking."""
        pass

    @abstractmethod
    async def list_pending_reviews(self, limit: int) -> List[Review]:
        """
        Pending reviews newest first, each with teacher_name filled by a
        left join (None when the teacher row is absent).
        """
        pass

    @abstractmethod
    async def transition_review(self, review_id: int, target: ReviewStatus) -> int:
        """
        Compare-and-swap: set status=target only where status is pending.
        Returns the number of rows changed (0 or 1).
        """
        pass
