"""
SupabaseAdapter - Implements IDataRepository.
Uses the supabase-py client to read/write teachers and reviews via PostgREST.
Every filter goes through the client's builder methods, so caller input is
sent as a parameter value, never spliced into query text.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Set

from postgrest.exceptions import APIError
from supabase import create_client, Client

from ..domain.entities.review import Review, ReviewStatus
from ..domain.entities.teacher import Teacher
from ..domain.errors import StoreError
from ..domain.interfaces.i_data_repository import IDataRepository

logger = logging.getLogger(__name__)

TEACHERS = "teachers"
REVIEWS = "reviews"

# Rows requested per range; PostgREST may cap a response at fewer (max_rows)
PAGE_SIZE = 1000

REVIEW_COLUMNS = (
    "id, teacher_id, school, overall, clarity, difficulty, "
    "would_take_again, comment, status, created_at"
)
# PostgREST embeds a to-one relation as a left join unless "!inner" is given
PENDING_COLUMNS = f"{REVIEW_COLUMNS}, teachers(name)"


def _parse_iso(date_str: Optional[str]) -> datetime:
    if not date_str:
        return datetime.now(timezone.utc)
    if date_str.endswith("Z"):
        date_str = date_str[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(date_str)
    except ValueError:
        return datetime.now(timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _escape_like(value: str) -> str:
    """Make %, _ and * match literally inside an ilike pattern."""
    value = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    # PostgREST rewrites * to %; there is no escape for it
    return value.replace("*", "")


def _row_to_teacher(row: dict) -> Teacher:
    return Teacher(
        id=row["id"],
        name=row["name"],
        school=row.get("school", ""),
        source_url=row.get("source_url") or "",
        created_at=_parse_iso(row.get("created_at")),
        updated_at=_parse_iso(row.get("updated_at")),
    )


def _row_to_review(row: dict) -> Review:
    teacher = row.get("teachers")
    return Review(
        id=row["id"],
        teacher_id=row["teacher_id"],
        school=row.get("school", ""),
        overall=row["overall"],
        clarity=row["clarity"],
        difficulty=row["difficulty"],
        would_take_again=bool(row.get("would_take_again")),
        comment=row.get("comment") or "",
        status=ReviewStatus(row.get("status", "pending")),
        created_at=_parse_iso(row.get("created_at")),
        teacher_name=teacher.get("name") if isinstance(teacher, dict) else None,
    )


def _review_to_row(review: Review) -> dict:
    return {
        "teacher_id": review.teacher_id,
        "school": review.school,
        "overall": review.overall,
        "clarity": review.clarity,
        "difficulty": review.difficulty,
        "would_take_again": review.would_take_again,
        "comment": review.comment,
        "status": review.status.value,
        "created_at": review.created_at.isoformat(),
    }


class SupabaseAdapter(IDataRepository):
    """
    PostgreSQL adapter via Supabase PostgREST.
    Uses the service role key; the tables are not exposed to anon clients.
    The client is synchronous, so each request runs in a worker thread.
    """

    def __init__(self, url: str, key: str):
        self.client: Client = create_client(url, key)

    async def _execute(self, query) -> list:
        try:
            response = await asyncio.to_thread(query.execute)
        except APIError as e:
            logger.error(f"[Store] PostgREST error: {e.message}")
            raise StoreError(f"Store error: {e.message}") from e
        return response.data or []

    async def _execute_all(self, build_query) -> list:
        """
        Collect every row of an unbounded select, one range at a time.
        build_query must apply a total order so ranges do not overlap.
        """
        rows = []
        offset = 0
        while True:
            page = await self._execute(build_query().range(offset, offset + PAGE_SIZE - 1))
            if not page:
                return rows
            rows.extend(page)
            offset += len(page)

    # ── Roster ───────────────────────────────────────────────────────────

    async def upsert_teacher(self, name: str, school: str, source_url: str) -> None:
        # created_at is omitted so the column default applies on insert
        # and the existing value survives a conflict update
        row = {
            "name": name,
            "school": school,
            "source_url": source_url or "",
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        await self._execute(
            self.client.table(TEACHERS).upsert(row, on_conflict="name,school")
        )

    async def get_teacher_names(self, school: str) -> Set[str]:
        rows = await self._execute_all(
            lambda: self.client.table(TEACHERS).select("name").eq("school", school).order("id")
        )
        return {r["name"] for r in rows}

    async def get_teacher(self, teacher_id: int) -> Optional[Teacher]:
        rows = await self._execute(
            self.client.table(TEACHERS).select("*").eq("id", teacher_id).limit(1)
        )
        if rows:
            return _row_to_teacher(rows[0])
        return None

    async def get_teachers_by_ids(self, teacher_ids: Iterable[int]) -> List[Teacher]:
        ids = sorted(set(teacher_ids))
        if not ids:
            return []
        rows = await self._execute(
            self.client.table(TEACHERS).select("*").in_("id", ids)
        )
        return [_row_to_teacher(r) for r in rows]

    async def search_teachers(self, query: str, limit: int = 100) -> List[Teacher]:
        if not query:
            rows = await self._execute(self.client.table(TEACHERS).select("*").order("name").limit(limit))
            return [_row_to_teacher(r) for r in rows]

        # Two filtered queries instead of an or_() string, which would
        # need the caller's text embedded in filter syntax
        pattern = f"%{_escape_like(query)}%"
        by_name = await self._execute(
            self.client.table(TEACHERS).select("*").ilike("name", pattern).order("name").limit(limit)
        )
        by_school = await self._execute(
            self.client.table(TEACHERS).select("*").ilike("school", pattern).order("name").limit(limit)
        )

        merged = {}
        for row in by_name + by_school:
            merged.setdefault(row["id"], row)
        teachers = [_row_to_teacher(r) for r in merged.values()]
        teachers.sort(key=lambda t: (t.name, t.id))
        return teachers[:limit]

    # ── Reviews ──────────────────────────────────────────────────────────

    async def insert_review(self, review: Review) -> Review:
        rows = await self._execute(
            self.client.table(REVIEWS).insert(_review_to_row(review))
        )
        if rows:
            review.id = rows[0].get("id")
        return review

    async def list_reviews_for_teacher(
        self,
        teacher_id: int,
        status: ReviewStatus = ReviewStatus.APPROVED,
        limit: Optional[int] = None,
    ) -> List[Review]:
        def build_query():
            return (
                self.client.table(REVIEWS)
                .select(REVIEW_COLUMNS)
                .eq("teacher_id", teacher_id)
                .eq("status", status.value)
                .order("created_at", desc=True)
                .order("id", desc=True)
            )

        if limit is None:
            rows = await self._execute_all(build_query)
        else:
            rows = await self._execute(build_query().limit(limit))
        return [_row_to_review(r) for r in rows]

    async def list_approved_reviews(self) -> List[Review]:
        rows = await self._execute_all(
            lambda: (
                self.client.table(REVIEWS)
                .select(REVIEW_COLUMNS)
                .eq("status", ReviewStatus.APPROVED.value)
                .order("id")
            )
        )
        return [_row_to_review(r) for r in rows]

    async def list_pending_reviews(self, limit: int) -> List[Review]:
        rows = await self._execute(
            self.client.table(REVIEWS)
            .select(PENDING_COLUMNS)
            .eq("status", ReviewStatus.PENDING.value)
            .order("created_at", desc=True)
            .limit(limit)
        )
        return [_row_to_review(r) for r in rows]

    async def transition_review(self, review_id: int, target: ReviewStatus) -> int:
        # UPDATE reviews SET status=? WHERE id=? AND status='pending'
        rows = await self._execute(
            self.client.table(REVIEWS)
            .update({"status": target.value})
            .eq("id", review_id)
            .eq("status", ReviewStatus.PENDING.value)
        )
        return len(rows)
