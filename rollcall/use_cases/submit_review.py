"""
SubmitReviewUseCase - visitor review intake.

Parses an untyped JSON body into a validated ReviewSubmission, checks the
teacher exists, and stores the review as pending. Syntax checks run before
the existence lookup, and nothing is written unless every check passes.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..domain.entities.review import Review, ReviewStatus
from ..domain.errors import NotFoundError, ValidationError
from ..domain.interfaces.i_data_repository import IDataRepository
from ..domain.parsing import clean_str, parse_id, parse_int

logger = logging.getLogger(__name__)

MAX_SCHOOL_LENGTH = 120
MAX_COMMENT_LENGTH = 800
RATING_MIN = 1
RATING_MAX = 5


def parse_rating(value: Any) -> Optional[int]:
    rating = parse_int(value)
    if rating is None or not RATING_MIN <= rating <= RATING_MAX:
        return None
    return rating


@dataclass(frozen=True)
class ReviewSubmission:
    teacher_id: str
    school: str
    overall: int
    clarity: int
    difficulty: int
    would_take_again: bool
    comment: str

    @classmethod
    def parse(cls, raw: Optional[Mapping[str, Any]]) -> "ReviewSubmission":
        """Validate in a fixed order; the first failing check is reported."""
        raw = raw if isinstance(raw, Mapping) else {}

        teacher_id = raw.get("teacher_id")
        teacher_id = "" if teacher_id is None else str(teacher_id).strip()
        if not teacher_id:
            raise ValidationError("Missing teacher_id")

        school = clean_str(raw.get("school"), MAX_SCHOOL_LENGTH)
        if not school:
            raise ValidationError("Missing school")

        overall = parse_rating(raw.get("overall"))
        difficulty = parse_rating(raw.get("difficulty"))
        clarity = parse_rating(raw.get("clarity"))
        if overall is None or difficulty is None or clarity is None:
            raise ValidationError("Ratings must be 1-5")

        return cls(
            teacher_id=teacher_id,
            school=school,
            overall=overall,
            clarity=clarity,
            difficulty=difficulty,
            would_take_again=bool(raw.get("would_take_again")),
            comment=clean_str(raw.get("comment"), MAX_COMMENT_LENGTH),
        )


@dataclass
class SubmitReviewResponse:
    review_id: Optional[int]
    status: ReviewStatus

    def to_dict(self) -> dict:
        return {"ok": True, "status": self.status.value, "id": self.review_id}


class SubmitReviewUseCase:
    def __init__(self, repository: IDataRepository):
        self.repository = repository

    async def execute(self, raw: Optional[Mapping[str, Any]]) -> SubmitReviewResponse:
        submission = ReviewSubmission.parse(raw)

        teacher_id = parse_id(submission.teacher_id)
        teacher = None
        if teacher_id is not None:
            teacher = await self.repository.get_teacher(teacher_id)
        if teacher is None:
            raise NotFoundError("Teacher not found")

        review = Review(
            teacher_id=teacher.id,
            school=submission.school,
            overall=submission.overall,
            clarity=submission.clarity,
            difficulty=submission.difficulty,
            would_take_again=submission.would_take_again,
            comment=submission.comment,
            status=ReviewStatus.PENDING,
        )
        saved = await self.repository.insert_review(review)
        logger.info(f"[Reviews] Stored pending review id={saved.id} for teacher id={teacher.id}")
        return SubmitReviewResponse(review_id=saved.id, status=saved.status)
