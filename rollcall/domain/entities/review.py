"""
Review Entity and its moderation state machine.

    pending ──approve──▶ approved
       │
       └────reject────▶ rejected

Both terminal states are final. A review is created pending and moves at
most once.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from .teacher import utcnow


class ReviewStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not ReviewStatus.PENDING

    def can_transition_to(self, target: "ReviewStatus") -> bool:
        return self is ReviewStatus.PENDING and target.is_terminal


@dataclass
class Review:
    """A visitor's rating of one teacher."""

    teacher_id: int
    school: str  # Rater-supplied snapshot, independent of Teacher.school
    overall: int
    clarity: int
    difficulty: int
    would_take_again: bool = False
    comment: str = ""
    status: ReviewStatus = ReviewStatus.PENDING
    id: Optional[int] = None
    created_at: datetime = field(default_factory=utcnow)
    teacher_name: Optional[str] = None  # Filled by joins, never persisted

    @property
    def is_public(self) -> bool:
        return self.status is ReviewStatus.APPROVED

    def to_public_dict(self) -> dict:
        return {
            "overall": self.overall,
            "difficulty": self.difficulty,
            "clarity": self.clarity,
            "would_take_again": self.would_take_again,
            "school": self.school,
            "comment": self.comment,
            "created_at": self.created_at.isoformat(),
        }

    def to_moderation_dict(self) -> dict:
        return {
            "id": self.id,
            "teacher_id": self.teacher_id,
            "teacher_name": self.teacher_name,
            "school": self.school,
            "overall": self.overall,
            "clarity": self.clarity,
            "difficulty": self.difficulty,
            "would_take_again": self.would_take_again,
            "comment": self.comment,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
        }
