"""
Teacher Entity - one row of the roster.
Identity is the surrogate id; uniqueness is the (name, school) pair.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Teacher:
    """
    A teacher as listed in a school staff directory.
    Created by the roster reconciler, never by a review.
    """

    name: str
    school: str
    id: Optional[int] = None  # Assigned by the store on first upsert
    source_url: str = ""
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def to_summary(self) -> dict:
        return {"id": self.id, "name": self.name, "school": self.school}
