"""
TeacherStats - on-demand aggregation over approved reviews.
Never materialized; recomputed from the store on every read.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .review import Review
from .teacher import Teacher


def _mean(values: List[int]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)


@dataclass(frozen=True)
class TeacherStats:
    """
    Averages are None when there is no data, never 0.0:
    a zero would read as a real rating.
    """

    review_count: int = 0
    avg_overall: Optional[float] = None
    avg_clarity: Optional[float] = None
    avg_difficulty: Optional[float] = None
    would_take_again_pct: Optional[float] = None

    @classmethod
    def from_reviews(cls, reviews: Iterable[Review]) -> "TeacherStats":
        approved = [r for r in reviews if r.is_public]
        if not approved:
            return cls()

        would_take_again = sum(1 for r in approved if r.would_take_again)
        return cls(
            review_count=len(approved),
            avg_overall=_mean([r.overall for r in approved]),
            avg_clarity=_mean([r.clarity for r in approved]),
            avg_difficulty=_mean([r.difficulty for r in approved]),
            would_take_again_pct=would_take_again * 100.0 / len(approved),
        )

    def to_dict(self) -> dict:
        return {
            "review_count": self.review_count,
            "avg_overall": self.avg_overall,
            "avg_clarity": self.avg_clarity,
            "avg_difficulty": self.avg_difficulty,
            "would_take_again_pct": self.would_take_again_pct,
        }


@dataclass(frozen=True)
class RankedTeacher:
    teacher: Teacher
    stats: TeacherStats

    def to_dict(self) -> dict:
        return {**self.teacher.to_summary(), **self.stats.to_dict()}


def rank_teachers(
    teachers: Iterable[Teacher],
    approved_reviews: Iterable[Review],
    limit: int,
) -> List[RankedTeacher]:
    """
    Rank teachers with at least one approved review by average overall
    rating, then review count, then name.
    """
    by_teacher: Dict[int, List[Review]] = {}
    for review in approved_reviews:
        by_teacher.setdefault(review.teacher_id, []).append(review)

    ranked = []
    for teacher in teachers:
        stats = TeacherStats.from_reviews(by_teacher.get(teacher.id, []))
        if stats.review_count == 0:
            continue
        ranked.append(RankedTeacher(teacher=teacher, stats=stats))

    ranked.sort(
        key=lambda r: (-r.stats.avg_overall, -r.stats.review_count, r.teacher.name)
    )
    return ranked[:limit]
