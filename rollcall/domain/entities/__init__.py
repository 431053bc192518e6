from .teacher import Teacher
from .review import Review, ReviewStatus
from .teacher_stats import TeacherStats, RankedTeacher, rank_teachers

__all__ = [
    "Teacher",
    "Review",
    "ReviewStatus",
    "TeacherStats",
    "RankedTeacher",
    "rank_teachers",
]
