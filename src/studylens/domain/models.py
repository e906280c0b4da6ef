"""
Domain models for study tracking.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from typing import Literal

SessionType = Literal["questions", "review", "reading", "essay"]


@dataclass(frozen=True)
class QuestionLog:
    """
    Explicit per-day question log for a topic.

    Attributes:
        date: ISO date (YYYY-MM-DD). Malformed dates are ignored by the normalizer.
        questions_made: Questions answered that day.
        questions_correct: Correct answers that day.
    """

    date: str
    questions_made: int
    questions_correct: int


@dataclass(frozen=True)
class ReviewSnapshot:
    """
    A review-history entry.

    Question counts are cumulative as of ``date``, not daily increments.
    """

    date: str
    questions_total: int
    questions_correct: int
    rating: int | None = None
    interval_days: int | None = None


@dataclass
class Topic:
    id: str
    name: str
    studied: bool = False
    questions_total: int = 0
    questions_correct: int = 0
    date_studied: str | None = None
    deadline: str | None = None  # YYYY-MM-DD
    priority: str | None = None
    fsrs_next_review: str | None = None  # YYYY-MM-DD, computed by the scheduler
    question_logs: list[QuestionLog] = field(default_factory=list)
    review_history: list[ReviewSnapshot] = field(default_factory=list)


@dataclass
class TopicGroup:
    id: str
    name: str
    topics: list[Topic] = field(default_factory=list)


@dataclass
class Subject:
    id: str
    name: str
    emoji: str = ""
    topic_groups: list[TopicGroup] = field(default_factory=list)

    def all_topics(self) -> list[Topic]:
        return [topic for group in self.topic_groups for topic in group.topics]


@dataclass(frozen=True)
class EssayEntry:
    id: str
    date: str
    total_score: int = 0


@dataclass
class StudyData:
    """Everything the overview is derived from."""

    subjects: list[Subject] = field(default_factory=list)
    essays: list[EssayEntry] = field(default_factory=list)


@dataclass(frozen=True)
class ActivityDay:
    """
    Aggregate activity for one calendar date.

    ``total`` mirrors ``questions_made`` once the ledger is built; it is kept
    separate so other activity measures can be folded in later.
    """

    date: str
    questions_made: int = 0
    questions_correct: int = 0
    total: int = 0


@dataclass(frozen=True)
class StudySession:
    id: str
    subject_id: str
    start_time: str  # ISO timestamp
    end_time: str  # ISO timestamp
    duration_minutes: int
    type: SessionType = "questions"


@dataclass(frozen=True)
class SessionDraft:
    """A finished session that has not been assigned an id yet."""

    subject_id: str
    start_time: str
    end_time: str
    duration_minutes: int
    type: SessionType = "questions"


@dataclass(frozen=True)
class StudyGoals:
    daily_questions_target: int = 30
    weekly_review_target: int = 20
    weekly_essay_target: int = 1
