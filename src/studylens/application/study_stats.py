"""
Progress statistics over the subject collection.

Provides the overall/per-subject aggregates, due reviews, deadline urgency and
subject insights the overview is assembled from.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal

from studylens.application.dates import parse_iso_date, to_iso, today_of
from studylens.domain.constants import (
    DEADLINE_SOON_DAYS,
    MAX_INSIGHT_SUBJECTS,
    NEGLECTED_AFTER_DAYS,
    WEAK_SUBJECT_ACCURACY,
    WEAK_SUBJECT_MIN_QUESTIONS,
)
from studylens.domain.models import Subject, Topic

Urgency = Literal["overdue", "today", "soon", "normal"]


@dataclass(frozen=True)
class StudyStats:
    total_topics: int = 0
    studied_topics: int = 0
    questions_total: int = 0
    questions_correct: int = 0
    reviews_due: int = 0

    @property
    def accuracy(self) -> float:
        return self.questions_correct / self.questions_total if self.questions_total > 0 else 0.0

    @property
    def progress(self) -> float:
        return self.studied_topics / self.total_topics if self.total_topics > 0 else 0.0


@dataclass(frozen=True)
class ReviewDueItem:
    subject_id: str
    subject_name: str
    group_id: str
    group_name: str
    topic_id: str
    topic_name: str
    next_review: str
    days_overdue: int


@dataclass(frozen=True)
class DeadlineInfo:
    urgency: Urgency
    days: int  # Days until the deadline; negative when overdue


@dataclass(frozen=True)
class DeadlineItem:
    subject_id: str
    subject_name: str
    group_name: str
    topic_id: str
    topic_name: str
    deadline: str
    info: DeadlineInfo


@dataclass(frozen=True)
class SubjectInsight:
    subject_id: str
    subject_name: str
    accuracy: float
    days_since_activity: int | None = None


def _is_review_due(topic: Topic, today_iso: str) -> bool:
    return bool(topic.studied and topic.fsrs_next_review and topic.fsrs_next_review <= today_iso)


def _topic_stats(topics: list[Topic], today: date) -> StudyStats:
    today_iso = to_iso(today)
    return StudyStats(
        total_topics=len(topics),
        studied_topics=sum(1 for t in topics if t.studied),
        questions_total=sum(t.questions_total for t in topics),
        questions_correct=sum(t.questions_correct for t in topics),
        reviews_due=sum(1 for t in topics if _is_review_due(t, today_iso)),
    )


def subject_stats(subject: Subject, now: datetime | date) -> StudyStats:
    return _topic_stats(subject.all_topics(), today_of(now))


def overall_stats(subjects: Iterable[Subject], now: datetime | date) -> StudyStats:
    topics = [topic for subject in subjects for topic in subject.all_topics()]
    return _topic_stats(topics, today_of(now))


def reviews_due(subjects: Iterable[Subject], now: datetime | date) -> list[ReviewDueItem]:
    """Studied topics whose next review is today or earlier, most overdue first."""
    today = today_of(now)
    today_iso = to_iso(today)
    items: list[ReviewDueItem] = []

    for subject in subjects:
        for group in subject.topic_groups:
            for topic in group.topics:
                if not _is_review_due(topic, today_iso):
                    continue
                due = parse_iso_date(topic.fsrs_next_review or "")
                if due is None:
                    continue
                items.append(
                    ReviewDueItem(
                        subject_id=subject.id,
                        subject_name=subject.name,
                        group_id=group.id,
                        group_name=group.name,
                        topic_id=topic.id,
                        topic_name=topic.name,
                        next_review=to_iso(due),
                        days_overdue=(today - due).days,
                    )
                )

    items.sort(key=lambda item: item.days_overdue, reverse=True)
    return items


def deadline_info(deadline: str | None, now: datetime | date) -> DeadlineInfo | None:
    """Classify a topic deadline relative to today; None when absent or malformed."""
    if not deadline:
        return None
    due = parse_iso_date(deadline)
    if due is None:
        return None

    days = (due - today_of(now)).days
    if days < 0:
        return DeadlineInfo("overdue", days)
    if days == 0:
        return DeadlineInfo("today", 0)
    if days <= DEADLINE_SOON_DAYS:
        return DeadlineInfo("soon", days)
    return DeadlineInfo("normal", days)


def pending_deadlines(subjects: Iterable[Subject], now: datetime | date) -> list[DeadlineItem]:
    """Unstudied topics with a deadline, earliest first."""
    items: list[DeadlineItem] = []
    for subject in subjects:
        for group in subject.topic_groups:
            for topic in group.topics:
                if topic.studied or not topic.deadline:
                    continue
                info = deadline_info(topic.deadline, now)
                if info is None:
                    continue
                items.append(
                    DeadlineItem(
                        subject_id=subject.id,
                        subject_name=subject.name,
                        group_name=group.name,
                        topic_id=topic.id,
                        topic_name=topic.name,
                        deadline=topic.deadline,
                        info=info,
                    )
                )
    items.sort(key=lambda item: item.deadline)
    return items


def weak_subjects(subjects: Iterable[Subject], now: datetime | date) -> list[SubjectInsight]:
    """Subjects with enough answered questions and low accuracy, worst first."""
    weak = []
    for subject in subjects:
        stats = subject_stats(subject, now)
        if stats.questions_total >= WEAK_SUBJECT_MIN_QUESTIONS and stats.accuracy < WEAK_SUBJECT_ACCURACY:
            weak.append(SubjectInsight(subject.id, subject.name, stats.accuracy))
    weak.sort(key=lambda insight: insight.accuracy)
    return weak[:MAX_INSIGHT_SUBJECTS]


def neglected_subjects(subjects: Iterable[Subject], now: datetime | date) -> list[SubjectInsight]:
    """
    Subjects whose most recent study date is more than a week old, stalest first.

    Subjects never studied are not reported.
    """
    today = today_of(now)
    neglected = []
    for subject in subjects:
        studied = [
            d
            for d in (parse_iso_date(t.date_studied or "") for t in subject.all_topics())
            if d is not None
        ]
        if not studied:
            continue
        days_since = (today - max(studied)).days
        if days_since > NEGLECTED_AFTER_DAYS:
            stats = subject_stats(subject, now)
            neglected.append(SubjectInsight(subject.id, subject.name, stats.accuracy, days_since))
    neglected.sort(key=lambda insight: insight.days_since_activity or 0, reverse=True)
    return neglected[:MAX_INSIGHT_SUBJECTS]
