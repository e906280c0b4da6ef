"""Weekly calendar of topics due for review, bucketed by next-review date."""

import unicodedata
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime

from studylens.application.activity.windows import week_dates
from studylens.domain.models import Subject


@dataclass(frozen=True)
class UpcomingReviewItem:
    topic_id: str
    topic_name: str
    subject_id: str
    subject_emoji: str
    group_name: str
    next_review: str


@dataclass
class WeeklyReviewDay:
    weekday: int  # 0 = Monday
    iso_date: str
    items: list[UpcomingReviewItem] = field(default_factory=list)


def collation_key(name: str) -> tuple[str, str]:
    """
    Accent-insensitive, case-insensitive sort key.

    "Álgebra" sorts beside "algebra" rather than after "zoologia"; the raw
    name breaks ties so the order stays deterministic.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold(), name


def build_weekly_review_calendar(
    subjects: Iterable[Subject], now: datetime | date
) -> list[WeeklyReviewDay]:
    """
    Seven Monday-start days, each holding the topics scheduled for review that day.

    Topics without a next-review date, or with one outside the current week,
    are left out.
    """
    days = [WeeklyReviewDay(weekday=i, iso_date=iso) for i, iso in enumerate(week_dates(now))]
    bucket = {day.iso_date: day.items for day in days}

    for subject in subjects:
        for group in subject.topic_groups:
            for topic in group.topics:
                if not topic.fsrs_next_review:
                    continue
                items = bucket.get(topic.fsrs_next_review)
                if items is None:
                    continue
                items.append(
                    UpcomingReviewItem(
                        topic_id=topic.id,
                        topic_name=topic.name,
                        subject_id=subject.id,
                        subject_emoji=subject.emoji,
                        group_name=group.name,
                        next_review=topic.fsrs_next_review,
                    )
                )

    for day in days:
        day.items.sort(key=lambda item: collation_key(item.topic_name))
    return days
