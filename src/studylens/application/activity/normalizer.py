"""
Activity normalizer.

Folds every topic's activity source into one canonical ledger keyed by ISO
date. This is a pure computation module with no I/O.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from datetime import date, datetime
from types import MappingProxyType

from studylens.application.dates import today_of
from studylens.domain.models import ActivityDay, Subject

from .sources import classify_source

logger = logging.getLogger(__name__)


class ActivityLedger(Mapping[str, ActivityDay]):
    """
    Read-only mapping of ISO date -> ActivityDay.

    Built once per derivation pass; consumers read it and never write.
    """

    def __init__(self, days: Mapping[str, ActivityDay] | None = None):
        self._days = MappingProxyType(dict(days or {}))

    def __getitem__(self, key: str) -> ActivityDay:
        return self._days[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._days)

    def __len__(self) -> int:
        return len(self._days)

    def __repr__(self) -> str:
        return f"ActivityLedger({len(self._days)} days)"

    def day(self, iso_date: str) -> ActivityDay:
        """The entry for ``iso_date``, or a zero day when nothing was recorded."""
        return self._days.get(iso_date) or ActivityDay(date=iso_date)

    def sorted_dates(self) -> list[str]:
        return sorted(self._days)


def build_ledger(subjects: Iterable[Subject], now: datetime | date) -> ActivityLedger:
    """
    Build the canonical per-day activity ledger.

    Args:
        subjects: Full subject collection (subjects -> topic groups -> topics).
        now: Reference timestamp; its calendar day receives legacy totals that
            carry no usable study date.

    Returns:
        ActivityLedger with ``total == questions_made`` and
        ``0 <= questions_correct <= questions_made`` for every date.
    """
    today = today_of(now)
    made: dict[str, int] = {}
    correct: dict[str, int] = {}
    topics_seen = 0

    for subject in subjects:
        for group in subject.topic_groups:
            for topic in group.topics:
                topics_seen += 1
                source = classify_source(topic, today)
                if source is None:
                    continue
                for day, day_made, day_correct in source.contributions():
                    made[day] = made.get(day, 0) + day_made
                    correct[day] = correct.get(day, 0) + day_correct

    days = {
        day: ActivityDay(
            date=day,
            questions_made=day_made,
            questions_correct=min(correct[day], day_made),
            total=day_made,
        )
        for day, day_made in made.items()
    }
    logger.debug(f"Built ledger with {len(days)} days from {topics_seen} topics")
    return ActivityLedger(days)
