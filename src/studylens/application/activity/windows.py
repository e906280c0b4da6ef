"""
Fixed calendar windows over the activity ledger.

Every window is zero-filled: dates absent from the ledger appear as empty
ActivityDays so sums and charts always see a fixed-length series.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from studylens.application.dates import day_range, today_of, week_start
from studylens.domain.constants import EVOLUTION_WINDOW_DAYS, HEATMAP_WINDOW_DAYS, WEEK_DAYS
from studylens.domain.models import ActivityDay

from .normalizer import ActivityLedger


@dataclass(frozen=True)
class HeatmapDay:
    date: str
    count: int


def trailing_window(ledger: ActivityLedger, now: datetime | date, days: int) -> list[ActivityDay]:
    """``days`` entries ending today, oldest first."""
    start = today_of(now) - timedelta(days=days - 1)
    return [ledger.day(d) for d in day_range(start, days)]


def evolution_window(ledger: ActivityLedger, now: datetime | date) -> list[ActivityDay]:
    """Today and the preceding 13 days."""
    return trailing_window(ledger, now, EVOLUTION_WINDOW_DAYS)


def previous_evolution_total(ledger: ActivityLedger, now: datetime | date) -> int:
    """Sum of ``total`` over days 14-27 before today; the trend baseline."""
    start = today_of(now) - timedelta(days=2 * EVOLUTION_WINDOW_DAYS - 1)
    return sum(ledger.day(d).total for d in day_range(start, EVOLUTION_WINDOW_DAYS))


def heatmap_window(ledger: ActivityLedger, now: datetime | date) -> list[HeatmapDay]:
    """Today and the preceding 27 days, reduced to question counts."""
    return [
        HeatmapDay(date=day.date, count=day.questions_made)
        for day in trailing_window(ledger, now, HEATMAP_WINDOW_DAYS)
    ]


def week_dates(now: datetime | date, weeks_back: int = 0) -> list[str]:
    """ISO dates of a Monday-start week; ``weeks_back=1`` is the previous week."""
    start = week_start(now) - timedelta(weeks=weeks_back)
    return list(day_range(start, WEEK_DAYS))


def current_week_window(ledger: ActivityLedger, now: datetime | date) -> list[ActivityDay]:
    return [ledger.day(d) for d in week_dates(now)]


def previous_week_window(ledger: ActivityLedger, now: datetime | date) -> list[ActivityDay]:
    return [ledger.day(d) for d in week_dates(now, weeks_back=1)]
