"""
Derived metrics over the activity ledger and its windows.

This is a pure computation module with no I/O.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Literal

from studylens.application.activity.normalizer import ActivityLedger
from studylens.application.activity.windows import (
    HeatmapDay,
    evolution_window,
    heatmap_window,
    previous_evolution_total,
)
from studylens.application.dates import parse_iso_date, to_iso, today_of
from studylens.domain.constants import (
    ACTIVITY_LEVEL_HIGH,
    ACTIVITY_LEVEL_MEDIUM,
    ACTIVITY_LEVEL_MEDIUM_HIGH,
)
from studylens.domain.models import ActivityDay


@dataclass(frozen=True)
class StreakInfo:
    current: int
    longest: int
    active_days: int


@dataclass(frozen=True)
class EvolutionSummary:
    """The 14-day evolution series and its trend against the 14 days before it."""

    days: list[ActivityDay]
    last14_total: int
    last14_correct: int
    previous14_total: int
    trend: float
    max_day: int  # Largest daily questions_made, at least 1 for chart scaling


@dataclass(frozen=True)
class WeekTotals:
    total: int
    correct: int


@dataclass(frozen=True)
class WeekComparison:
    this_week: WeekTotals
    last_week: WeekTotals
    questions_delta: int
    accuracy_this: float
    accuracy_last: float
    accuracy_delta_pp: int  # Percentage points


@dataclass(frozen=True)
class HeatmapCell:
    date: str
    count: int
    level: int  # 0 (none) .. 4 (busiest)


@dataclass(frozen=True)
class CompletionForecast:
    """
    Linear completion projection.

    status:
        complete: nothing left to study.
        estimate: days_remaining / estimated_date are set.
        no_estimate: not enough history (or no progress) to project a rate.
    """

    status: Literal["complete", "estimate", "no_estimate"]
    remaining: int = 0
    days_remaining: int | None = None
    estimated_date: str | None = None
    topics_per_day: float | None = None


# ---------- Streaks ----------


def compute_streaks(ledger: ActivityLedger, now: datetime | date) -> StreakInfo:
    """
    Current and longest runs of consecutive active days.

    The current streak only counts if today itself is active; yesterday alone
    earns nothing.
    """
    active = {day.date for day in ledger.values() if day.total > 0}

    current = 0
    walker = today_of(now)
    while to_iso(walker) in active:
        current += 1
        walker -= timedelta(days=1)

    longest = 0
    running = 0
    previous: date | None = None
    for iso in sorted(active):
        day = parse_iso_date(iso)
        if day is None:
            continue
        if previous is not None and day - previous == timedelta(days=1):
            running += 1
        else:
            running = 1
        longest = max(longest, running)
        previous = day

    return StreakInfo(current=current, longest=longest, active_days=len(active))


# ---------- Trend ----------


def compute_trend(last_total: int, previous_total: int) -> float:
    """
    Relative change against the previous window.

    A zero baseline yields 1 when there is any activity now, else 0.
    """
    if previous_total > 0:
        return (last_total - previous_total) / previous_total
    return 1.0 if last_total > 0 else 0.0


def summarize_evolution(ledger: ActivityLedger, now: datetime | date) -> EvolutionSummary:
    days = evolution_window(ledger, now)
    last_total = sum(day.total for day in days)
    previous_total = previous_evolution_total(ledger, now)
    return EvolutionSummary(
        days=days,
        last14_total=last_total,
        last14_correct=sum(day.questions_correct for day in days),
        previous14_total=previous_total,
        trend=compute_trend(last_total, previous_total),
        max_day=max([day.questions_made for day in days] + [1]),
    )


# ---------- Week over week ----------


def _accuracy(correct: int, total: int) -> float:
    return correct / total if total > 0 else 0.0


def compare_weeks(this_week: list[ActivityDay], last_week: list[ActivityDay]) -> WeekComparison:
    this_totals = WeekTotals(
        total=sum(day.questions_made for day in this_week),
        correct=sum(day.questions_correct for day in this_week),
    )
    last_totals = WeekTotals(
        total=sum(day.questions_made for day in last_week),
        correct=sum(day.questions_correct for day in last_week),
    )
    accuracy_this = _accuracy(this_totals.correct, this_totals.total)
    accuracy_last = _accuracy(last_totals.correct, last_totals.total)
    return WeekComparison(
        this_week=this_totals,
        last_week=last_totals,
        questions_delta=this_totals.total - last_totals.total,
        accuracy_this=accuracy_this,
        accuracy_last=accuracy_last,
        accuracy_delta_pp=math.floor((accuracy_this - accuracy_last) * 100 + 0.5),
    )


# ---------- Heatmap ----------


def activity_level(count: int, max_count: int) -> int:
    """
    Bucket a day's count into 0-4 relative to the busiest day of the window.
    """
    if max_count <= 0 or count <= 0:
        return 0

    ratio = count / max_count
    if ratio >= ACTIVITY_LEVEL_HIGH:
        return 4
    elif ratio >= ACTIVITY_LEVEL_MEDIUM_HIGH:
        return 3
    elif ratio >= ACTIVITY_LEVEL_MEDIUM:
        return 2
    else:
        return 1


def build_heatmap(ledger: ActivityLedger, now: datetime | date) -> list[HeatmapCell]:
    days: list[HeatmapDay] = heatmap_window(ledger, now)
    busiest = max((day.count for day in days), default=0)
    return [HeatmapCell(day.date, day.count, activity_level(day.count, busiest)) for day in days]


# ---------- Completion forecast ----------


def forecast_completion(
    total_topics: int,
    studied_topics: int,
    ledger: ActivityLedger,
    now: datetime | date,
) -> CompletionForecast:
    """
    Project the completion date assuming the historical pace continues.

    The pace is studied topics per day since the earliest ledger date.
    """
    remaining = total_topics - studied_topics
    if remaining <= 0:
        return CompletionForecast(status="complete")

    dates = [d for d in (parse_iso_date(iso) for iso in ledger.sorted_dates()) if d is not None]
    if len(dates) < 2:
        return CompletionForecast(status="no_estimate", remaining=remaining)

    today = today_of(now)
    total_days = max(1, (today - dates[0]).days)
    topics_per_day = studied_topics / total_days
    if topics_per_day <= 0:
        return CompletionForecast(status="no_estimate", remaining=remaining)

    days_remaining = math.ceil(remaining / topics_per_day)
    return CompletionForecast(
        status="estimate",
        remaining=remaining,
        days_remaining=days_remaining,
        estimated_date=to_iso(today + timedelta(days=days_remaining)),
        topics_per_day=topics_per_day,
    )
