from datetime import date, datetime

import pytest

from studylens.application.activity.normalizer import ActivityLedger
from studylens.application.metrics.calculators import (
    activity_level,
    build_heatmap,
    compare_weeks,
    compute_streaks,
    compute_trend,
    forecast_completion,
    summarize_evolution,
)
from studylens.domain.models import ActivityDay


def ledger_of(*entries: tuple[str, int, int]) -> ActivityLedger:
    return ActivityLedger({d: ActivityDay(d, made, correct, made) for d, made, correct in entries})


@pytest.fixture
def now():
    return datetime(2024, 1, 17, 9, 0)


# --- Streaks ---


def test_current_streak_counts_back_from_today(now):
    ledger = ledger_of(("2024-01-17", 3, 1), ("2024-01-16", 1, 1), ("2024-01-15", 2, 2))
    streaks = compute_streaks(ledger, now)
    assert streaks.current == 3
    assert streaks.longest == 3
    assert streaks.active_days == 3


def test_inactive_today_breaks_current_streak(now):
    ledger = ledger_of(("2024-01-16", 1, 1), ("2024-01-15", 2, 2))
    streaks = compute_streaks(ledger, now)
    assert streaks.current == 0
    assert streaks.longest == 2


def test_zero_days_are_not_active(now):
    ledger = ledger_of(("2024-01-17", 0, 0), ("2024-01-16", 4, 4))
    assert compute_streaks(ledger, now).current == 0
    assert compute_streaks(ledger, now).active_days == 1


def test_longest_streak_crosses_month_boundary(now):
    ledger = ledger_of(
        ("2023-12-30", 1, 0),
        ("2023-12-31", 1, 0),
        ("2024-01-01", 1, 0),
        ("2024-01-02", 1, 0),
        ("2024-01-10", 1, 0),
        ("2024-01-17", 1, 0),
    )
    streaks = compute_streaks(ledger, now)
    assert streaks.longest == 4
    assert streaks.current == 1


def test_streaks_on_empty_ledger(now):
    streaks = compute_streaks(ActivityLedger(), now)
    assert (streaks.current, streaks.longest, streaks.active_days) == (0, 0, 0)


# --- Trend ---


@pytest.mark.parametrize(
    "last,previous,expected",
    [
        (0, 0, 0),
        (12, 0, 1),
        (15, 10, 0.5),
        (5, 10, -0.5),
    ],
)
def test_compute_trend(last, previous, expected):
    assert compute_trend(last, previous) == pytest.approx(expected)


def test_summarize_evolution(now):
    ledger = ledger_of(("2024-01-17", 10, 8), ("2024-01-05", 6, 3), ("2023-12-25", 8, 8))
    evolution = summarize_evolution(ledger, now)

    assert len(evolution.days) == 14
    assert evolution.last14_total == 16
    assert evolution.last14_correct == 11
    assert evolution.previous14_total == 8
    assert evolution.trend == pytest.approx(1.0)
    assert evolution.max_day == 10


def test_evolution_max_day_is_at_least_one(now):
    assert summarize_evolution(ActivityLedger(), now).max_day == 1


# --- Week comparison ---


def test_compare_weeks():
    this_week = [ActivityDay("2024-01-15", 20, 15, 20), ActivityDay("2024-01-16", 20, 15, 20)]
    last_week = [ActivityDay("2024-01-08", 20, 10, 20)]
    comparison = compare_weeks(this_week, last_week)

    assert comparison.this_week.total == 40
    assert comparison.this_week.correct == 30
    assert comparison.questions_delta == 20
    assert comparison.accuracy_this == pytest.approx(0.75)
    assert comparison.accuracy_last == pytest.approx(0.5)
    assert comparison.accuracy_delta_pp == 25


def test_compare_empty_weeks():
    comparison = compare_weeks([ActivityDay("2024-01-15")], [])
    assert comparison.accuracy_this == 0
    assert comparison.accuracy_last == 0
    assert comparison.accuracy_delta_pp == 0
    assert comparison.questions_delta == 0


# --- Heatmap ---


@pytest.mark.parametrize(
    "count,max_count,level",
    [(0, 10, 0), (1, 10, 1), (3, 10, 2), (5, 10, 3), (10, 10, 4), (4, 0, 0)],
)
def test_activity_level(count, max_count, level):
    assert activity_level(count, max_count) == level


def test_build_heatmap(now):
    heatmap = build_heatmap(ledger_of(("2024-01-17", 8, 8), ("2024-01-16", 2, 2)), now)
    assert len(heatmap) == 28
    assert heatmap[-1].level == 4
    assert heatmap[-2].level == 2
    assert heatmap[0].level == 0


# --- Completion forecast ---


def test_forecast_complete_regardless_of_history(now):
    forecast = forecast_completion(10, 10, ActivityLedger(), now)
    assert forecast.status == "complete"


def test_forecast_needs_two_dates(now):
    forecast = forecast_completion(10, 2, ledger_of(("2024-01-10", 5, 5)), now)
    assert forecast.status == "no_estimate"
    assert forecast.remaining == 8


def test_forecast_needs_progress(now):
    ledger = ledger_of(("2024-01-07", 5, 5), ("2024-01-10", 5, 5))
    assert forecast_completion(10, 0, ledger, now).status == "no_estimate"


def test_forecast_linear_projection(now):
    # 10 days since 2024-01-07, 5 topics studied -> 0.5/day; 15 left -> 30 days.
    ledger = ledger_of(("2024-01-07", 5, 5), ("2024-01-12", 5, 5))
    forecast = forecast_completion(20, 5, ledger, now)

    assert forecast.status == "estimate"
    assert forecast.topics_per_day == pytest.approx(0.5)
    assert forecast.days_remaining == 30
    assert forecast.estimated_date == "2024-02-16"
    assert forecast.remaining == 15


def test_forecast_history_starting_today_uses_one_day(now):
    ledger = ledger_of(("2024-01-17", 1, 1), ("2024-01-18", 1, 1))
    forecast = forecast_completion(4, 2, ledger, date(2024, 1, 17))
    assert forecast.topics_per_day == pytest.approx(2.0)
    assert forecast.days_remaining == 1
