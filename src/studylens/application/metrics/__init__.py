# Application Metrics Package
from .calculators import (
    CompletionForecast,
    EvolutionSummary,
    HeatmapCell,
    StreakInfo,
    WeekComparison,
    WeekTotals,
    activity_level,
    build_heatmap,
    compare_weeks,
    compute_streaks,
    compute_trend,
    forecast_completion,
    summarize_evolution,
)
from .review_calendar import UpcomingReviewItem, WeeklyReviewDay, build_weekly_review_calendar

__all__ = [
    "CompletionForecast",
    "EvolutionSummary",
    "HeatmapCell",
    "StreakInfo",
    "WeekComparison",
    "WeekTotals",
    "activity_level",
    "build_heatmap",
    "compare_weeks",
    "compute_streaks",
    "compute_trend",
    "forecast_completion",
    "summarize_evolution",
    "UpcomingReviewItem",
    "WeeklyReviewDay",
    "build_weekly_review_calendar",
]
