# Application Activity Package
from .normalizer import ActivityLedger, build_ledger
from .sources import ActivitySource, ExplicitLogs, FallbackTotal, ReviewSnapshots, classify_source
from .windows import (
    HeatmapDay,
    current_week_window,
    evolution_window,
    heatmap_window,
    previous_evolution_total,
    previous_week_window,
    week_dates,
)

__all__ = [
    "ActivityLedger",
    "build_ledger",
    "ActivitySource",
    "ExplicitLogs",
    "FallbackTotal",
    "ReviewSnapshots",
    "classify_source",
    "HeatmapDay",
    "current_week_window",
    "evolution_window",
    "heatmap_window",
    "previous_evolution_total",
    "previous_week_window",
    "week_dates",
]
