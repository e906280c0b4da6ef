"""Centralized constants for studylens.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Windows ----------
EVOLUTION_WINDOW_DAYS = 14
HEATMAP_WINDOW_DAYS = 28
WEEK_DAYS = 7

# ---------- Goals ----------
# field -> (min, max)
GOAL_LIMITS: dict[str, tuple[int, int]] = {
    "daily_questions_target": (1, 200),
    "weekly_review_target": (1, 100),
    "weekly_essay_target": (1, 14),
}

# ---------- Sessions ----------
SESSION_RETENTION_DAYS = 90
SESSION_ID_PREFIX = "session_"

# ---------- Heatmap ----------
# Minimum share of the busiest day for activity levels 4, 3 and 2.
ACTIVITY_LEVEL_HIGH = 0.75
ACTIVITY_LEVEL_MEDIUM_HIGH = 0.5
ACTIVITY_LEVEL_MEDIUM = 0.25

# ---------- Insights ----------
WEAK_SUBJECT_MIN_QUESTIONS = 10
WEAK_SUBJECT_ACCURACY = 0.6
NEGLECTED_AFTER_DAYS = 7
MAX_INSIGHT_SUBJECTS = 3
MAX_UPCOMING_DEADLINES = 8
DEADLINE_SOON_DAYS = 3
