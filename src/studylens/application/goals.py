"""Goal state manager: validates, clamps and forwards study-goal updates."""

import logging
import math
from dataclasses import asdict, replace
from typing import Any

from studylens.domain.constants import GOAL_LIMITS
from studylens.domain.models import StudyGoals
from studylens.domain.ports import GoalsStore

logger = logging.getLogger(__name__)

# Keys used by exported study data from older app versions.
_LEGACY_GOAL_KEYS = {
    "dailyQuestionsTarget": "daily_questions_target",
    "dailyStudyTarget": "daily_questions_target",
    "weeklyReviewTarget": "weekly_review_target",
    "weeklyEssayTarget": "weekly_essay_target",
}


class UnknownGoalError(KeyError):
    """Raised when an update names a field that is not a study goal."""


def clamp_goal(field: str, raw_value: Any) -> int:
    """
    Round and bound ``raw_value`` to the field's range.

    Non-numeric and non-finite input falls back to the range minimum.
    """
    if field not in GOAL_LIMITS:
        raise UnknownGoalError(field)
    low, high = GOAL_LIMITS[field]

    try:
        value = float(raw_value)
    except (TypeError, ValueError, OverflowError):
        return low
    if not math.isfinite(value):
        return low
    # Half-up rounding: 2.5 -> 3.
    return max(low, min(high, math.floor(value + 0.5)))


def normalize_goals(raw: Any) -> StudyGoals:
    """
    Build StudyGoals from a loosely-typed payload, clamping every field.

    Missing fields keep their defaults; unknown keys are ignored.
    """
    goals = StudyGoals()
    if not isinstance(raw, dict):
        return goals

    values: dict[str, int] = {}
    for key, value in raw.items():
        field = _LEGACY_GOAL_KEYS.get(key, key)
        if field in GOAL_LIMITS and field not in values:
            values[field] = clamp_goal(field, value)
    return replace(goals, **values)


class GoalStateManager:
    """
    Validates goal updates and hands the full goals object to the settings store.

    Holds no goal state itself; the store is the source of truth.
    """

    def __init__(self, store: GoalsStore):
        self._store = store

    @property
    def goals(self) -> StudyGoals:
        return self._store.load()

    def update_goal(self, field: str, raw_value: Any) -> StudyGoals:
        """
        Clamp ``raw_value`` into ``field`` and persist the updated goals.

        Raises:
            UnknownGoalError: If ``field`` is not a StudyGoals field.
        """
        value = clamp_goal(field, raw_value)
        updated = replace(self._store.load(), **{field: value})
        if value != raw_value:
            logger.debug(f"Goal {field}: {raw_value!r} clamped to {value}")
        self._store.save(updated)
        return updated

    def as_dict(self) -> dict[str, int]:
        return asdict(self.goals)
