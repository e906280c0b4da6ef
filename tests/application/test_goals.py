import json
from unittest.mock import MagicMock

import pytest

from studylens.application.goals import (
    GoalStateManager,
    UnknownGoalError,
    clamp_goal,
    normalize_goals,
)
from studylens.domain.models import StudyGoals


@pytest.fixture
def store():
    mock = MagicMock()
    mock.load.return_value = StudyGoals()
    return mock


@pytest.mark.parametrize(
    "field,raw,expected",
    [
        ("daily_questions_target", 500, 200),
        ("daily_questions_target", -5, 1),
        ("daily_questions_target", 42.5, 43),
        ("daily_questions_target", "60", 60),
        ("daily_questions_target", float("nan"), 1),
        ("daily_questions_target", float("inf"), 1),
        ("daily_questions_target", None, 1),
        ("daily_questions_target", 10**400, 1),
        ("weekly_review_target", 101, 100),
        ("weekly_essay_target", 20, 14),
        ("weekly_essay_target", "lots", 1),
    ],
)
def test_clamp_goal(field, raw, expected):
    assert clamp_goal(field, raw) == expected


def test_clamp_unknown_field():
    with pytest.raises(UnknownGoalError):
        clamp_goal("monthly_target", 3)


def test_update_goal_saves_full_goals(store):
    manager = GoalStateManager(store)

    updated = manager.update_goal("daily_questions_target", 500)

    assert updated == StudyGoals(daily_questions_target=200)
    store.save.assert_called_once_with(
        StudyGoals(daily_questions_target=200, weekly_review_target=20, weekly_essay_target=1)
    )


def test_update_goal_is_idempotent(store):
    manager = GoalStateManager(store)
    first = manager.update_goal("daily_questions_target", -5)
    store.load.return_value = first
    second = manager.update_goal("daily_questions_target", first.daily_questions_target)
    assert first == second
    assert second.daily_questions_target == 1


def test_update_unknown_goal_does_not_save(store):
    with pytest.raises(UnknownGoalError):
        GoalStateManager(store).update_goal("bogus", 3)
    store.save.assert_not_called()


def test_normalize_goals_accepts_legacy_keys():
    goals = normalize_goals({"dailyStudyTarget": 999, "weeklyEssayTarget": 2, "extra": 1})
    assert goals == StudyGoals(daily_questions_target=200, weekly_review_target=20, weekly_essay_target=2)


def test_normalize_goals_non_dict():
    assert normalize_goals(None) == StudyGoals()
    assert normalize_goals([1, 2]) == StudyGoals()


def test_normalize_goals_huge_integer_from_json():
    raw = json.loads('{"daily_questions_target": 1' + "0" * 400 + ', "weekly_review_target": 30}')
    assert normalize_goals(raw) == StudyGoals(daily_questions_target=1, weekly_review_target=30)
