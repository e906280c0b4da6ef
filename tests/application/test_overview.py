import json
from unittest.mock import MagicMock

import pytest

from studylens.application.goals import GoalStateManager
from studylens.application.overview import OverviewService, count_weekly_reviews
from studylens.application.sessions import SessionLedger
from studylens.domain.models import (
    EssayEntry,
    QuestionLog,
    ReviewSnapshot,
    SessionDraft,
    StudyData,
    StudyGoals,
    StudySession,
    Topic,
)
from studylens.infrastructure.adapters.json_stores import InMemorySessionRepository


@pytest.fixture
def study_data(subject_factory):
    math = subject_factory(
        Topic(
            id="t1",
            name="Derivatives",
            studied=True,
            questions_total=19,
            questions_correct=15,
            date_studied="2024-01-10",
            fsrs_next_review="2024-01-16",
            question_logs=[
                QuestionLog("2024-01-17", 10, 8),
                QuestionLog("2024-01-15", 5, 5),
                QuestionLog("2024-01-10", 4, 2),
            ],
        ),
        Topic(id="t2", name="Integrals", deadline="2024-01-12"),
        Topic(id="t3", name="Series", deadline="2024-01-19"),
    )
    physics = subject_factory(
        Topic(
            id="t4",
            name="Kinematics",
            studied=True,
            questions_total=14,
            questions_correct=9,
            date_studied="2024-01-09",
            review_history=[
                ReviewSnapshot("2024-01-09", 10, 6),
                ReviewSnapshot("2024-01-16", 14, 9),
            ],
        ),
        subject_id="phys",
        name="Physics",
    )
    essays = [EssayEntry("e1", "2024-01-16", 800), EssayEntry("e2", "2024-01-05", 700)]
    return StudyData(subjects=[math, physics], essays=essays)


@pytest.fixture
def goals_store():
    store = MagicMock()
    store.load.return_value = StudyGoals(weekly_review_target=5)
    return store


@pytest.fixture
def service(goals_store):
    repo = InMemorySessionRepository(
        [
            StudySession("s1", "math", "2024-01-17T08:00:00", "2024-01-17T08:45:00", 45),
            StudySession("s2", "phys", "2024-01-16T08:00:00", "2024-01-16T08:30:00", 30),
        ]
    )
    return OverviewService(SessionLedger(repo), GoalStateManager(goals_store))


def test_build_overview(service, study_data, now):
    model = service.build(study_data, now)

    assert model.today == "2024-01-17"
    assert model.overall.total_topics == 4
    assert model.overall.studied_topics == 2
    assert model.overall.questions_total == 33
    assert model.overall.reviews_due == 1

    # Physics is fully studied so it sorts first.
    assert [s.subject_id for s in model.subjects] == ["phys", "math"]

    assert model.today_activity.questions_made == 10
    assert (model.streaks.current, model.streaks.longest, model.streaks.active_days) == (3, 3, 5)
    assert model.week_comparison.this_week.total == 19
    assert model.week_comparison.last_week.total == 14

    assert len(model.evolution.days) == 14
    assert len(model.heatmap) == 28
    assert len(model.weekly_review_calendar) == 7
    assert model.weekly_review_calendar[1].items[0].topic_id == "t1"


def test_goal_progress(service, study_data, now):
    progress = service.build(study_data, now).goal_progress

    assert progress.goals.weekly_review_target == 5
    assert progress.questions_today == 10
    assert progress.weekly_questions == 19
    assert progress.weekly_reviews == 1
    assert progress.weekly_essays == 1


def test_deadlines_and_reviews(service, study_data, now):
    model = service.build(study_data, now)

    assert [item.topic_id for item in model.overdue_deadlines] == ["t2"]
    assert [item.topic_id for item in model.upcoming_deadlines] == ["t3"]
    assert model.upcoming_deadlines[0].info.urgency == "soon"
    assert [item.topic_id for item in model.reviews_due] == ["t1"]
    assert model.reviews_due[0].days_overdue == 1


def test_completion_forecast(service, study_data, now):
    completion = service.build(study_data, now).completion

    # Two topics in the eight days since 2024-01-09.
    assert completion.status == "estimate"
    assert completion.topics_per_day == pytest.approx(0.25)
    assert completion.days_remaining == 8
    assert completion.estimated_date == "2024-01-25"


def test_study_minutes(service, study_data, now):
    model = service.build(study_data, now)
    assert model.study_minutes_today == 45
    assert model.study_minutes_week == 75


def test_recorded_session_shows_up_on_rebuild(service, study_data, now):
    service.record_session(
        SessionDraft("math", "2024-01-17T14:00:00", "2024-01-17T14:20:00", 20, "review")
    )
    assert service.build(study_data, now).study_minutes_today == 65


def test_update_goal_flows_through_store(service, goals_store):
    goals = service.update_goal("weekly_essay_target", 99)
    assert goals.weekly_essay_target == 14
    goals_store.save.assert_called_once()


def test_empty_data(service, now):
    model = service.build(StudyData(), now)

    assert model.overall.total_topics == 0
    assert model.overall.progress == 0
    assert model.subjects == []
    assert model.streaks.current == 0
    assert model.completion.status == "complete"
    assert model.evolution.max_day == 1


def test_to_dict_is_json_serializable(service, study_data, now):
    data = service.build(study_data, now).to_dict()

    encoded = json.loads(json.dumps(data))
    assert encoded["overall"]["progress"] == pytest.approx(0.5)
    assert encoded["subjects"][0]["stats"]["progress"] == pytest.approx(1.0)
    assert encoded["goal_progress"]["goals"]["weekly_review_target"] == 5


def test_count_weekly_reviews(study_data, now):
    assert count_weekly_reviews(study_data.subjects, now) == 1
