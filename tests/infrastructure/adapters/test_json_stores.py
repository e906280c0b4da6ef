import json

import pytest

from studylens.domain.models import StudyGoals, StudySession
from studylens.infrastructure.adapters.json_stores import JsonGoalsStore, JsonSessionRepository


@pytest.fixture
def sessions_path(tmp_path):
    return tmp_path / "data" / "sessions.json"


def test_missing_session_file_is_empty(sessions_path):
    assert JsonSessionRepository(sessions_path).load() == []


def test_session_save_then_load(sessions_path):
    repo = JsonSessionRepository(sessions_path)
    session = StudySession("session_1", "math", "2024-01-17T10:00:00", "2024-01-17T10:30:00", 30, "reading")

    repo.save([session])

    assert json.loads(sessions_path.read_text())[0]["subject_id"] == "math"
    assert repo.load() == [session]


def test_session_load_accepts_camel_case_and_skips_junk(sessions_path):
    sessions_path.parent.mkdir(parents=True)
    sessions_path.write_text(
        json.dumps(
            [
                {
                    "id": "session_a",
                    "subjectId": "bio",
                    "startTime": "2024-01-17T10:00:00.000Z",
                    "endTime": "2024-01-17T10:40:00.000Z",
                    "durationMinutes": 40,
                    "type": "teleport",
                },
                {"subjectId": "no-id"},
                "not a dict",
            ]
        )
    )

    sessions = JsonSessionRepository(sessions_path).load()

    assert len(sessions) == 1
    assert sessions[0].subject_id == "bio"
    assert sessions[0].duration_minutes == 40
    assert sessions[0].type == "questions"


def test_session_file_must_hold_an_array(sessions_path):
    sessions_path.parent.mkdir(parents=True)
    sessions_path.write_text('{"sessions": []}')
    with pytest.raises(ValueError):
        JsonSessionRepository(sessions_path).load()


def test_goals_default_when_missing(tmp_path):
    assert JsonGoalsStore(tmp_path / "goals.json").load() == StudyGoals()


def test_goals_default_when_corrupt(tmp_path):
    path = tmp_path / "goals.json"
    path.write_text("{not json")
    assert JsonGoalsStore(path).load() == StudyGoals()


def test_goals_roundtrip_and_clamp_on_load(tmp_path):
    path = tmp_path / "goals.json"
    store = JsonGoalsStore(path)
    store.save(StudyGoals(daily_questions_target=50))

    assert store.load() == StudyGoals(daily_questions_target=50)

    path.write_text(json.dumps({"weeklyReviewTarget": 1000, "daily_questions_target": "12"}))
    assert store.load() == StudyGoals(daily_questions_target=12, weekly_review_target=100)
