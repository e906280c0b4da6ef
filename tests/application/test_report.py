from unittest.mock import MagicMock

import pytest

from studylens.application.goals import GoalStateManager
from studylens.application.overview import OverviewService
from studylens.application.report import export_report, render_report, report_filename
from studylens.application.sessions import SessionLedger
from studylens.domain.models import QuestionLog, StudyData, StudyGoals, Topic
from studylens.infrastructure.adapters.json_stores import InMemorySessionRepository


@pytest.fixture
def service():
    store = MagicMock()
    store.load.return_value = StudyGoals()
    return OverviewService(SessionLedger(InMemorySessionRepository()), GoalStateManager(store))


@pytest.fixture
def model(service, subject_factory, now):
    subject = subject_factory(
        Topic(
            id="t1",
            name="Limits",
            studied=True,
            questions_total=10,
            questions_correct=7,
            question_logs=[QuestionLog("2024-01-16", 4, 3), QuestionLog("2024-01-17", 6, 4)],
        ),
        Topic(id="t2", name="Series"),
    )
    return service.build(StudyData(subjects=[subject]), now)


def test_render_report(model):
    text = render_report(model)
    lines = text.splitlines()

    assert lines[0] == "Study report - 2024-01-17"
    assert "Overall progress: 50%" in lines
    assert "Accuracy: 70%" in lines
    assert "Questions: 7/10" in lines
    assert "Streak: 2 day(s) | Best: 2" in lines
    assert "  M Math: 50% progress | 70% accuracy | 7/10 questions" in lines
    assert "  Reviews: 0/20" in lines
    assert "  Essays: 0/1" in lines
    assert "  Time: 0 min" in lines


def test_render_report_completion_line(service, subject_factory, now):
    done = service.build(
        StudyData(subjects=[subject_factory(Topic(id="t1", name="Limits", studied=True))]), now
    )
    assert render_report(done).endswith("Completion: all topics studied")


def test_report_filename():
    assert report_filename("2024-01-17") == "study-report-2024-01-17.txt"


def test_export_report(model, tmp_path):
    target = tmp_path / "reports"

    path = export_report(model, target)

    assert path == target / "study-report-2024-01-17.txt"
    assert path.read_text(encoding="utf-8") == render_report(model)
