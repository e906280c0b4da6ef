from datetime import datetime

import pytest

from studylens.domain.models import Subject, Topic, TopicGroup


def make_subject(*topics: Topic, subject_id: str = "math", name: str = "Math") -> Subject:
    return Subject(
        id=subject_id,
        name=name,
        emoji="M",
        topic_groups=[TopicGroup(id=f"{subject_id}_g1", name="Core", topics=list(topics))],
    )


@pytest.fixture
def now():
    """Wednesday, 2024-01-17 at 15:30 local time."""
    return datetime(2024, 1, 17, 15, 30)


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config and data files
    monkeypatch.setenv("HOME", str(home))
    for var in ("STUDYLENS_DATA_FILE", "STUDYLENS_SESSIONS_FILE", "STUDYLENS_GOALS_FILE"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def subject_factory():
    return make_subject
