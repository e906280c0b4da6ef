"""
JSON file adapters for the session log and the goals settings store.
"""

import json
import logging
from dataclasses import asdict
from pathlib import Path

from studylens.application.goals import normalize_goals
from studylens.domain.models import StudyGoals, StudySession
from studylens.domain.ports import GoalsStore, SessionRepository

logger = logging.getLogger(__name__)

_SESSION_TYPES = {"questions", "review", "reading", "essay"}


def _session_from_dict(raw: dict) -> StudySession:
    session_type = raw.get("type", "questions")
    return StudySession(
        id=str(raw["id"]),
        subject_id=str(raw.get("subject_id", raw.get("subjectId", ""))),
        start_time=str(raw.get("start_time", raw.get("startTime", ""))),
        end_time=str(raw.get("end_time", raw.get("endTime", ""))),
        duration_minutes=int(raw.get("duration_minutes", raw.get("durationMinutes", 0))),
        type=session_type if session_type in _SESSION_TYPES else "questions",
    )


class JsonSessionRepository(SessionRepository):
    """
    Stores the session log as a JSON array in a single file.

    Errors propagate; the session ledger decides how to degrade.
    """

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> list[StudySession]:
        if not self.path.exists():
            return []
        payload = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(payload, list):
            raise ValueError(f"Expected a JSON array in {self.path}")

        sessions = []
        for raw in payload:
            try:
                sessions.append(_session_from_dict(raw))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.debug(f"Skipping malformed session entry {raw!r}: {e}")
        return sessions

    def save(self, sessions: list[StudySession]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps([asdict(s) for s in sessions], indent=2), encoding="utf-8"
        )


class InMemorySessionRepository(SessionRepository):
    def __init__(self, sessions: list[StudySession] | None = None):
        self.sessions: list[StudySession] = list(sessions or [])

    def load(self) -> list[StudySession]:
        return list(self.sessions)

    def save(self, sessions: list[StudySession]) -> None:
        self.sessions = list(sessions)


class JsonGoalsStore(GoalsStore):
    """
    Goals persisted as a small JSON object.

    A missing or unreadable file yields the default goals.
    """

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> StudyGoals:
        if not self.path.exists():
            return StudyGoals()
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read goals from {self.path}, using defaults: {e}")
            return StudyGoals()
        return normalize_goals(raw)

    def save(self, goals: StudyGoals) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(asdict(goals), indent=2), encoding="utf-8")
