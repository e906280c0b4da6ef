"""
File-backed StudyDataSource.

Reads the subject/topic collection from a JSON or YAML document. The data is
user-editable, so parsing is tolerant: malformed items are skipped, numbers
are coerced, and both snake_case and the camelCase keys of the app's export
format are accepted.
"""

import json
import logging
import math
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from studylens.domain.models import (
    EssayEntry,
    QuestionLog,
    ReviewSnapshot,
    StudyData,
    Subject,
    Topic,
    TopicGroup,
)
from studylens.domain.ports import StudyDataSource

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


def _get(raw: dict[str, Any], snake: str, camel: str, default: Any = None) -> Any:
    if snake in raw:
        return raw[snake]
    return raw.get(camel, default)


def _to_int(value: Any) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(number)


def _to_str(value: Any) -> str | None:
    # YAML decodes unquoted dates and timestamps into date/datetime objects.
    if isinstance(value, date):
        return value.isoformat()
    return value if isinstance(value, str) and value else None


def _to_day(value: Any) -> str:
    """Calendar-day string for a log/snapshot/essay date; "" when missing."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return "" if value is None else str(value)


def _dicts(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def parse_topic(raw: dict[str, Any], index: int = 0) -> Topic:
    logs = [
        QuestionLog(
            date=_to_day(entry.get("date")),
            questions_made=_to_int(_get(entry, "questions_made", "questionsMade")),
            questions_correct=_to_int(_get(entry, "questions_correct", "questionsCorrect")),
        )
        for entry in _dicts(_get(raw, "question_logs", "questionLogs"))
    ]
    history = [
        ReviewSnapshot(
            date=_to_day(entry.get("date")),
            questions_total=_to_int(_get(entry, "questions_total", "questionsTotal")),
            questions_correct=_to_int(_get(entry, "questions_correct", "questionsCorrect")),
            rating=entry.get("rating") if isinstance(entry.get("rating"), int) else None,
            interval_days=_to_int(_get(entry, "interval_days", "intervalDays")) or None,
        )
        for entry in _dicts(_get(raw, "review_history", "reviewHistory"))
    ]
    return Topic(
        id=str(raw.get("id") or f"topic_{index}"),
        name=str(raw.get("name") or ""),
        studied=bool(raw.get("studied", False)),
        questions_total=_to_int(_get(raw, "questions_total", "questionsTotal")),
        questions_correct=_to_int(_get(raw, "questions_correct", "questionsCorrect")),
        date_studied=_to_str(_get(raw, "date_studied", "dateStudied")),
        deadline=_to_str(raw.get("deadline")),
        priority=_to_str(raw.get("priority")),
        fsrs_next_review=_to_str(_get(raw, "fsrs_next_review", "fsrsNextReview")),
        question_logs=logs,
        review_history=history,
    )


def parse_subject(raw: dict[str, Any], index: int = 0) -> Subject:
    groups_raw = _dicts(_get(raw, "topic_groups", "topicGroups"))
    if not groups_raw and isinstance(raw.get("topics"), list):
        # Legacy layout: topics directly under the subject.
        groups_raw = [{"id": f"group_{index}", "name": "General", "topics": raw["topics"]}]

    groups = [
        TopicGroup(
            id=str(group.get("id") or f"group_{index}_{g}"),
            name=str(group.get("name") or "General"),
            topics=[parse_topic(t, i) for i, t in enumerate(_dicts(group.get("topics")))],
        )
        for g, group in enumerate(groups_raw)
    ]
    return Subject(
        id=str(raw.get("id") or f"subject_{index}"),
        name=str(raw.get("name") or "Subject"),
        emoji=str(raw.get("emoji") or ""),
        topic_groups=groups,
    )


def parse_study_data(payload: Any) -> StudyData:
    """Build StudyData from a decoded JSON/YAML document."""
    if not isinstance(payload, dict):
        return StudyData()

    subjects = [parse_subject(s, i) for i, s in enumerate(_dicts(payload.get("subjects")))]

    essays_raw = payload.get("essays")
    if essays_raw is None:
        settings = payload.get("settings") if isinstance(payload.get("settings"), dict) else {}
        monitor = _get(settings, "essay_monitor", "essayMonitor", {})
        essays_raw = monitor.get("essays") if isinstance(monitor, dict) else None
    essays = [
        EssayEntry(
            id=str(e.get("id") or f"essay_{i}"),
            date=_to_day(e.get("date")),
            total_score=_to_int(_get(e, "total_score", "totalScore")),
        )
        for i, e in enumerate(_dicts(essays_raw))
    ]
    return StudyData(subjects=subjects, essays=essays)


class FileStudyDataSource(StudyDataSource):
    """
    Loads study data from ``path``; YAML when the suffix says so, JSON otherwise.

    A missing file yields empty data. Undecodable files raise ValueError.
    """

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> StudyData:
        if not self.path.exists():
            logger.info(f"No study data at {self.path}")
            return StudyData()

        text = self.path.read_text(encoding="utf-8")
        try:
            if self.path.suffix.lower() in YAML_SUFFIXES:
                payload = yaml.safe_load(text)
            else:
                payload = json.loads(text)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ValueError(f"Could not parse study data {self.path}: {e}") from e

        data = parse_study_data(payload)
        logger.debug(f"Loaded {len(data.subjects)} subjects from {self.path}")
        return data
