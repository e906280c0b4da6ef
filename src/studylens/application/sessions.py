"""
Session ledger and study stopwatch.

The ledger is an append-only, retention-bounded log of timed study sessions.
Persistence goes through a SessionRepository; storage failures degrade to an
in-memory history instead of propagating.
"""

import logging
from datetime import date, datetime, timedelta

from ulid import ULID

from studylens.application.activity.windows import week_dates
from studylens.application.dates import to_iso, today_of
from studylens.domain.constants import SESSION_ID_PREFIX, SESSION_RETENTION_DAYS
from studylens.domain.models import SessionDraft, SessionType, StudySession
from studylens.domain.ports import SessionRepository

logger = logging.getLogger(__name__)


def generate_session_id() -> str:
    """Generate a sortable session id using ULID."""
    return f"{SESSION_ID_PREFIX}{ULID()}"


def parse_timestamp(value: str) -> datetime | None:
    """
    Parse an ISO timestamp into naive local time.

    Offset-aware values (including a trailing ``Z``) are converted to local time.
    """
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def session_day(session: StudySession) -> str:
    """Local calendar day the session started on."""
    started = parse_timestamp(session.start_time)
    if started is not None:
        return to_iso(started.date())
    return session.start_time[:10]


class SessionLedger:
    """
    Capacity-bounded log of study sessions.

    State is replaced wholesale on every append, never edited in place.
    """

    def __init__(
        self,
        repository: SessionRepository,
        retention_days: int = SESSION_RETENTION_DAYS,
    ):
        """
        Args:
            repository: Durable store (port) read once here and written on every append.
            retention_days: Sessions ending more than this many days before a new
                session's end are pruned when it is appended.
        """
        self._repo = repository
        self.retention_days = retention_days
        self._sessions: tuple[StudySession, ...] = self._load()

    def _load(self) -> tuple[StudySession, ...]:
        try:
            return tuple(self._repo.load())
        except Exception as e:
            logger.warning(f"Could not read session history, starting empty: {e}")
            return ()

    def _persist(self) -> None:
        try:
            self._repo.save(list(self._sessions))
        except Exception as e:
            logger.warning(f"Could not save session history: {e}")

    @property
    def sessions(self) -> tuple[StudySession, ...]:
        return self._sessions

    def record_session(self, draft: SessionDraft) -> StudySession:
        """
        Append a finished session under a freshly generated id.

        Existing sessions that ended more than ``retention_days`` before this
        one ended are dropped first.
        """
        session = StudySession(
            id=generate_session_id(),
            subject_id=draft.subject_id,
            start_time=draft.start_time,
            end_time=draft.end_time,
            duration_minutes=max(0, draft.duration_minutes),
            type=draft.type,
        )

        end = parse_timestamp(draft.end_time)
        if end is None:
            kept = list(self._sessions)
        else:
            cutoff = end - timedelta(days=self.retention_days)
            kept = []
            for existing in self._sessions:
                existing_end = parse_timestamp(existing.end_time)
                if existing_end is not None and existing_end >= cutoff:
                    kept.append(existing)
            pruned = len(self._sessions) - len(kept)
            if pruned:
                logger.debug(f"Pruned {pruned} sessions older than {self.retention_days} days")

        self._sessions = (*kept, session)
        self._persist()
        return session

    def minutes_on(self, day: str) -> int:
        return sum(s.duration_minutes for s in self._sessions if session_day(s) == day)

    def minutes_today(self, now: datetime | date) -> int:
        return self.minutes_on(to_iso(today_of(now)))

    def minutes_in_week(self, now: datetime | date) -> int:
        """Minutes studied in the current Monday-start week."""
        days = set(week_dates(now))
        return sum(s.duration_minutes for s in self._sessions if session_day(s) in days)


class StudyTimer:
    """
    Stopwatch for a single running study session.

    Only one session runs at a time; a start while running is rejected. The
    caller drives ``tick`` once per elapsed second for display purposes.
    """

    def __init__(self, ledger: SessionLedger):
        self._ledger = ledger
        self._started_at: datetime | None = None
        self._subject_id = ""
        self._type: SessionType = "questions"
        self.elapsed_seconds = 0

    @property
    def is_running(self) -> bool:
        return self._started_at is not None

    def start(self, subject_id: str, now: datetime, session_type: SessionType = "questions") -> bool:
        if self.is_running or not subject_id:
            return False
        self._started_at = now
        self._subject_id = subject_id
        self._type = session_type
        self.elapsed_seconds = 0
        return True

    def tick(self) -> int:
        if self.is_running:
            self.elapsed_seconds += 1
        return self.elapsed_seconds

    def stop(self, now: datetime) -> StudySession | None:
        """
        Finish the running session and record it, even if it lasted zero minutes.

        Returns None when no session was running.
        """
        if self._started_at is None:
            return None

        seconds = max(0, int((now - self._started_at).total_seconds()))
        session = self._ledger.record_session(
            SessionDraft(
                subject_id=self._subject_id,
                start_time=self._started_at.isoformat(),
                end_time=now.isoformat(),
                duration_minutes=seconds // 60,
                type=self._type,
            )
        )
        self._started_at = None
        self.elapsed_seconds = 0
        return session
