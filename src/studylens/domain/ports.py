"""
Ports (interfaces) for persistence.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import StudyData, StudyGoals, StudySession


class SessionRepository(ABC):
    """
    Port for the durable study-session log.

    Implementations:
        - JsonSessionRepository: One JSON document on disk.
        - InMemorySessionRepository: Process-local list, used by tests and the server.
    """

    @abstractmethod
    def load(self) -> list[StudySession]:
        """
        Read every stored session.

        Implementations may raise; the session ledger treats any failure as an
        empty history.
        """
        pass

    @abstractmethod
    def save(self, sessions: list[StudySession]) -> None:
        """Replace the stored sessions with ``sessions``."""
        pass


class GoalsStore(ABC):
    """Port for the settings store that owns the user's study goals."""

    @abstractmethod
    def load(self) -> StudyGoals:
        pass

    @abstractmethod
    def save(self, goals: StudyGoals) -> None:
        pass


class StudyDataSource(ABC):
    """Port for reading the subject/topic collection."""

    @abstractmethod
    def load(self) -> StudyData:
        pass
