# Domain Package
from .models import (
    ActivityDay,
    EssayEntry,
    QuestionLog,
    ReviewSnapshot,
    SessionDraft,
    StudyData,
    StudyGoals,
    StudySession,
    Subject,
    Topic,
    TopicGroup,
)
from .ports import GoalsStore, SessionRepository, StudyDataSource

__all__ = [
    "ActivityDay",
    "EssayEntry",
    "QuestionLog",
    "ReviewSnapshot",
    "SessionDraft",
    "StudyData",
    "StudyGoals",
    "StudySession",
    "Subject",
    "Topic",
    "TopicGroup",
    "GoalsStore",
    "SessionRepository",
    "StudyDataSource",
]
