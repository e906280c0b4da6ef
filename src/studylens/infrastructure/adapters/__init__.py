# Infrastructure Adapters Package
from .json_stores import InMemorySessionRepository, JsonGoalsStore, JsonSessionRepository
from .study_data import FileStudyDataSource

__all__ = [
    "FileStudyDataSource",
    "InMemorySessionRepository",
    "JsonGoalsStore",
    "JsonSessionRepository",
]
