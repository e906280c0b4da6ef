"""
Service Factory
Centralizes wiring of adapters into the application services.
"""

from studylens.application.config import AppConfig
from studylens.application.goals import GoalStateManager
from studylens.application.overview import OverviewService
from studylens.application.sessions import SessionLedger
from studylens.domain.ports import GoalsStore, SessionRepository, StudyDataSource
from studylens.infrastructure.adapters.json_stores import JsonGoalsStore, JsonSessionRepository
from studylens.infrastructure.adapters.study_data import FileStudyDataSource


def get_study_data_source(config: AppConfig) -> StudyDataSource:
    return FileStudyDataSource(config.data_file)


def get_session_repository(config: AppConfig) -> SessionRepository:
    return JsonSessionRepository(config.sessions_file)


def get_goals_store(config: AppConfig) -> GoalsStore:
    return JsonGoalsStore(config.goals_file)


def get_session_ledger(config: AppConfig) -> SessionLedger:
    return SessionLedger(
        get_session_repository(config),
        retention_days=config.session_retention_days,
    )


def get_overview_service(config: AppConfig) -> OverviewService:
    """
    Returns an OverviewService backed by the configured files.
    """
    return OverviewService(get_session_ledger(config), GoalStateManager(get_goals_store(config)))
