import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Literal

from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from studylens.consts import VERSION

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("studylens.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"studylens server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("studylens server shutting down...")


app = FastAPI(
    title="studylens",
    description="Study activity analytics for the dashboard front end.",
    version=VERSION,
    lifespan=lifespan,
)


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


start_time = time.time()


def _now(date: str | None) -> datetime:
    if date is None:
        return datetime.now()
    try:
        return datetime.fromisoformat(date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid date: {date}") from e


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


@app.get("/overview")
async def get_overview(date: str | None = None):
    """
    Full dashboard view model for ``date`` (defaults to now).
    """
    from studylens.application.config import resolve_config
    from studylens.application.factory import get_overview_service, get_study_data_source

    now = _now(date)
    try:
        config = resolve_config()
        study_data = get_study_data_source(config).load()
        model = get_overview_service(config).build(study_data, now)
        return model.to_dict()
    except Exception as e:
        logger.error(f"Overview failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e


@app.get("/report", response_class=PlainTextResponse)
async def get_report(date: str | None = None):
    from studylens.application.config import resolve_config
    from studylens.application.factory import get_overview_service, get_study_data_source
    from studylens.application.report import render_report

    now = _now(date)
    try:
        config = resolve_config()
        study_data = get_study_data_source(config).load()
        return render_report(get_overview_service(config).build(study_data, now))
    except Exception as e:
        logger.error(f"Report failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e


class SessionRequest(BaseModel):
    subject_id: str = Field(min_length=1)
    start_time: datetime
    end_time: datetime
    type: Literal["questions", "review", "reading", "essay"] = "questions"


class SessionResponse(BaseModel):
    id: str
    subject_id: str
    start_time: str
    end_time: str
    duration_minutes: int
    type: str


@app.post("/sessions", response_model=SessionResponse)
async def record_session(req: SessionRequest):
    """
    Record a finished study session.
    """
    from studylens.application.config import resolve_config
    from studylens.application.factory import get_session_ledger
    from studylens.domain.models import SessionDraft

    try:
        seconds = max(0, int((req.end_time - req.start_time).total_seconds()))
        ledger = get_session_ledger(resolve_config())
        session = ledger.record_session(
            SessionDraft(
                subject_id=req.subject_id,
                start_time=req.start_time.isoformat(),
                end_time=req.end_time.isoformat(),
                duration_minutes=seconds // 60,
                type=req.type,
            )
        )
    except Exception as e:
        logger.error(f"Session recording failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e

    return SessionResponse(
        id=session.id,
        subject_id=session.subject_id,
        start_time=session.start_time,
        end_time=session.end_time,
        duration_minutes=session.duration_minutes,
        type=session.type,
    )


@app.get("/goals")
async def get_goals():
    from studylens.application.config import resolve_config
    from studylens.application.factory import get_goals_store
    from studylens.application.goals import GoalStateManager

    return GoalStateManager(get_goals_store(resolve_config())).as_dict()


class GoalUpdateRequest(BaseModel):
    # Any value; the goal manager clamps it.
    value: float | int | str | None = None


@app.put("/goals/{field}")
async def update_goal(field: str, req: GoalUpdateRequest):
    """Clamp and store one study goal; returns the full goals object."""
    from dataclasses import asdict

    from studylens.application.config import resolve_config
    from studylens.application.factory import get_goals_store
    from studylens.application.goals import GoalStateManager, UnknownGoalError

    try:
        manager = GoalStateManager(get_goals_store(resolve_config()))
        goals = manager.update_goal(field, req.value)
    except UnknownGoalError:
        raise HTTPException(status_code=404, detail=f"Unknown goal: {field}") from None
    except Exception as e:
        logger.error(f"Goal update failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e
    return asdict(goals)
