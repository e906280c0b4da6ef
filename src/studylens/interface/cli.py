"""studylens CLI: overview, report, goals, sessions, config and server commands."""

import json
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer

from studylens.application.config import resolve_config

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="studylens: study activity analytics, streaks and review planning.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

goals_app = typer.Typer(help="Show and update study goals.", no_args_is_help=True)
app.add_typer(goals_app, name="goals")

session_app = typer.Typer(help="Record timed study sessions.", no_args_is_help=True)
app.add_typer(session_app, name="session")

config_app = typer.Typer(help="Manage studylens configuration.")
app.add_typer(config_app, name="config")


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


def log_level(verbose: int) -> int:
    """0 is warnings only, 1 is info, 2 or more is debug."""
    if verbose <= 0:
        return logging.WARNING
    if verbose == 1:
        return logging.INFO
    return logging.DEBUG


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for studylens."""
    # Each -v raises the configured verbosity by one level.
    level = resolve_config().verbose + verbose
    logging.getLogger().setLevel(log_level(level))


def _parse_now(value: str | None) -> datetime:
    if value is None:
        return datetime.now()
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        typer.secho(f"Invalid date '{value}'. Use YYYY-MM-DD or an ISO timestamp.", fg="red")
        raise typer.Exit(2) from None


def _load_overview(data: Path | None, now: datetime):
    from studylens.application.factory import get_overview_service, get_study_data_source

    config = resolve_config({"data_file": data})
    try:
        study_data = get_study_data_source(config).load()
    except ValueError as e:
        typer.secho(str(e), fg="red")
        raise typer.Exit(1) from None
    return get_overview_service(config).build(study_data, now), config


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def overview(
    data: Annotated[
        Path | None, typer.Option(help="Study data file (JSON or YAML). Defaults to config.")
    ] = None,
    date: Annotated[
        str | None, typer.Option("--date", help="Reference day (YYYY-MM-DD). Defaults to now.")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show the [bold green]dashboard overview[/bold green]."""
    model, _ = _load_overview(data, _parse_now(date))

    if json_output:
        typer.echo(json.dumps(model.to_dict(), indent=2))
        return

    overall = model.overall
    typer.echo(f"Today: {model.today}")
    typer.echo(
        f"Topics: {overall.studied_topics}/{overall.total_topics}"
        f"  Questions: {overall.questions_correct}/{overall.questions_total}"
        f"  Reviews due: {overall.reviews_due}"
    )
    typer.echo(f"Streak: {model.streaks.current} (best {model.streaks.longest})")
    goals = model.goal_progress
    typer.echo(
        f"Today's questions: {goals.questions_today}/{goals.goals.daily_questions_target}"
        f"  Study time: {model.study_minutes_today} min"
    )
    comparison = model.week_comparison
    typer.echo(
        f"This week: {comparison.this_week.total} questions"
        f" ({comparison.questions_delta:+d} vs last week,"
        f" {comparison.accuracy_delta_pp:+d} pp accuracy)"
    )
    typer.echo(f"14-day trend: {model.evolution.trend:+.0%}")

    completion = model.completion
    if completion.status == "complete":
        typer.secho("All topics studied.", fg="green")
    elif completion.status == "estimate":
        typer.echo(
            f"Estimated completion: {completion.estimated_date}"
            f" ({completion.days_remaining} days)"
        )
    else:
        typer.secho("Not enough history for a completion estimate.", fg="yellow")


@app.command()
def report(
    data: Annotated[
        Path | None, typer.Option(help="Study data file (JSON or YAML). Defaults to config.")
    ] = None,
    output_dir: Annotated[
        Path | None, typer.Option(help="Directory for the report file. Defaults to config.")
    ] = None,
    date: Annotated[
        str | None, typer.Option("--date", help="Reference day (YYYY-MM-DD). Defaults to now.")
    ] = None,
    stdout: Annotated[
        bool, typer.Option("--stdout", help="Print the report instead of writing a file.")
    ] = False,
):
    """Export a plain-text progress report."""
    from studylens.application.report import export_report, render_report

    model, config = _load_overview(data, _parse_now(date))
    if stdout:
        typer.echo(render_report(model))
        return

    path = export_report(model, output_dir or config.report_dir)
    typer.secho(f"Report written to {path}", fg="green")


@app.command()
def serve(
    port: Annotated[int, typer.Option(help="Port to bind the server to.")] = 8787,
    host: Annotated[str, typer.Option(help="Host to bind the server to.")] = "127.0.0.1",
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("studylens.server:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Goals subgroup
# ---------------------------------------------------------------------------


@goals_app.command("show")
def goals_show():
    """Display the current study goals."""
    from studylens.application.factory import get_goals_store
    from studylens.application.goals import GoalStateManager

    manager = GoalStateManager(get_goals_store(resolve_config()))
    typer.echo(json.dumps(manager.as_dict(), indent=2))


@goals_app.command("set")
def goals_set(
    field: Annotated[
        str,
        typer.Argument(
            help="daily_questions_target, weekly_review_target or weekly_essay_target."
        ),
    ],
    value: Annotated[str, typer.Argument(help="New target; clamped to the field's range.")],
):
    """Update one study goal."""
    from studylens.application.factory import get_goals_store
    from studylens.application.goals import GoalStateManager, UnknownGoalError

    manager = GoalStateManager(get_goals_store(resolve_config()))
    try:
        goals = manager.update_goal(field, value)
    except UnknownGoalError:
        typer.secho(f"Unknown goal '{field}'.", fg="red")
        raise typer.Exit(2) from None
    typer.secho(f"{field} = {getattr(goals, field)}", fg="green")


# ---------------------------------------------------------------------------
# Session subgroup
# ---------------------------------------------------------------------------


SESSION_TYPES = ("questions", "review", "reading", "essay")


def _check_session_type(session_type: str) -> None:
    if session_type not in SESSION_TYPES:
        typer.secho(f"Unknown session type '{session_type}'.", fg="red")
        raise typer.Exit(2)


@session_app.command("add")
def session_add(
    subject: Annotated[str, typer.Option(help="Subject id the session belongs to.")],
    start: Annotated[str, typer.Option(help="Start timestamp (ISO 8601).")],
    end: Annotated[str, typer.Option(help="End timestamp (ISO 8601).")],
    session_type: Annotated[
        str, typer.Option("--type", help="questions, review, reading or essay.")
    ] = "questions",
):
    """Record a finished study session."""
    from studylens.application.factory import get_session_ledger
    from studylens.application.sessions import parse_timestamp
    from studylens.domain.models import SessionDraft

    _check_session_type(session_type)

    started, ended = parse_timestamp(start), parse_timestamp(end)
    if started is None or ended is None:
        typer.secho("Start and end must be ISO 8601 timestamps.", fg="red")
        raise typer.Exit(2)

    ledger = get_session_ledger(resolve_config())
    seconds = max(0, int((ended - started).total_seconds()))
    session = ledger.record_session(
        SessionDraft(
            subject_id=subject,
            start_time=start,
            end_time=end,
            duration_minutes=seconds // 60,
            type=session_type,
        )
    )
    typer.secho(f"Recorded {session.id} ({session.duration_minutes} min)", fg="green")


@session_app.command("timer")
def session_timer(
    subject: Annotated[str, typer.Option(help="Subject id the session belongs to.")],
    session_type: Annotated[
        str, typer.Option("--type", help="questions, review, reading or essay.")
    ] = "questions",
):
    """Run a stopwatch and record the session when stopped with Ctrl+C."""
    from studylens.application.factory import get_session_ledger
    from studylens.application.sessions import StudyTimer

    _check_session_type(session_type)

    timer = StudyTimer(get_session_ledger(resolve_config()))
    if not timer.start(subject, datetime.now(), session_type):
        typer.secho("A subject is required to start the timer.", fg="red")
        raise typer.Exit(2)

    typer.echo(f"Studying {subject}. Press Ctrl+C to stop.")
    try:
        while True:
            time.sleep(1)
            elapsed = timer.tick()
            typer.echo(f"\r{elapsed // 60:02d}:{elapsed % 60:02d}", nl=False)
    except KeyboardInterrupt:
        typer.echo("")

    session = timer.stop(datetime.now())
    typer.secho(f"Recorded {session.id} ({session.duration_minutes} min)", fg="green")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
