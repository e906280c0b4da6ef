"""Flat text report rendered from the overview model."""

import logging
from pathlib import Path

from .overview import OverviewModel

logger = logging.getLogger(__name__)


def _percent(value: float) -> str:
    return f"{round(value * 100)}%"


def render_report(model: OverviewModel) -> str:
    overall = model.overall
    goals = model.goal_progress
    lines = [
        f"Study report - {model.today}",
        "",
        f"Overall progress: {_percent(overall.progress)}",
        f"Accuracy: {_percent(overall.accuracy)}",
        f"Questions: {overall.questions_correct}/{overall.questions_total}",
        f"Streak: {model.streaks.current} day(s) | Best: {model.streaks.longest}",
        f"Active days: {model.streaks.active_days}",
        "",
        "By subject:",
    ]
    for summary in model.subjects:
        stats = summary.stats
        lines.append(
            f"  {summary.emoji} {summary.name}: {_percent(stats.progress)} progress"
            f" | {_percent(stats.accuracy)} accuracy"
            f" | {stats.questions_correct}/{stats.questions_total} questions"
        )
    lines += [
        "",
        "This week:",
        f"  Questions: {goals.weekly_questions}",
        f"  Reviews: {goals.weekly_reviews}/{goals.goals.weekly_review_target}",
        f"  Essays: {goals.weekly_essays}/{goals.goals.weekly_essay_target}",
        f"  Time: {model.study_minutes_week} min",
    ]

    completion = model.completion
    if completion.status == "complete":
        lines += ["", "Completion: all topics studied"]
    elif completion.status == "estimate":
        lines += [
            "",
            f"Completion: {completion.estimated_date}"
            f" ({completion.days_remaining} days, {completion.remaining} topics left)",
        ]
    return "\n".join(lines)


def report_filename(today: str) -> str:
    return f"study-report-{today}.txt"


def export_report(model: OverviewModel, directory: Path) -> Path:
    """Write the report into ``directory`` and return the file path."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / report_filename(model.today)
    path.write_text(render_report(model), encoding="utf-8")
    logger.info(f"Wrote report to {path}")
    return path
