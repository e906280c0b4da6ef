"""
Overview service, the application layer orchestrator.

Recomputes the whole dashboard view model from the study data, the session
ledger and the goals on every call. Nothing is cached between calls.
"""

import logging
from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Any

from studylens.application.activity import (
    ActivityLedger,
    build_ledger,
    current_week_window,
    previous_week_window,
    week_dates,
)
from studylens.application.dates import to_iso, today_of
from studylens.application.goals import GoalStateManager
from studylens.application.metrics import (
    CompletionForecast,
    EvolutionSummary,
    HeatmapCell,
    StreakInfo,
    WeekComparison,
    WeeklyReviewDay,
    build_heatmap,
    build_weekly_review_calendar,
    compare_weeks,
    compute_streaks,
    forecast_completion,
    summarize_evolution,
)
from studylens.application.sessions import SessionLedger
from studylens.application.study_stats import (
    DeadlineItem,
    ReviewDueItem,
    StudyStats,
    SubjectInsight,
    neglected_subjects,
    overall_stats,
    pending_deadlines,
    reviews_due,
    subject_stats,
    weak_subjects,
)
from studylens.domain.constants import MAX_UPCOMING_DEADLINES
from studylens.domain.models import ActivityDay, StudyData, StudyGoals, Subject

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GoalProgress:
    goals: StudyGoals
    questions_today: int
    weekly_questions: int
    weekly_reviews: int
    weekly_essays: int


@dataclass(frozen=True)
class SubjectSummary:
    subject_id: str
    name: str
    emoji: str
    stats: StudyStats


@dataclass(frozen=True)
class OverviewModel:
    """Everything the presentation layer needs, as locale-neutral values."""

    today: str
    overall: StudyStats
    subjects: list[SubjectSummary]
    today_activity: ActivityDay
    evolution: EvolutionSummary
    heatmap: list[HeatmapCell]
    streaks: StreakInfo
    week_comparison: WeekComparison
    weekly_review_calendar: list[WeeklyReviewDay]
    completion: CompletionForecast
    goal_progress: GoalProgress
    study_minutes_today: int
    study_minutes_week: int
    reviews_due: list[ReviewDueItem]
    overdue_deadlines: list[DeadlineItem]
    upcoming_deadlines: list[DeadlineItem]
    weak_subjects: list[SubjectInsight]
    neglected_subjects: list[SubjectInsight]

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict; derived ratios are included next to the raw counts."""
        data = asdict(self)
        data["overall"].update(accuracy=self.overall.accuracy, progress=self.overall.progress)
        for summary, raw in zip(self.subjects, data["subjects"]):
            raw["stats"].update(accuracy=summary.stats.accuracy, progress=summary.stats.progress)
        return data


def count_weekly_reviews(subjects: list[Subject], now: datetime | date) -> int:
    """Review-history entries dated inside the current week."""
    days = set(week_dates(now))
    return sum(
        1
        for subject in subjects
        for topic in subject.all_topics()
        for snapshot in topic.review_history
        if snapshot.date in days
    )


class OverviewService:
    """
    Builds the OverviewModel.

    Depends on the session ledger and the goal manager for their state, and
    exposes their mutating callbacks so the caller can record sessions and
    update goals without reaching into the collaborators.
    """

    def __init__(self, sessions: SessionLedger, goals: GoalStateManager):
        self._sessions = sessions
        self._goals = goals

    @property
    def record_session(self):
        return self._sessions.record_session

    @property
    def update_goal(self):
        return self._goals.update_goal

    def build(self, data: StudyData, now: datetime) -> OverviewModel:
        """
        Derive the full view model for ``now``.

        Args:
            data: Subject collection and essays.
            now: Reference timestamp; every window is anchored on its calendar day.
        """
        subjects = data.subjects
        today = to_iso(today_of(now))
        ledger: ActivityLedger = build_ledger(subjects, now)

        overall = overall_stats(subjects, now)
        this_week = current_week_window(ledger, now)
        week_days = set(week_dates(now))

        deadlines = pending_deadlines(subjects, now)
        overdue = [item for item in deadlines if item.info.urgency == "overdue"]
        upcoming = [item for item in deadlines if item.info.urgency != "overdue"]

        summaries = [
            SubjectSummary(s.id, s.name, s.emoji, subject_stats(s, now)) for s in subjects
        ]
        summaries.sort(key=lambda summary: summary.stats.progress, reverse=True)

        today_activity = ledger.day(today)
        goal_progress = GoalProgress(
            goals=self._goals.goals,
            questions_today=today_activity.questions_made,
            weekly_questions=sum(day.questions_made for day in this_week),
            weekly_reviews=count_weekly_reviews(subjects, now),
            weekly_essays=sum(1 for essay in data.essays if essay.date in week_days),
        )

        model = OverviewModel(
            today=today,
            overall=overall,
            subjects=summaries,
            today_activity=today_activity,
            evolution=summarize_evolution(ledger, now),
            heatmap=build_heatmap(ledger, now),
            streaks=compute_streaks(ledger, now),
            week_comparison=compare_weeks(this_week, previous_week_window(ledger, now)),
            weekly_review_calendar=build_weekly_review_calendar(subjects, now),
            completion=forecast_completion(
                overall.total_topics, overall.studied_topics, ledger, now
            ),
            goal_progress=goal_progress,
            study_minutes_today=self._sessions.minutes_today(now),
            study_minutes_week=self._sessions.minutes_in_week(now),
            reviews_due=reviews_due(subjects, now),
            overdue_deadlines=overdue,
            upcoming_deadlines=upcoming[:MAX_UPCOMING_DEADLINES],
            weak_subjects=weak_subjects(subjects, now),
            neglected_subjects=neglected_subjects(subjects, now),
        )
        logger.debug(
            f"Overview for {today}: {len(ledger)} ledger dates, "
            f"streak {model.streaks.current}/{model.streaks.longest}"
        )
        return model
