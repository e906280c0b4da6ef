"""
Per-topic activity sources.

A topic carries its question activity in one of three shapes. Exactly one
applies, in priority order:

1. ExplicitLogs     - dated per-day question logs.
2. ReviewSnapshots  - cumulative review-history snapshots, turned into daily deltas.
3. FallbackTotal    - a single legacy total attributed to one day.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date

from studylens.application.dates import is_iso_date, to_iso
from studylens.domain.models import QuestionLog, ReviewSnapshot, Topic

# (date, questions_made, questions_correct)
Contribution = tuple[str, int, int]


@dataclass(frozen=True)
class ExplicitLogs:
    logs: tuple[QuestionLog, ...]

    def contributions(self) -> Iterator[Contribution]:
        for log in self.logs:
            if not is_iso_date(log.date):
                continue
            yield log.date, max(0, log.questions_made), max(0, log.questions_correct)


@dataclass(frozen=True)
class ReviewSnapshots:
    snapshots: tuple[ReviewSnapshot, ...]

    def contributions(self) -> Iterator[Contribution]:
        """
        Reconstruct daily increments from cumulative snapshots.

        The running maxima never decrease, so corrected or out-of-order
        snapshots cannot produce negative deltas.
        """
        running_total = 0
        running_correct = 0
        for snapshot in sorted(self.snapshots, key=lambda s: s.date):
            if not is_iso_date(snapshot.date):
                continue
            made = max(0, snapshot.questions_total - running_total)
            correct = max(0, snapshot.questions_correct - running_correct)
            running_total = max(running_total, snapshot.questions_total)
            running_correct = max(running_correct, snapshot.questions_correct)
            yield snapshot.date, made, correct


@dataclass(frozen=True)
class FallbackTotal:
    date: str
    questions_total: int
    questions_correct: int

    def contributions(self) -> Iterator[Contribution]:
        yield self.date, max(0, self.questions_total), max(0, self.questions_correct)


ActivitySource = ExplicitLogs | ReviewSnapshots | FallbackTotal


def classify_source(topic: Topic, today: date) -> ActivitySource | None:
    """
    Pick the activity source for ``topic``.

    Returns None when the topic has no recorded question activity at all.
    """
    if topic.question_logs:
        return ExplicitLogs(tuple(topic.question_logs))

    if topic.review_history:
        return ReviewSnapshots(tuple(topic.review_history))

    if topic.questions_total > 0:
        studied = topic.date_studied
        if studied and is_iso_date(studied[:10]):
            day = studied[:10]
        else:
            day = to_iso(today)
        return FallbackTotal(day, topic.questions_total, topic.questions_correct)

    return None
