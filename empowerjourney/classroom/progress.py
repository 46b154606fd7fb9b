"""
Progress store - Pure transforms over the ordered list of completion records.

Stores one record per lesson:
- Completing a lesson appends a record
- Completing it again overwrites score and timestamp in place
- Streaks and statistics are derived from the records on demand
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Sequence

from empowerjourney.errors import ValidationError
from empowerjourney.schemas import CompletionRecord

from .quiz import percent_half_up, score_band


logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """Timezone-aware UTC timestamp (naive timestamps are taken as UTC)."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def calendar_day(moment: datetime) -> date:
    """UTC calendar date of a timestamp."""
    return as_utc(moment).date()


def validate_score(score: int) -> int:
    """Reject anything that is not an int percentage in [0, 100]."""
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValidationError(f"Score must be an integer, got {score!r}")
    if not 0 <= score <= 100:
        raise ValidationError(f"Score must be between 0 and 100, got {score}")
    return score


# -----------------------------------------------------------------------------
# Upsert
# -----------------------------------------------------------------------------


def record_completion(
    progress: Sequence[CompletionRecord],
    lesson_id: str,
    score: int,
    now: Optional[datetime] = None,
) -> list[CompletionRecord]:
    """
    Record a completed lesson.

    Args:
        progress: Current records (not modified)
        lesson_id: Lesson that was completed
        score: Whole-percent quiz score
        now: Completion time (default: current UTC time)

    Returns:
        New ordered list with exactly one record for lesson_id

    Raises:
        ValidationError: if score is not an integer in [0, 100]
    """
    validate_score(score)
    record = CompletionRecord(
        lesson_id=lesson_id,
        score=score,
        completed_at=now or utc_now(),
    )

    updated = list(progress)
    for idx, existing in enumerate(updated):
        if existing.lesson_id == lesson_id:
            logger.debug(
                "Overwriting %s score %d -> %d", lesson_id, existing.score, score
            )
            updated[idx] = record
            return updated

    updated.append(record)
    return updated


def get_completion(
    progress: Sequence[CompletionRecord], lesson_id: str
) -> Optional[CompletionRecord]:
    for record in progress:
        if record.lesson_id == lesson_id:
            return record
    return None


def is_lesson_completed(progress: Sequence[CompletionRecord], lesson_id: str) -> bool:
    record = get_completion(progress, lesson_id)
    return record is not None and record.completed


def completed_lesson_ids(progress: Sequence[CompletionRecord]) -> set[str]:
    """Get set of completed lesson IDs."""
    return {r.lesson_id for r in progress if r.completed}


def completed_count(progress: Sequence[CompletionRecord]) -> int:
    return sum(1 for r in progress if r.completed)


# -----------------------------------------------------------------------------
# Streaks
# -----------------------------------------------------------------------------


def completion_days(progress: Sequence[CompletionRecord]) -> list[date]:
    """Distinct calendar days with at least one completion, ascending."""
    return sorted({calendar_day(r.completed_at) for r in progress if r.completed})


def longest_streak(progress: Sequence[CompletionRecord]) -> int:
    """Longest run of consecutive calendar days with a completion."""
    days = completion_days(progress)
    best = run = 0
    previous: Optional[date] = None
    for day in days:
        if previous is not None and day - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        best = max(best, run)
        previous = day
    return best


def current_streak(
    progress: Sequence[CompletionRecord], now: Optional[datetime] = None
) -> int:
    """
    Consecutive completion days ending today.

    A streak whose last day was yesterday is still alive; anything older
    counts as broken.
    """
    days = set(completion_days(progress))
    today = calendar_day(now or utc_now())
    cursor = today if today in days else today - timedelta(days=1)
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


# -----------------------------------------------------------------------------
# Statistics
# -----------------------------------------------------------------------------


@dataclass
class ProgressStats:
    """Dashboard figures derived from the completion records."""
    total_lessons: int
    completed: int
    completion_percent: int
    average_score: int
    weekly_activity: int
    current_streak: int
    longest_streak: int
    score_distribution: dict[str, int] = field(default_factory=dict)


def progress_stats(
    progress: Sequence[CompletionRecord],
    total_lessons: int,
    now: Optional[datetime] = None,
) -> ProgressStats:
    """
    Get completion statistics.

    Args:
        progress: Completion records
        total_lessons: Number of lessons in the catalog
        now: Reference time for weekly activity and the current streak

    Returns:
        ProgressStats with percentages rounded half-up
    """
    now = as_utc(now or utc_now())
    done = [r for r in progress if r.completed]
    week_ago = now - timedelta(days=7)

    distribution = {"excellent": 0, "good": 0, "fair": 0, "needs_work": 0}
    for record in done:
        distribution[score_band(record.score)] += 1

    return ProgressStats(
        total_lessons=total_lessons,
        completed=len(done),
        completion_percent=percent_half_up(len(done), total_lessons) if total_lessons > 0 else 0,
        average_score=percent_half_up(sum(r.score for r in done), 100 * len(done)) if done else 0,
        weekly_activity=sum(1 for r in done if as_utc(r.completed_at) >= week_ago),
        current_streak=current_streak(done, now),
        longest_streak=longest_streak(done),
        score_distribution=distribution,
    )
