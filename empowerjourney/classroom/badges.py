"""
Badge rules - Derive earned badges from the progress snapshot.

Earning is monotonic:
- Only unearned badges are evaluated
- A satisfied condition sets earned and earned_at once
- Earned badges are never modified again
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from empowerjourney.errors import ValidationError
from empowerjourney.schemas import BadgeDefinition, BadgeState, CompletionRecord

from .progress import as_utc, completed_count, longest_streak, utc_now


logger = logging.getLogger(__name__)


WELCOME = "welcome"
FIRST_LESSON = "first-lesson"
FIVE_LESSONS = "five-lessons"
AI_EXPLORER = "ai-explorer"
PERFECT_SCORE = "perfect-score"
WEEK_STREAK = "week-streak"

AI_EXPLORER_QUESTIONS = 10
STREAK_DAYS = 7

BADGE_DEFINITIONS: tuple[BadgeDefinition, ...] = (
    BadgeDefinition(id=WELCOME, name="Welcome Badge",
                    description="Completed onboarding", icon="🎉"),
    BadgeDefinition(id=FIRST_LESSON, name="First Lesson",
                    description="Complete your first lesson", icon="📚"),
    BadgeDefinition(id=FIVE_LESSONS, name="Learning Streak",
                    description="Complete 5 lessons", icon="🔥"),
    BadgeDefinition(id=AI_EXPLORER, name="AI Explorer",
                    description="Ask 10 questions to AI Tutor", icon="🤖"),
    BadgeDefinition(id=PERFECT_SCORE, name="Perfect Score",
                    description="Score 100% on a lesson", icon="⭐"),
    BadgeDefinition(id=WEEK_STREAK, name="7-Day Streak",
                    description="Learn for 7 consecutive days", icon="💪"),
)

BADGES_BY_ID = {b.id: b for b in BADGE_DEFINITIONS}


@dataclass(frozen=True)
class BadgeContext:
    """Inputs a badge condition can look at."""
    progress: Sequence[CompletionRecord]
    latest_score: Optional[int]
    tutor_question_count: int


# welcome has no rule: it is granted by initial_badge_states only
BADGE_RULES: dict[str, Callable[[BadgeContext], bool]] = {
    FIRST_LESSON: lambda ctx: completed_count(ctx.progress) >= 1,
    FIVE_LESSONS: lambda ctx: completed_count(ctx.progress) >= 5,
    PERFECT_SCORE: lambda ctx: ctx.latest_score == 100,
    AI_EXPLORER: lambda ctx: ctx.tutor_question_count >= AI_EXPLORER_QUESTIONS,
    WEEK_STREAK: lambda ctx: longest_streak(ctx.progress) >= STREAK_DAYS,
}


def initial_badge_states(now: Optional[datetime] = None) -> list[BadgeState]:
    """Badge set for a freshly onboarded learner: only welcome is earned."""
    now = now or utc_now()
    return [
        BadgeState(id=b.id, earned=True, earned_at=now) if b.id == WELCOME
        else BadgeState(id=b.id)
        for b in BADGE_DEFINITIONS
    ]


def _normalize(previous: Sequence[BadgeState]) -> list[BadgeState]:
    """Previous states in order, with any missing known badge added unearned."""
    states = list(previous)
    present = {s.id for s in states}
    for definition in BADGE_DEFINITIONS:
        if definition.id not in present:
            states.append(BadgeState(id=definition.id))
    return states


def evaluate_badges(
    previous: Sequence[BadgeState],
    progress: Sequence[CompletionRecord],
    latest_score: Optional[int] = None,
    tutor_question_count: int = 0,
    now: Optional[datetime] = None,
) -> list[BadgeState]:
    """
    Re-check every unearned badge against the current snapshot.

    Args:
        previous: Badge states before the triggering event
        progress: Completion records after the triggering event
        latest_score: Score of the triggering completion, None for non-lesson events
        tutor_question_count: Questions asked to the tutor so far
        now: Award time for newly earned badges

    Returns:
        New list of badge states; calling again with the same inputs
        returns the same states.
    """
    now = now or utc_now()
    ctx = BadgeContext(
        progress=progress,
        latest_score=latest_score,
        tutor_question_count=tutor_question_count,
    )

    updated = []
    for state in _normalize(previous):
        rule = BADGE_RULES.get(state.id)
        if state.earned or rule is None or not rule(ctx):
            updated.append(state)
            continue
        logger.info("Badge earned: %s", state.id)
        updated.append(BadgeState(id=state.id, earned=True, earned_at=now))
    return updated


def award_badge(
    badges: Sequence[BadgeState],
    badge_id: str,
    now: Optional[datetime] = None,
) -> list[BadgeState]:
    """
    Explicitly mark one badge as earned.

    Already-earned badges keep their original earned_at.

    Raises:
        ValidationError: if badge_id is not a known badge
    """
    if badge_id not in BADGES_BY_ID:
        raise ValidationError(f"Unknown badge: {badge_id}")
    now = now or utc_now()
    return [
        BadgeState(id=s.id, earned=True, earned_at=now)
        if s.id == badge_id and not s.earned else s
        for s in _normalize(badges)
    ]


def newly_earned(before: Sequence[BadgeState], after: Sequence[BadgeState]) -> list[str]:
    """IDs earned in `after` but not in `before`, in badge order."""
    had = {s.id for s in before if s.earned}
    return [s.id for s in after if s.earned and s.id not in had]


def recent_badges(badges: Sequence[BadgeState], limit: int = 5) -> list[BadgeState]:
    """Earned badges, most recently earned first."""
    earned = [b for b in badges if b.earned and b.earned_at is not None]
    earned.sort(key=lambda b: as_utc(b.earned_at), reverse=True)
    return earned[:limit]
