"""
Quiz scoring - Turn answer selections into a whole-percent score.

Provides:
- score_quiz: integer percentage, round-half-up
- grade_quiz: per-question breakdown for result screens
- score_band: dashboard bucket for a score
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from empowerjourney.errors import ValidationError


@dataclass(frozen=True)
class QuizResult:
    """Graded quiz with per-question outcome."""
    score: int
    correct: int
    total: int
    outcomes: tuple[bool, ...]


def percent_half_up(numerator: int, denominator: int) -> int:
    """
    Whole percent of numerator/denominator, rounding .5 upward.

    Integer-only so 1/8 gives 13 and 1/3 gives 33 with no float drift.
    """
    return (200 * numerator + denominator) // (2 * denominator)


def grade_quiz(
    selections: Sequence[Optional[int]],
    answer_key: Sequence[int],
) -> QuizResult:
    """
    Grade answer selections against the answer key.

    Args:
        selections: Chosen option index per question, None if unanswered
        answer_key: Correct option index per question

    Returns:
        QuizResult with the score and per-question outcomes

    Raises:
        ValidationError: if the two sequences differ in length
    """
    if len(selections) != len(answer_key):
        raise ValidationError(
            f"Expected {len(answer_key)} answers, got {len(selections)}"
        )

    # unanswered never matches a key entry
    outcomes = tuple(
        sel is not None and sel == key
        for sel, key in zip(selections, answer_key)
    )
    total = len(answer_key)
    correct = sum(outcomes)
    if total == 0:
        return QuizResult(score=100, correct=0, total=0, outcomes=())

    return QuizResult(
        score=percent_half_up(correct, total),
        correct=correct,
        total=total,
        outcomes=outcomes,
    )


def score_quiz(
    selections: Sequence[Optional[int]],
    answer_key: Sequence[int],
) -> int:
    """Whole-percent score for a submitted quiz."""
    return grade_quiz(selections, answer_key).score


def score_band(score: int) -> str:
    """Bucket a score: excellent (90+), good (70+), fair (50+), needs_work."""
    if score >= 90:
        return "excellent"
    if score >= 70:
        return "good"
    if score >= 50:
        return "fair"
    return "needs_work"
