"""
LearningJourney - The one place the learner profile is changed.

Every mutation runs under a lock, builds the next profile from pure
transforms, swaps it in with a single assignment, then persists it.
A failed write is logged and reported; the in-memory profile stays
authoritative for the session.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence
from uuid import uuid4

from empowerjourney.errors import AccessDenied, PersistenceFailure, ValidationError
from empowerjourney.schemas import (
    BadgeState,
    CompletionRecord,
    LessonContent,
    ProfileAggregate,
    UserProfile,
)

from . import badges as badge_rules
from .catalog import DEFAULT_CATALOG, LessonCatalog
from .navigator import Navigator, is_unlocked, missing_prerequisites
from .progress import record_completion, utc_now
from .quiz import score_quiz
from .store import ProfileStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompletionOutcome:
    """Result of a submitted quiz."""
    score: int
    progress: tuple[CompletionRecord, ...]
    badges: tuple[BadgeState, ...]
    newly_earned: list[str]
    persisted: bool


@dataclass(frozen=True)
class BadgeOutcome:
    """Result of a non-lesson event that may award badges."""
    badges: tuple[BadgeState, ...]
    newly_earned: list[str]
    tutor_question_count: int
    persisted: bool


def validate_selections(content: LessonContent, selections: Sequence[Optional[int]]) -> None:
    """
    Check submitted answers fit the lesson's quiz.

    Raises:
        ValidationError: wrong number of answers or an option index out of range
    """
    if len(selections) != len(content.quiz):
        raise ValidationError(
            f"Lesson {content.lesson_id} has {len(content.quiz)} questions, "
            f"got {len(selections)} answers"
        )
    for idx, (selection, question) in enumerate(zip(selections, content.quiz)):
        if selection is None:
            continue
        if isinstance(selection, bool) or not isinstance(selection, int):
            raise ValidationError(f"Answer {idx + 1} must be an option number, got {selection!r}")
        if not 0 <= selection < len(question.options):
            raise ValidationError(
                f"Answer {idx + 1} must be between 0 and {len(question.options) - 1}, got {selection}"
            )


class LearningJourney:
    """
    Own the learner profile and route every write through one entry point.

    Combines LessonCatalog (content) with a ProfileStore (durability).
    """

    def __init__(
        self,
        store: ProfileStore,
        catalog: LessonCatalog = DEFAULT_CATALOG,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the journey with an empty, not yet onboarded profile.

        Args:
            store: Persistence port the profile is saved to after each change
            catalog: Lesson catalog to validate lesson ids against
            clock: Source of completion and award timestamps
        """
        self.store = store
        self.catalog = catalog
        self.clock = clock
        self._profile = ProfileAggregate()
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def profile(self) -> ProfileAggregate:
        """Snapshot of the current profile; changing it does not affect the journey."""
        return self._profile.model_copy(deep=True)

    @property
    def is_onboarded(self) -> bool:
        return self._profile.is_onboarded

    def load(self) -> bool:
        """
        Restore the stored profile.

        Returns:
            True if a learner is onboarded (skip straight to the home view)

        Raises:
            PersistenceFailure: if the stored blob cannot be read
        """
        stored = self.store.load()
        if stored is not None:
            self._profile = stored
            logger.info(
                "Loaded profile: %d completions, %d badges earned",
                len(stored.progress), len(stored.earned_badge_ids()),
            )
        return self.is_onboarded

    def navigator(self) -> Navigator:
        """Navigator over the current progress snapshot."""
        return Navigator(self.catalog, self._profile.progress)

    def is_unlocked(self, lesson_id: str) -> bool:
        lesson = self.catalog.get_lesson(lesson_id)
        if lesson is None:
            raise ValidationError(f"Unknown lesson: {lesson_id}")
        return is_unlocked(lesson, self._profile.progress)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def onboard(self, name: str, email: str = "", language: str = "en") -> UserProfile:
        """
        Create the learner profile with the welcome badge already earned.

        Raises:
            ValidationError: if a learner is already onboarded or the name is empty
        """
        if not name.strip():
            raise ValidationError("Name is required")
        with self._lock:
            if self._profile.is_onboarded:
                raise ValidationError("A learner is already onboarded on this device")
            now = self.clock()
            user = UserProfile(
                id=uuid4().hex[:9],
                name=name.strip(),
                email=email.strip(),
                language=language,
                joined_at=now,
            )
            self._commit(ProfileAggregate(
                user=user,
                progress=[],
                badges=badge_rules.initial_badge_states(now),
            ))
            logger.info("Onboarded learner %s", user.id)
            return user

    def complete_lesson(
        self, lesson_id: str, selections: Sequence[Optional[int]]
    ) -> CompletionOutcome:
        """
        Score a submitted quiz and record the completion.

        Args:
            lesson_id: Lesson whose quiz was submitted
            selections: Chosen option index per question, None if unanswered

        Returns:
            CompletionOutcome with the score, new progress and badge states

        Raises:
            ValidationError: not onboarded, unknown lesson, or malformed answers
            AccessDenied: lesson prerequisites not completed
        """
        with self._lock:
            current = self._require_profile()

            lesson = self.catalog.get_lesson(lesson_id)
            if lesson is None:
                raise ValidationError(f"Unknown lesson: {lesson_id}")
            if not is_unlocked(lesson, current.progress):
                missing = missing_prerequisites(lesson, current.progress)
                logger.warning("Access denied to %s, missing %s", lesson_id, missing)
                raise AccessDenied(lesson_id, missing)

            content = self.catalog.get_lesson_content(lesson_id)
            validate_selections(content, selections)
            score = score_quiz(selections, content.answer_key)

            now = self.clock()
            progress = record_completion(current.progress, lesson_id, score, now)
            badges = badge_rules.evaluate_badges(
                current.badges,
                progress,
                latest_score=score,
                tutor_question_count=current.tutor_question_count,
                now=now,
            )
            earned = badge_rules.newly_earned(current.badges, badges)

            persisted = self._commit(current.model_copy(update={
                "progress": progress,
                "badges": badges,
            }))
            logger.info("Completed %s with score %d", lesson_id, score)
            return CompletionOutcome(
                score=score,
                progress=tuple(progress),
                badges=tuple(badges),
                newly_earned=earned,
                persisted=persisted,
            )

    def record_tutor_question(self) -> BadgeOutcome:
        """Count one question asked to the tutor and re-check badges."""
        with self._lock:
            current = self._require_profile()
            count = current.tutor_question_count + 1
            badges = badge_rules.evaluate_badges(
                current.badges,
                current.progress,
                latest_score=None,
                tutor_question_count=count,
                now=self.clock(),
            )
            earned = badge_rules.newly_earned(current.badges, badges)
            persisted = self._commit(current.model_copy(update={
                "badges": badges,
                "tutor_question_count": count,
            }))
            return BadgeOutcome(
                badges=tuple(badges),
                newly_earned=earned,
                tutor_question_count=count,
                persisted=persisted,
            )

    def award_badge(self, badge_id: str) -> BadgeOutcome:
        """
        Award a badge directly.

        Raises:
            ValidationError: not onboarded or unknown badge id
        """
        with self._lock:
            current = self._require_profile()
            badges = badge_rules.award_badge(current.badges, badge_id, self.clock())
            earned = badge_rules.newly_earned(current.badges, badges)
            persisted = self._commit(current.model_copy(update={"badges": badges}))
            return BadgeOutcome(
                badges=tuple(badges),
                newly_earned=earned,
                tutor_question_count=current.tutor_question_count,
                persisted=persisted,
            )

    def reset(self) -> None:
        """Forget the learner: clear the store and the in-memory profile."""
        with self._lock:
            self.store.clear()
            self._profile = ProfileAggregate()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require_profile(self) -> ProfileAggregate:
        if not self._profile.is_onboarded:
            raise ValidationError("Complete onboarding first")
        return self._profile

    def _commit(self, profile: ProfileAggregate) -> bool:
        """Swap in the new profile, then try to persist it."""
        self._profile = profile
        try:
            self.store.save(profile)
        except PersistenceFailure as e:
            logger.warning("Progress kept in memory only: %s", e)
            return False
        return True
