"""
Empower Journey Classroom - Runtime components for progress, badges, and gating.

This module provides:
- LessonCatalog: Static lesson registry and quiz content
- score_quiz: Quiz scoring
- record_completion: Progress upsert
- evaluate_badges: Badge rules
- Navigator / is_unlocked: Prerequisite gating
- LearningJourney: Single write entry point
- SqliteProfileStore / MemoryProfileStore: Persistence
"""

from .catalog import (
    LessonCatalog,
    LESSONS,
    LESSON_CONTENT,
    DEFAULT_CATALOG,
    validate_prerequisite_graph,
)

from .quiz import (
    QuizResult,
    grade_quiz,
    score_quiz,
    score_band,
)

from .progress import (
    ProgressStats,
    record_completion,
    completed_lesson_ids,
    current_streak,
    longest_streak,
    progress_stats,
)

from .badges import (
    BADGE_DEFINITIONS,
    initial_badge_states,
    evaluate_badges,
    award_badge,
    recent_badges,
)

from .navigator import (
    Navigator,
    LessonAvailability,
    NavigationLesson,
    NavigationCategory,
    is_unlocked,
    missing_prerequisites,
)

from .store import (
    ProfileStore,
    MemoryProfileStore,
    SqliteProfileStore,
    SCHEMA_VERSION,
    DEFAULT_STORAGE_KEY,
    DEFAULT_DB_PATH,
)

from .journey import (
    LearningJourney,
    CompletionOutcome,
    BadgeOutcome,
)

__all__ = [
    # Catalog
    "LessonCatalog",
    "LESSONS",
    "LESSON_CONTENT",
    "DEFAULT_CATALOG",
    "validate_prerequisite_graph",
    # Quiz
    "QuizResult",
    "grade_quiz",
    "score_quiz",
    "score_band",
    # Progress
    "ProgressStats",
    "record_completion",
    "completed_lesson_ids",
    "current_streak",
    "longest_streak",
    "progress_stats",
    # Badges
    "BADGE_DEFINITIONS",
    "initial_badge_states",
    "evaluate_badges",
    "award_badge",
    "recent_badges",
    # Navigator
    "Navigator",
    "LessonAvailability",
    "NavigationLesson",
    "NavigationCategory",
    "is_unlocked",
    "missing_prerequisites",
    # Store
    "ProfileStore",
    "MemoryProfileStore",
    "SqliteProfileStore",
    "SCHEMA_VERSION",
    "DEFAULT_STORAGE_KEY",
    "DEFAULT_DB_PATH",
    # Journey
    "LearningJourney",
    "CompletionOutcome",
    "BadgeOutcome",
]
