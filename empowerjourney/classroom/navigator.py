"""
Navigator - Prerequisite gating and catalog browsing over a progress snapshot.

Provides:
- is_unlocked: the access predicate used before completing a lesson
- Lesson availability (locked / available / completed) with missing prerequisites
- Catalog tree grouped by category with status indicators
- Recommended next lesson
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Sequence

from empowerjourney.schemas import CompletionRecord, LessonDefinition

from .catalog import LessonCatalog
from .progress import completed_lesson_ids, get_completion, progress_stats


class LessonAvailability(str, Enum):
    """Lesson availability status for UI display."""
    LOCKED = "locked"           # Prerequisites not met
    AVAILABLE = "available"     # Can start
    COMPLETED = "completed"     # Finished at least once


def missing_prerequisites(
    lesson: LessonDefinition, progress: Sequence[CompletionRecord]
) -> list[str]:
    """Prerequisite IDs without a completion record, sorted."""
    completed = completed_lesson_ids(progress)
    return sorted(p for p in lesson.prerequisites if p not in completed)


def is_unlocked(lesson: LessonDefinition, progress: Sequence[CompletionRecord]) -> bool:
    """
    Whether a lesson can be taken.

    Any completion satisfies a prerequisite, whatever its score.
    """
    return not missing_prerequisites(lesson, progress)


def get_lesson_availability(
    lesson: LessonDefinition, progress: Sequence[CompletionRecord]
) -> tuple[LessonAvailability, list[str]]:
    """
    Check lesson availability based on progress and prerequisites.

    Returns:
        Tuple of (availability status, list of missing prerequisite IDs)
    """
    if get_completion(progress, lesson.id) is not None:
        return LessonAvailability.COMPLETED, []

    missing = missing_prerequisites(lesson, progress)
    if missing:
        return LessonAvailability.LOCKED, missing
    return LessonAvailability.AVAILABLE, []


@dataclass
class NavigationLesson:
    """Lesson with navigation metadata."""
    lesson: LessonDefinition
    availability: LessonAvailability
    score: Optional[int]
    missing_prerequisites: list[str]


@dataclass
class NavigationCategory:
    """Category with lessons and navigation metadata."""
    category: str
    lessons: list[NavigationLesson]
    completed_count: int
    total_count: int


class Navigator:
    """
    Browse the catalog against one progress snapshot.

    The snapshot is read on every call; nothing is cached between queries.
    """

    def __init__(self, catalog: LessonCatalog, progress: Sequence[CompletionRecord]):
        """
        Initialize navigator.

        Args:
            catalog: LessonCatalog for lesson definitions
            progress: Current completion records
        """
        self.catalog = catalog
        self.progress = progress

    # -------------------------------------------------------------------------
    # Availability Checking
    # -------------------------------------------------------------------------

    def get_lesson_availability(self, lesson_id: str) -> tuple[LessonAvailability, list[str]]:
        """Availability for a lesson id; unknown ids report as locked."""
        lesson = self.catalog.get_lesson(lesson_id)
        if not lesson:
            return LessonAvailability.LOCKED, []
        return get_lesson_availability(lesson, self.progress)

    def is_lesson_available(self, lesson_id: str) -> bool:
        """Check if a lesson can be taken (or retaken)."""
        lesson = self.catalog.get_lesson(lesson_id)
        return lesson is not None and is_unlocked(lesson, self.progress)

    def get_available_lessons(self) -> list[LessonDefinition]:
        """Get all lessons that can be taken now."""
        return [
            lesson for lesson in self.catalog.get_all_lessons()
            if is_unlocked(lesson, self.progress)
        ]

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def get_next_available_lesson_id(self, current_id: str) -> Optional[str]:
        """Next lesson after current_id in catalog order that is available and not completed."""
        order = [lesson.id for lesson in self.catalog.get_all_lessons()]
        if current_id not in order:
            return None
        for lesson_id in order[order.index(current_id) + 1:]:
            availability, _ = self.get_lesson_availability(lesson_id)
            if availability == LessonAvailability.AVAILABLE:
                return lesson_id
        return None

    def get_recommended_lesson_id(self) -> Optional[str]:
        """
        Get the recommended next lesson for the learner.

        Priority:
        1. First available lesson not yet completed
        2. First lesson (everything done or nothing available)
        """
        lessons = self.catalog.get_all_lessons()
        for lesson in lessons:
            availability, _ = get_lesson_availability(lesson, self.progress)
            if availability == LessonAvailability.AVAILABLE:
                return lesson.id
        return lessons[0].id if lessons else None

    # -------------------------------------------------------------------------
    # Catalog Tree
    # -------------------------------------------------------------------------

    def get_navigation_tree(self, category: Optional[str] = None) -> list[NavigationCategory]:
        """
        Get the catalog grouped by category with navigation metadata.

        Args:
            category: Restrict to one category (default: all)
        """
        categories = self.catalog.get_categories()
        if category is not None:
            categories = [c for c in categories if c == category]

        tree = []
        for name in categories:
            nav_lessons = []
            completed_count = 0
            for lesson in self.catalog.get_lessons_for_category(name):
                availability, missing = get_lesson_availability(lesson, self.progress)
                if availability == LessonAvailability.COMPLETED:
                    completed_count += 1
                record = get_completion(self.progress, lesson.id)
                nav_lessons.append(NavigationLesson(
                    lesson=lesson,
                    availability=availability,
                    score=record.score if record else None,
                    missing_prerequisites=missing,
                ))
            tree.append(NavigationCategory(
                category=name,
                lessons=nav_lessons,
                completed_count=completed_count,
                total_count=len(nav_lessons),
            ))
        return tree

    def get_status_indicator(self, lesson_id: str) -> str:
        """
        Get status indicator for list display.

        Returns:
            ✓ for completed
            ○ for available
            ◌ for locked
        """
        availability, _ = self.get_lesson_availability(lesson_id)
        if availability == LessonAvailability.COMPLETED:
            return "✓"
        elif availability == LessonAvailability.AVAILABLE:
            return "○"
        else:
            return "◌"

    # -------------------------------------------------------------------------
    # Progress Summary
    # -------------------------------------------------------------------------

    def get_progress_summary(self, now: Optional[datetime] = None) -> dict:
        """Get progress summary for display."""
        stats = progress_stats(self.progress, len(self.catalog), now)
        categories = [
            {
                "category": nav.category,
                "completed": nav.completed_count,
                "total": nav.total_count,
            }
            for nav in self.get_navigation_tree()
        ]
        return {
            "total_lessons": stats.total_lessons,
            "completed": stats.completed,
            "completion_percent": stats.completion_percent,
            "average_score": stats.average_score,
            "categories": categories,
            "recommended_lesson_id": self.get_recommended_lesson_id(),
        }
