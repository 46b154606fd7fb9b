"""
Empower Journey Schemas - Pydantic models for the learning core.

This module exports all schema classes for:
- Catalog: lesson definitions, sections, quiz questions
- Progress: completion records, badges, the profile aggregate
"""

# Catalog schemas
from .catalog import (
    Difficulty,
    LessonDefinition,
    LessonSection,
    QuizQuestion,
    LessonContent,
)

# Progress schemas
from .progress import (
    CompletionRecord,
    BadgeDefinition,
    BadgeState,
    UserProfile,
    ProfileAggregate,
)

__all__ = [
    # Catalog
    'Difficulty',
    'LessonDefinition',
    'LessonSection',
    'QuizQuestion',
    'LessonContent',
    # Progress
    'CompletionRecord',
    'BadgeDefinition',
    'BadgeState',
    'UserProfile',
    'ProfileAggregate',
]
