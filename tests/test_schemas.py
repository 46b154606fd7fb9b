"""
Schema validation tests for Empower Journey.

Tests all Pydantic models to ensure they validate correctly.
"""

import pytest
from datetime import datetime, timezone

from empowerjourney.schemas import (
    # Catalog
    Difficulty,
    LessonDefinition,
    LessonSection,
    QuizQuestion,
    LessonContent,
    # Progress
    CompletionRecord,
    BadgeState,
    UserProfile,
    ProfileAggregate,
)


NOW = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)


class TestCatalogSchemas:
    """Test catalog-related schemas."""

    def test_lesson_definition_valid(self):
        lesson = LessonDefinition(
            id="critical-thinking",
            title="Critical Thinking",
            category="Soft Skills",
            difficulty=Difficulty.INTERMEDIATE,
            duration_minutes=30,
            prerequisites=["intro-digital-literacy"],
        )
        assert lesson.prerequisites == frozenset({"intro-digital-literacy"})
        assert lesson.difficulty == Difficulty.INTERMEDIATE

    def test_lesson_definition_defaults(self):
        lesson = LessonDefinition(id="a", title="A", category="C", duration_minutes=5)
        assert lesson.prerequisites == frozenset()
        assert lesson.difficulty == Difficulty.BEGINNER

    def test_lesson_duration_must_be_positive(self):
        with pytest.raises(ValueError):
            LessonDefinition(id="a", title="A", category="C", duration_minutes=0)

    def test_lesson_invalid_difficulty(self):
        with pytest.raises(ValueError):
            LessonDefinition(id="a", title="A", category="C", duration_minutes=5, difficulty="expert")

    def test_lesson_invalid_id(self):
        with pytest.raises(ValueError):
            LessonDefinition(id="Not An Id", title="A", category="C", duration_minutes=5)

    def test_lesson_cannot_require_itself(self):
        with pytest.raises(ValueError):
            LessonDefinition(id="a", title="A", category="C", duration_minutes=5, prerequisites=["a"])

    def test_lesson_is_frozen(self):
        lesson = LessonDefinition(id="a", title="A", category="C", duration_minutes=5)
        with pytest.raises(ValueError):
            lesson.title = "B"

    def test_quiz_question_answer_in_range(self):
        with pytest.raises(ValueError):
            QuizQuestion(question="Q?", options=["x", "y"], correct_answer=2)

    def test_quiz_question_needs_two_options(self):
        with pytest.raises(ValueError):
            QuizQuestion(question="Q?", options=["only"], correct_answer=0)

    def test_lesson_content_answer_key(self):
        content = LessonContent(
            lesson_id="a",
            sections=[LessonSection(title="T", content="C", audio_text="C")],
            quiz=[
                QuizQuestion(question="1?", options=["x", "y"], correct_answer=1),
                QuizQuestion(question="2?", options=["x", "y", "z"], correct_answer=2),
            ],
        )
        assert content.answer_key == [1, 2]


class TestProgressSchemas:
    """Test progress tracking schemas."""

    def test_completion_record_valid(self):
        record = CompletionRecord(lesson_id="a", score=85, completed_at=NOW)
        assert record.completed is True

    def test_completion_record_cannot_be_incomplete(self):
        with pytest.raises(ValueError):
            CompletionRecord(lesson_id="a", completed=False, score=85, completed_at=NOW)

    def test_completion_record_score_bounds(self):
        with pytest.raises(ValueError):
            CompletionRecord(lesson_id="a", score=101, completed_at=NOW)
        with pytest.raises(ValueError):
            CompletionRecord(lesson_id="a", score=-1, completed_at=NOW)

    def test_badge_state_defaults(self):
        state = BadgeState(id="first-lesson")
        assert state.earned is False
        assert state.earned_at is None

    def test_badge_state_earned_requires_timestamp(self):
        with pytest.raises(ValueError):
            BadgeState(id="first-lesson", earned=True)

    def test_badge_state_timestamp_requires_earned(self):
        with pytest.raises(ValueError):
            BadgeState(id="first-lesson", earned=False, earned_at=NOW)

    def test_profile_aggregate_defaults(self):
        profile = ProfileAggregate()
        assert profile.user is None
        assert profile.is_onboarded is False
        assert profile.tutor_question_count == 0

    def test_profile_aggregate_rejects_duplicate_records(self):
        with pytest.raises(ValueError):
            ProfileAggregate(progress=[
                CompletionRecord(lesson_id="a", score=40, completed_at=NOW),
                CompletionRecord(lesson_id="a", score=90, completed_at=NOW),
            ])

    def test_profile_aggregate_earned_ids(self):
        profile = ProfileAggregate(
            user=UserProfile(id="u1", name="Ada", joined_at=NOW),
            badges=[
                BadgeState(id="welcome", earned=True, earned_at=NOW),
                BadgeState(id="first-lesson"),
            ],
        )
        assert profile.is_onboarded
        assert profile.earned_badge_ids() == {"welcome"}

    def test_user_profile_requires_name(self):
        with pytest.raises(ValueError):
            UserProfile(id="u1", name="", joined_at=NOW)


class TestSchemaImports:
    """Test that all schemas can be imported from the main module."""

    def test_import_from_schemas(self):
        from empowerjourney.schemas import (
            LessonDefinition,
            ProfileAggregate,
            BadgeDefinition,
        )
        assert LessonDefinition is not None
        assert ProfileAggregate is not None
        assert BadgeDefinition is not None
