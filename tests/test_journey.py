"""LearningJourney tests: the single write path and its scenarios."""

import threading
from datetime import datetime

import pytest

from empowerjourney.classroom import (
    LearningJourney,
    MemoryProfileStore,
    SqliteProfileStore,
    progress_stats,
    recent_badges,
)
from empowerjourney.errors import AccessDenied, PersistenceFailure, ValidationError


PERFECT_INTRO = [1, 2]
PERFECT_GENERIC = [1, 2]
OTHER_LESSONS = [
    "online-safety",
    "effective-communication",
    "time-management",
    "financial-literacy",
    "goal-setting",
]


def earned(journey):
    return journey.profile.earned_badge_ids()


class FailingStore(MemoryProfileStore):

    def save(self, profile):
        raise PersistenceFailure("quota exceeded")


class TestOnboarding:

    def test_fresh_journey_not_onboarded(self, store, clock):
        journey = LearningJourney(store, clock=clock)
        assert journey.load() is False
        assert not journey.is_onboarded

    def test_onboard_creates_profile(self, journey, store, clock):
        profile = journey.profile
        assert profile.user.name == "Ada"
        assert profile.user.joined_at == clock.now
        assert profile.progress == []
        assert earned(journey) == {"welcome"}
        assert len(profile.badges) == 6
        assert store.saves == 1

    def test_onboard_twice_rejected(self, journey):
        with pytest.raises(ValidationError):
            journey.onboard("Grace")

    def test_blank_name_rejected(self, store, clock):
        with pytest.raises(ValidationError):
            LearningJourney(store, clock=clock).onboard("   ")

    def test_load_restores_profile(self, journey, store, clock):
        journey.complete_lesson("intro-digital-literacy", PERFECT_INTRO)
        restored = LearningJourney(store, clock=clock)
        assert restored.load() is True
        assert restored.profile == journey.profile

    def test_mutations_require_onboarding(self, store, clock):
        journey = LearningJourney(store, clock=clock)
        with pytest.raises(ValidationError):
            journey.complete_lesson("intro-digital-literacy", PERFECT_INTRO)
        with pytest.raises(ValidationError):
            journey.record_tutor_question()


class TestCompleteLesson:

    def test_first_completion_scenario(self, journey):
        outcome = journey.complete_lesson("intro-digital-literacy", PERFECT_INTRO)
        assert outcome.score == 100
        assert len(outcome.progress) == 1
        assert set(outcome.newly_earned) == {"first-lesson", "perfect-score"}
        assert earned(journey) == {"welcome", "first-lesson", "perfect-score"}
        assert "five-lessons" not in earned(journey)
        assert outcome.persisted is True

    def test_partial_score(self, journey):
        outcome = journey.complete_lesson("intro-digital-literacy", [1, 0])
        assert outcome.score == 50
        assert "perfect-score" not in earned(journey)

    def test_unanswered_question_scores_zero(self, journey):
        outcome = journey.complete_lesson("intro-digital-literacy", [1, None])
        assert outcome.score == 50

    def test_upsert_keeps_one_record(self, journey, clock):
        journey.complete_lesson("online-safety", [1, 0])
        clock.advance(hours=1)
        journey.complete_lesson("online-safety", PERFECT_GENERIC)
        records = [r for r in journey.profile.progress if r.lesson_id == "online-safety"]
        assert len(records) == 1
        assert records[0].score == 100
        assert records[0].completed_at == clock.now

    def test_five_lessons_on_fifth_completion(self, journey):
        for i, lesson_id in enumerate(OTHER_LESSONS):
            outcome = journey.complete_lesson(lesson_id, [1, 0])
            assert ("five-lessons" in outcome.newly_earned) == (i == 4)
        assert "five-lessons" in earned(journey)

    def test_retaking_does_not_count_twice(self, journey):
        for _ in range(5):
            journey.complete_lesson("online-safety", [1, 0])
        assert "five-lessons" not in earned(journey)

    def test_locked_lesson_denied(self, journey, store):
        saves = store.saves
        with pytest.raises(AccessDenied) as exc_info:
            journey.complete_lesson("critical-thinking", PERFECT_GENERIC)
        assert exc_info.value.missing == ["intro-digital-literacy"]
        assert journey.profile.progress == []
        assert store.saves == saves

    def test_locked_scenario_unlocks_after_prerequisite(self, journey):
        assert journey.is_unlocked("critical-thinking") is False
        journey.complete_lesson("intro-digital-literacy", [0, 0])
        assert journey.is_unlocked("critical-thinking") is True
        outcome = journey.complete_lesson("critical-thinking", PERFECT_GENERIC)
        assert outcome.score == 100

    def test_unknown_lesson_rejected(self, journey):
        with pytest.raises(ValidationError):
            journey.complete_lesson("underwater-basket-weaving", [])
        with pytest.raises(ValidationError):
            journey.is_unlocked("underwater-basket-weaving")

    @pytest.mark.parametrize("answers", [[1], [1, 2, 3], [1, 4], [1, -1], [1, "2"], [True, 2]])
    def test_malformed_answers_rejected(self, journey, answers):
        before = journey.profile
        with pytest.raises(ValidationError):
            journey.complete_lesson("intro-digital-literacy", answers)
        assert journey.profile == before

    def test_week_streak_from_real_dates(self, journey, clock):
        lessons = ["intro-digital-literacy"] + OTHER_LESSONS + ["critical-thinking"]
        for day, lesson_id in enumerate(lessons):
            outcome = journey.complete_lesson(lesson_id, [1, 0])
            assert ("week-streak" in outcome.newly_earned) == (day == 6)
            clock.advance(days=1)


class TestTutorAndAwards:

    def test_ai_explorer_after_ten_questions(self, journey):
        for i in range(9):
            outcome = journey.record_tutor_question()
            assert outcome.newly_earned == []
        outcome = journey.record_tutor_question()
        assert outcome.tutor_question_count == 10
        assert outcome.newly_earned == ["ai-explorer"]
        assert journey.record_tutor_question().newly_earned == []

    def test_question_count_persisted(self, journey, store, clock):
        journey.record_tutor_question()
        restored = LearningJourney(store, clock=clock)
        restored.load()
        assert restored.profile.tutor_question_count == 1

    def test_award_badge(self, journey, clock):
        outcome = journey.award_badge("ai-explorer")
        assert outcome.newly_earned == ["ai-explorer"]
        clock.advance(days=1)
        assert journey.award_badge("ai-explorer").newly_earned == []

    def test_award_unknown_badge(self, journey):
        with pytest.raises(ValidationError):
            journey.award_badge("made-up")


class TestPersistence:

    def test_failed_save_keeps_memory_state(self, clock):
        journey = LearningJourney(FailingStore(), clock=clock)
        journey.onboard("Ada")
        outcome = journey.complete_lesson("intro-digital-literacy", PERFECT_INTRO)
        assert outcome.persisted is False
        assert len(journey.profile.progress) == 1
        assert "first-lesson" in earned(journey)

    def test_sqlite_backed_journey(self, tmp_path, clock):
        db_path = tmp_path / "journey.db"
        journey = LearningJourney(SqliteProfileStore(db_path), clock=clock)
        journey.onboard("Ada")
        journey.complete_lesson("intro-digital-literacy", PERFECT_INTRO)

        restored = LearningJourney(SqliteProfileStore(db_path), clock=clock)
        assert restored.load()
        assert restored.profile.progress[0].score == 100

    def test_reset(self, journey, store):
        journey.reset()
        assert not journey.is_onboarded
        assert store.load() is None

    def test_concurrent_completions_serialized(self, journey):
        errors = []

        def submit(lesson_id):
            try:
                journey.complete_lesson(lesson_id, [1, 0])
            except Exception as e:  # pragma: no cover
                errors.append(e)

        threads = [threading.Thread(target=submit, args=(lid,)) for lid in OTHER_LESSONS * 4]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        ids = [r.lesson_id for r in journey.profile.progress]
        assert sorted(ids) == sorted(OTHER_LESSONS)
        assert "five-lessons" in earned(journey)


class TestNaiveClock:

    def test_stats_with_naive_clock(self, store):
        journey = LearningJourney(store, clock=lambda: datetime(2024, 3, 4, 9, 0))
        journey.onboard("Ada")
        journey.complete_lesson("intro-digital-literacy", PERFECT_INTRO)

        stats = progress_stats(journey.profile.progress, 8)
        assert stats.completed == 1
        stats = progress_stats(journey.profile.progress, 8, now=datetime(2024, 3, 5, 9, 0))
        assert stats.weekly_activity == 1
        assert stats.current_streak == 1
        assert recent_badges(journey.profile.badges)[0].earned


class TestSnapshots:

    def test_profile_is_a_copy(self, journey):
        journey.profile.progress.append("not a record")
        journey.profile.badges.clear()
        assert journey.profile.progress == []
        assert len(journey.profile.badges) == 6

    def test_outcome_collections_are_immutable(self, journey):
        outcome = journey.complete_lesson("intro-digital-literacy", PERFECT_INTRO)
        assert isinstance(outcome.progress, tuple)
        assert isinstance(outcome.badges, tuple)
        with pytest.raises(AttributeError):
            outcome.progress.append(outcome.progress[0])

        badge_outcome = journey.record_tutor_question()
        assert isinstance(badge_outcome.badges, tuple)
        assert len(journey.profile.progress) == 1

    def test_outcome_matches_profile(self, journey):
        outcome = journey.complete_lesson("intro-digital-literacy", PERFECT_INTRO)
        assert list(outcome.progress) == journey.profile.progress
        assert list(outcome.badges) == journey.profile.badges
