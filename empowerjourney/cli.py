"""
cli.py - Command-line front end for the learning core.

Usage:
  empowerjourney onboard "Ada Lovelace" --email ada@example.com
  empowerjourney lessons
  empowerjourney lessons --category "Soft Skills"
  empowerjourney complete intro-digital-literacy 1 2
  empowerjourney complete online-safety 1 -      # '-' leaves a question unanswered
  empowerjourney ask
  empowerjourney badges
  empowerjourney stats
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from empowerjourney.classroom import (
    BADGE_DEFINITIONS,
    LearningJourney,
    LessonAvailability,
    SqliteProfileStore,
    progress_stats,
    recent_badges,
)
from empowerjourney.errors import JourneyError
from empowerjourney.utils import load_settings


logger = logging.getLogger(__name__)


def parse_answer(token: str) -> Optional[int]:
    if token == "-":
        return None
    try:
        return int(token)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Answer must be an option number or '-', got {token!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="empowerjourney",
        description="Track lessons, quiz scores, and badges",
    )
    parser.add_argument("--settings", type=Path, help="YAML settings file")
    parser.add_argument("--db", type=Path, help="Profile database (overrides settings)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at INFO level")
    sub = parser.add_subparsers(dest="command", required=True)

    onboard = sub.add_parser("onboard", help="Create the learner profile")
    onboard.add_argument("name")
    onboard.add_argument("--email", default="")
    onboard.add_argument("--language", default="en")

    lessons = sub.add_parser("lessons", help="List lessons with lock status")
    lessons.add_argument("--category", help="Only show one category")

    complete = sub.add_parser("complete", help="Submit quiz answers for a lesson")
    complete.add_argument("lesson_id")
    complete.add_argument("answers", nargs="*", type=parse_answer,
                          help="Option index per question ('-' for unanswered)")

    sub.add_parser("ask", help="Count one question asked to the tutor")
    sub.add_parser("badges", help="Show badge collection")
    sub.add_parser("stats", help="Show progress statistics")
    sub.add_parser("reset", help="Delete the stored profile")
    return parser


def cmd_onboard(journey: LearningJourney, args) -> None:
    user = journey.onboard(args.name, email=args.email, language=args.language)
    print(f"Welcome, {user.name}! 🎉 Welcome Badge earned.")


def cmd_lessons(journey: LearningJourney, args) -> None:
    nav = journey.navigator()
    for category in nav.get_navigation_tree(args.category):
        print(f"{category.category} ({category.completed_count}/{category.total_count})")
        for item in category.lessons:
            lesson = item.lesson
            line = (f"  {nav.get_status_indicator(lesson.id)} {lesson.id:<26} "
                    f"{lesson.title} [{lesson.difficulty.value}, {lesson.duration_minutes} min]")
            if item.score is not None:
                line += f" {item.score}%"
            if item.availability == LessonAvailability.LOCKED:
                line += f" (requires {', '.join(item.missing_prerequisites)})"
            print(line)


def cmd_complete(journey: LearningJourney, args) -> None:
    outcome = journey.complete_lesson(args.lesson_id, args.answers)
    print(f"Score: {outcome.score}%")
    names = {b.id: b for b in BADGE_DEFINITIONS}
    for badge_id in outcome.newly_earned:
        badge = names[badge_id]
        print(f"{badge.icon} Badge earned: {badge.name}")
    if not outcome.persisted:
        print("Warning: progress could not be saved and will be lost on exit.")


def cmd_ask(journey: LearningJourney, args) -> None:
    outcome = journey.record_tutor_question()
    print(f"Questions asked: {outcome.tutor_question_count}")
    if "ai-explorer" in outcome.newly_earned:
        print("🤖 Badge earned: AI Explorer")


def cmd_badges(journey: LearningJourney, args) -> None:
    states = {b.id: b for b in journey.profile.badges}
    earned = 0
    for definition in BADGE_DEFINITIONS:
        state = states.get(definition.id)
        if state and state.earned:
            earned += 1
            print(f"{definition.icon} {definition.name} - earned {state.earned_at:%Y-%m-%d}")
        else:
            print(f"🔒 {definition.name} - {definition.description}")
    print(f"{earned}/{len(BADGE_DEFINITIONS)} badges earned")


def cmd_stats(journey: LearningJourney, args) -> None:
    stats = progress_stats(journey.profile.progress, len(journey.catalog))
    print(f"Lessons completed: {stats.completed}/{stats.total_lessons} ({stats.completion_percent}%)")
    print(f"Average score: {stats.average_score}%")
    print(f"This week: {stats.weekly_activity} lessons")
    print(f"Current streak: {stats.current_streak} days (best {stats.longest_streak})")
    dist = stats.score_distribution
    print(f"Scores: excellent {dist['excellent']}, good {dist['good']}, "
          f"fair {dist['fair']}, needs work {dist['needs_work']}")
    recent = recent_badges(journey.profile.badges)
    if recent:
        print("Recent badges: " + ", ".join(b.id for b in recent))


def cmd_reset(journey: LearningJourney, args) -> None:
    journey.reset()
    print("Profile deleted.")


COMMANDS = {
    "onboard": cmd_onboard,
    "lessons": cmd_lessons,
    "complete": cmd_complete,
    "ask": cmd_ask,
    "badges": cmd_badges,
    "stats": cmd_stats,
    "reset": cmd_reset,
}


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.settings)
        logging.basicConfig(
            level=logging.INFO if args.verbose else settings.log_level,
            format="%(asctime)s - %(levelname)s - %(message)s"
        )

        store = SqliteProfileStore(args.db or settings.db_path, key=settings.storage_key)
        journey = LearningJourney(store)
        if args.command == "reset":
            # an unreadable profile must still be removable
            cmd_reset(journey, args)
            return 0
        onboarded = journey.load()
        if not onboarded and args.command not in ("onboard", "lessons"):
            print("No learner profile yet. Run: empowerjourney onboard NAME")
            return 1
        COMMANDS[args.command](journey, args)
    except JourneyError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
