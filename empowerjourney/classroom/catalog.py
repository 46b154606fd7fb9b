"""
LessonCatalog - Read-only registry of lessons and their quiz content.

Provides:
- The compiled-in lesson table (ids, categories, prerequisites)
- Lesson reading sections and quiz answer keys
- Prerequisite graph validation (no dangling ids, no cycles)
"""

from typing import Iterable, Optional

from empowerjourney.errors import CatalogError
from empowerjourney.schemas import (
    Difficulty,
    LessonContent,
    LessonDefinition,
    LessonSection,
    QuizQuestion,
)


# -----------------------------------------------------------------------------
# Static tables
# -----------------------------------------------------------------------------

LESSONS: tuple[LessonDefinition, ...] = (
    LessonDefinition(
        id="intro-digital-literacy",
        title="Introduction to Digital Literacy",
        description="Learn the basics of navigating the digital world safely and effectively",
        category="Digital Skills",
        difficulty=Difficulty.BEGINNER,
        duration_minutes=15,
    ),
    LessonDefinition(
        id="online-safety",
        title="Online Safety & Privacy",
        description="Understand how to protect yourself and your information online",
        category="Digital Skills",
        difficulty=Difficulty.BEGINNER,
        duration_minutes=20,
    ),
    LessonDefinition(
        id="effective-communication",
        title="Effective Communication Skills",
        description="Master the art of clear and confident communication",
        category="Soft Skills",
        difficulty=Difficulty.BEGINNER,
        duration_minutes=25,
    ),
    LessonDefinition(
        id="time-management",
        title="Time Management Essentials",
        description="Learn techniques to manage your time and boost productivity",
        category="Productivity",
        difficulty=Difficulty.BEGINNER,
        duration_minutes=20,
    ),
    LessonDefinition(
        id="critical-thinking",
        title="Critical Thinking & Problem Solving",
        description="Develop skills to analyze problems and find creative solutions",
        category="Soft Skills",
        difficulty=Difficulty.INTERMEDIATE,
        duration_minutes=30,
        prerequisites=frozenset({"intro-digital-literacy"}),
    ),
    LessonDefinition(
        id="financial-literacy",
        title="Financial Literacy Basics",
        description="Understand budgeting, saving, and making informed financial decisions",
        category="Life Skills",
        difficulty=Difficulty.BEGINNER,
        duration_minutes=25,
    ),
    LessonDefinition(
        id="goal-setting",
        title="Goal Setting & Achievement",
        description="Learn how to set and achieve meaningful personal and professional goals",
        category="Personal Development",
        difficulty=Difficulty.BEGINNER,
        duration_minutes=20,
    ),
    LessonDefinition(
        id="digital-marketing-intro",
        title="Introduction to Digital Marketing",
        description="Explore the fundamentals of marketing in the digital age",
        category="Professional Skills",
        difficulty=Difficulty.INTERMEDIATE,
        duration_minutes=35,
        prerequisites=frozenset({"intro-digital-literacy"}),
    ),
)

LESSON_CONTENT: dict[str, LessonContent] = {
    "intro-digital-literacy": LessonContent(
        lesson_id="intro-digital-literacy",
        sections=[
            LessonSection(
                title="What is Digital Literacy?",
                content=(
                    "Digital literacy is the ability to use information and communication "
                    "technologies to find, evaluate, create, and communicate information. "
                    "It requires both cognitive and technical skills."
                ),
                audio_text=(
                    "Digital literacy is the ability to use information and communication "
                    "technologies to find, evaluate, create, and communicate information."
                ),
            ),
            LessonSection(
                title="Why It Matters",
                content=(
                    "In today's digital age, being digitally literate is essential for "
                    "education, work, and everyday life. It empowers you to participate "
                    "fully in the digital society and opens up new opportunities."
                ),
                audio_text=(
                    "In today's digital age, being digitally literate is essential for "
                    "education, work, and everyday life."
                ),
            ),
            LessonSection(
                title="Key Skills",
                content=(
                    "Digital literacy includes: understanding how to use devices and software, "
                    "evaluating online information for credibility, protecting your privacy "
                    "and security, and communicating effectively in digital spaces."
                ),
                audio_text=(
                    "Digital literacy includes understanding how to use devices and software, "
                    "evaluating online information, protecting privacy, and communicating "
                    "effectively."
                ),
            ),
        ],
        quiz=[
            QuizQuestion(
                question="What is digital literacy?",
                options=[
                    "Only knowing how to type",
                    "The ability to use technology to find, evaluate, and communicate information",
                    "Playing video games",
                    "Using social media",
                ],
                correct_answer=1,
            ),
            QuizQuestion(
                question="Why is digital literacy important today?",
                options=[
                    "It's not important",
                    "Only for young people",
                    "Essential for education, work, and everyday life",
                    "Only for tech professionals",
                ],
                correct_answer=2,
            ),
        ],
    ),
}

# Lessons without authored content share this outline
_GENERIC_SECTIONS = [
    LessonSection(
        title="Welcome to this lesson",
        content="This lesson will help you develop new skills and knowledge to empower your journey.",
        audio_text="Welcome to this lesson. This lesson will help you develop new skills and knowledge.",
    ),
    LessonSection(
        title="Key Concepts",
        content=(
            "Throughout this lesson, you'll learn important concepts that you can apply "
            "in real-world situations."
        ),
        audio_text=(
            "Throughout this lesson, you will learn important concepts that you can apply "
            "in real situations."
        ),
    ),
    LessonSection(
        title="Practical Application",
        content=(
            "Remember to practice what you learn. The more you apply these skills, "
            "the more confident you'll become."
        ),
        audio_text=(
            "Remember to practice what you learn. The more you apply these skills, "
            "the more confident you will become."
        ),
    ),
]

_GENERIC_QUIZ = [
    QuizQuestion(
        question="What is the main purpose of this lesson?",
        options=[
            "Entertainment",
            "To develop new skills and knowledge",
            "To waste time",
            "To confuse learners",
        ],
        correct_answer=1,
    ),
    QuizQuestion(
        question="How can you get the most out of this lesson?",
        options=[
            "Skip to the end",
            "Just read without thinking",
            "Practice and apply what you learn",
            "Memorize without understanding",
        ],
        correct_answer=2,
    ),
]


def generic_content(lesson_id: str) -> LessonContent:
    """Fallback content for lessons that have no authored sections."""
    return LessonContent(
        lesson_id=lesson_id,
        sections=list(_GENERIC_SECTIONS),
        quiz=list(_GENERIC_QUIZ),
    )


# -----------------------------------------------------------------------------
# Graph validation
# -----------------------------------------------------------------------------


def validate_prerequisite_graph(lessons: Iterable[LessonDefinition]) -> None:
    """
    Check that lesson ids are unique, every prerequisite exists, and the
    prerequisite graph has no cycles.

    Raises:
        CatalogError: on the first problem found
    """
    by_id: dict[str, LessonDefinition] = {}
    for lesson in lessons:
        if lesson.id in by_id:
            raise CatalogError(f"Duplicate lesson id: {lesson.id}")
        by_id[lesson.id] = lesson

    for lesson in by_id.values():
        dangling = sorted(p for p in lesson.prerequisites if p not in by_id)
        if dangling:
            raise CatalogError(
                f"Lesson {lesson.id} has unknown prerequisites: {', '.join(dangling)}"
            )

    # Iterative DFS with white/grey/black colouring
    WHITE, GREY, BLACK = 0, 1, 2
    colour = {lesson_id: WHITE for lesson_id in by_id}
    for root in by_id:
        if colour[root] != WHITE:
            continue
        stack = [(root, iter(sorted(by_id[root].prerequisites)))]
        colour[root] = GREY
        while stack:
            node, children = stack[-1]
            child = next(children, None)
            if child is None:
                colour[node] = BLACK
                stack.pop()
            elif colour[child] == GREY:
                path = [n for n, _ in stack] + [child]
                raise CatalogError(f"Prerequisite cycle: {' -> '.join(path)}")
            elif colour[child] == WHITE:
                colour[child] = GREY
                stack.append((child, iter(sorted(by_id[child].prerequisites))))


# -----------------------------------------------------------------------------
# Catalog
# -----------------------------------------------------------------------------


class LessonCatalog:
    """
    Read-only access to lesson definitions and content.

    The default instance wraps the compiled-in tables; tests can build a
    catalog from their own definitions.
    """

    def __init__(
        self,
        lessons: Iterable[LessonDefinition] = LESSONS,
        content: Optional[dict[str, LessonContent]] = None,
    ):
        """
        Initialize catalog.

        Args:
            lessons: Lesson definitions in display order
            content: Authored content keyed by lesson id (default: LESSON_CONTENT)

        Raises:
            CatalogError: if the prerequisite graph is invalid
        """
        self._lessons = list(lessons)
        validate_prerequisite_graph(self._lessons)
        self._by_id = {lesson.id: lesson for lesson in self._lessons}
        self._content = LESSON_CONTENT if content is None else content

    def __len__(self) -> int:
        return len(self._lessons)

    def __contains__(self, lesson_id: object) -> bool:
        return lesson_id in self._by_id

    def get_lesson(self, lesson_id: str) -> Optional[LessonDefinition]:
        """Get a single lesson by ID."""
        return self._by_id.get(lesson_id)

    def get_all_lessons(self) -> list[LessonDefinition]:
        """Get all lessons in display order."""
        return list(self._lessons)

    def get_categories(self) -> list[str]:
        """Distinct categories in first-seen order."""
        seen: dict[str, None] = {}
        for lesson in self._lessons:
            seen.setdefault(lesson.category, None)
        return list(seen)

    def get_lessons_for_category(self, category: str) -> list[LessonDefinition]:
        return [lesson for lesson in self._lessons if lesson.category == category]

    def get_lesson_content(self, lesson_id: str) -> Optional[LessonContent]:
        """Authored content for a lesson, or the generic outline."""
        if lesson_id not in self._by_id:
            return None
        return self._content.get(lesson_id) or generic_content(lesson_id)

    def get_answer_key(self, lesson_id: str) -> list[int]:
        content = self.get_lesson_content(lesson_id)
        return content.answer_key if content else []


DEFAULT_CATALOG = LessonCatalog()
