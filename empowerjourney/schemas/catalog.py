"""
Catalog schemas for Empower Journey.

Defines Pydantic models for the static lesson catalog including:
- Lesson definitions with prerequisites
- Lesson reading sections
- Multiple-choice quiz questions
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class LessonDefinition(BaseModel):
    """One catalog entry. Immutable once loaded."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., pattern=r'^[a-z0-9]+(-[a-z0-9]+)*$')
    title: str
    description: str = ""
    category: str
    difficulty: Difficulty = Difficulty.BEGINNER
    duration_minutes: int = Field(..., gt=0)
    prerequisites: frozenset[str] = frozenset()  # lesson IDs

    @model_validator(mode='after')
    def not_own_prerequisite(self):
        if self.id in self.prerequisites:
            raise ValueError(f"Lesson {self.id} lists itself as a prerequisite")
        return self


# -----------------------------------------------------------------------------
# Lesson content
# -----------------------------------------------------------------------------


class LessonSection(BaseModel):
    title: str
    content: str
    audio_text: str  # shorter text handed to speech synthesis


class QuizQuestion(BaseModel):
    question: str
    options: list[str] = Field(..., min_length=2)
    correct_answer: int = Field(..., ge=0)  # index into options

    @model_validator(mode='after')
    def answer_in_range(self):
        if self.correct_answer >= len(self.options):
            raise ValueError(
                f"correct_answer {self.correct_answer} out of range for "
                f"{len(self.options)} options"
            )
        return self


class LessonContent(BaseModel):
    lesson_id: str
    sections: list[LessonSection] = []
    quiz: list[QuizQuestion] = []

    @property
    def answer_key(self) -> list[int]:
        """Correct option index for each question, in quiz order."""
        return [q.correct_answer for q in self.quiz]
