"""
Progress tracking schemas for Empower Journey.

Defines Pydantic models for learner state including:
- Completion records (one per lesson)
- Badge definitions and earned state
- The learner profile aggregate that is persisted as one unit
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CompletionRecord(BaseModel):
    lesson_id: str
    completed: Literal[True] = True
    score: int = Field(..., ge=0, le=100)  # whole percent
    completed_at: datetime


class BadgeDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    icon: str


class BadgeState(BaseModel):
    id: str
    earned: bool = False
    earned_at: Optional[datetime] = None

    @model_validator(mode='after')
    def earned_at_matches_earned(self):
        if self.earned and self.earned_at is None:
            raise ValueError(f"Badge {self.id} is earned but has no earned_at")
        if not self.earned and self.earned_at is not None:
            raise ValueError(f"Badge {self.id} has earned_at but is not earned")
        return self


class UserProfile(BaseModel):
    id: str
    name: str = Field(..., min_length=1)
    email: str = ""
    language: str = "en"
    joined_at: datetime


class ProfileAggregate(BaseModel):
    """Everything stored for the single local learner."""
    user: Optional[UserProfile] = None
    progress: list[CompletionRecord] = []
    badges: list[BadgeState] = []
    tutor_question_count: int = Field(default=0, ge=0)

    @model_validator(mode='after')
    def one_record_per_lesson(self):
        seen = set()
        for record in self.progress:
            if record.lesson_id in seen:
                raise ValueError(f"Duplicate completion record for {record.lesson_id}")
            seen.add(record.lesson_id)
        return self

    @property
    def is_onboarded(self) -> bool:
        return self.user is not None

    def earned_badge_ids(self) -> set[str]:
        return {b.id for b in self.badges if b.earned}
