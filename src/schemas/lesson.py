"""Lesson schema definitions."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from schemas.others import DisasterType
from schemas.quiz import QuizPublic


class LessonFields(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    content: Optional[str] = None
    disaster_type: DisasterType
    difficulty_level: int = Field(default=1, ge=1, le=5)
    points_reward: Optional[int] = Field(
        default=None,
        ge=0,
        description="Points for completing the lesson. Defaults to the configured lesson reward.",
    )
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    pdf_url: Optional[str] = None
    simulation_url: Optional[str] = None
    is_published: bool = True


class CreateLessonRequest(LessonFields):
    pass


class UpdateLessonRequest(BaseModel):
    """Partial lesson update. Omitted fields are kept."""

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    content: Optional[str] = None
    disaster_type: Optional[DisasterType] = None
    difficulty_level: Optional[int] = Field(default=None, ge=1, le=5)
    points_reward: Optional[int] = Field(default=None, ge=0)
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    pdf_url: Optional[str] = None
    simulation_url: Optional[str] = None
    is_published: Optional[bool] = None

    @field_validator("title", "disaster_type", "difficulty_level", "points_reward", "is_published")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not set to null")
        return value


class LessonInfo(BaseModel):
    """Lesson as shown in listings."""

    id: str
    title: str
    description: Optional[str] = None
    disaster_type: DisasterType
    difficulty_level: int
    points_reward: int
    image_url: Optional[str] = None
    is_published: bool
    created_at: str
    updated_at: str
    completed: bool = Field(
        default=False, description="Whether the requesting user completed the lesson."
    )


class LessonDetail(LessonInfo):
    content: Optional[str] = None
    video_url: Optional[str] = None
    pdf_url: Optional[str] = None
    simulation_url: Optional[str] = None
    created_by: Optional[str] = None
    quiz: Optional[QuizPublic] = None


class LessonGroup(BaseModel):
    """Published lessons of one disaster type."""

    disaster_type: DisasterType
    lesson_count: int
    completed_count: int
    lessons: List[LessonInfo]


class DisasterTypeInfo(BaseModel):
    disaster_type: DisasterType
    lesson_count: int
    has_checklist: bool
