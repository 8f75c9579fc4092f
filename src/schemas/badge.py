"""Badge and points schema definitions."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class BadgeInfo(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    icon_url: Optional[str] = None
    points_threshold: Optional[int] = None
    requirements: Dict[str, Any] = Field(default_factory=dict)
    earned: bool = False
    earned_at: Optional[str] = None


class CreateBadgeRequest(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    icon_url: Optional[str] = None
    points_threshold: Optional[int] = Field(default=None, ge=0)
    requirements: Dict[str, Any] = Field(
        default_factory=dict,
        description=(
            "Completion criteria, e.g. {'lessons_completed': 5} or "
            "{'disaster_type': 'fire', 'lessons_completed': 2}."
        ),
    )


class PointsInfo(BaseModel):
    total_points: int
    level: str
    next_level_points: Optional[int] = None
