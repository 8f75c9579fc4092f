"""Dashboard schema definitions."""

from typing import List, Literal, Optional

from pydantic import BaseModel

from schemas.badge import BadgeInfo
from schemas.others import DisasterType, UserRole


class DisasterProgress(BaseModel):
    disaster_type: DisasterType
    completed: int
    total: int
    percentage: int
    mastered: bool


class ActivityEntry(BaseModel):
    kind: Literal["quiz", "checklist_item", "badge"]
    description: str
    points: int = 0
    occurred_at: str


class DashboardResponse(BaseModel):
    full_name: str
    role: UserRole
    total_points: int
    level: str
    next_level_points: Optional[int] = None
    level_progress: int
    lessons_completed: int
    checklists_finished: int
    badges_earned: int
    badges_total: int
    streak_days: int
    progress_by_type: List[DisasterProgress]
    recent_activity: List[ActivityEntry]
    badges: List[BadgeInfo]
