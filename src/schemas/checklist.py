"""Checklist schema definitions."""

from typing import List, Optional

from pydantic import BaseModel, Field

from schemas.badge import BadgeInfo
from schemas.others import DisasterType


class ChecklistItemCreate(BaseModel):
    item_text: str = Field(min_length=1)
    category: Optional[str] = None
    is_essential: bool = False
    order_index: Optional[int] = None


class CreateChecklistRequest(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    disaster_type: DisasterType
    is_published: bool = True
    items: List[ChecklistItemCreate] = Field(default_factory=list)


class ChecklistItemInfo(BaseModel):
    id: str
    item_text: str
    category: Optional[str] = None
    is_essential: bool
    order_index: int
    completed: bool = False
    completed_at: Optional[str] = None


class ChecklistSummary(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    disaster_type: DisasterType
    total_items: int
    completed_items: int
    completion_percentage: int


class ChecklistDetail(ChecklistSummary):
    items: List[ChecklistItemInfo]


class ToggleItemRequest(BaseModel):
    completed: bool


class ToggleItemResponse(BaseModel):
    item: ChecklistItemInfo
    checklist_id: str
    points_awarded: int
    total_points: int
    completion_percentage: int
    new_badges: List[BadgeInfo] = Field(default_factory=list)
