"""Checklist management module.

This module handles checklist listing, per-user item completion and the
points granted for essential items.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

import pytz
from sqlalchemy.orm import Session

from config import ESSENTIAL_ITEM_POINTS
from core.exceptions import ChecklistItemNotFoundError, ChecklistNotFoundError
from models.checklist import ChecklistItemModel, ChecklistModel
from models.progress import UserChecklistProgressModel
from schemas.checklist import (
    ChecklistDetail,
    ChecklistSummary,
    CreateChecklistRequest,
    ToggleItemResponse,
)
from utils.converters import checklist_item_to_info
from utils.gamification_manager import GamificationManager

logger = logging.getLogger(__name__)


def completion_percentage(completed: int, total: int) -> int:
    """Rounded completion percentage; 0 for an empty checklist."""
    if total <= 0:
        return 0
    return int(completed * 100 / total + 0.5)


class ChecklistManager:
    """Manages checklists and checklist progress using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize ChecklistManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db
        self.gamification = GamificationManager(db)

    def _progress_by_item(
        self, user_id: str, item_ids: List[str]
    ) -> Dict[str, UserChecklistProgressModel]:
        if not item_ids:
            return {}
        rows = (
            self.db.query(UserChecklistProgressModel)
            .filter(
                UserChecklistProgressModel.user_id == user_id,
                UserChecklistProgressModel.checklist_item_id.in_(item_ids),
            )
            .all()
        )
        return {row.checklist_item_id: row for row in rows}

    def _build_detail(self, checklist: ChecklistModel, user_id: str) -> ChecklistDetail:
        items = sorted(checklist.items, key=lambda item: item.order_index)
        progress = self._progress_by_item(user_id, [item.id for item in items])

        item_infos = []
        for item in items:
            row = progress.get(item.id)
            done = bool(row and row.is_completed)
            item_infos.append(
                checklist_item_to_info(
                    item,
                    completed=done,
                    completed_at=row.completed_at if done else None,
                )
            )

        completed = sum(1 for info in item_infos if info.completed)
        return ChecklistDetail(
            id=checklist.id,
            title=checklist.title,
            description=checklist.description,
            disaster_type=checklist.disaster_type,
            total_items=len(item_infos),
            completed_items=completed,
            completion_percentage=completion_percentage(completed, len(item_infos)),
            items=item_infos,
        )

    def list_checklists(self, user_id: str) -> List[ChecklistSummary]:
        """List published checklists with the user's completion counts."""
        checklists = (
            self.db.query(ChecklistModel)
            .filter(ChecklistModel.is_published.is_(True))
            .order_by(ChecklistModel.created_at.asc())
            .all()
        )
        summaries = []
        for checklist in checklists:
            detail = self._build_detail(checklist, user_id)
            summaries.append(ChecklistSummary(**detail.model_dump(exclude={"items"})))
        return summaries

    def get_checklist_by_type(self, disaster_type: str, user_id: str) -> ChecklistDetail:
        """Read the published checklist for a disaster type.

        Raises:
            ChecklistNotFoundError: If no published checklist has this type.
        """
        checklist = (
            self.db.query(ChecklistModel)
            .filter(
                ChecklistModel.disaster_type == disaster_type,
                ChecklistModel.is_published.is_(True),
            )
            .order_by(ChecklistModel.created_at.asc())
            .first()
        )
        if checklist is None:
            raise ChecklistNotFoundError(disaster_type)
        return self._build_detail(checklist, user_id)

    def set_item_completion(
        self, user_id: str, item_id: str, completed: bool
    ) -> ToggleItemResponse:
        """Mark a checklist item completed or not completed for a user.

        The first time an essential item is completed, ESSENTIAL_ITEM_POINTS
        are awarded; unchecking and checking again awards nothing more.

        Raises:
            ChecklistItemNotFoundError: If the item does not exist or its
                checklist is unpublished.
        """
        item = (
            self.db.query(ChecklistItemModel)
            .join(ChecklistModel, ChecklistModel.id == ChecklistItemModel.checklist_id)
            .filter(
                ChecklistItemModel.id == item_id,
                ChecklistModel.is_published.is_(True),
            )
            .first()
        )
        if item is None:
            raise ChecklistItemNotFoundError(item_id)

        row = (
            self.db.query(UserChecklistProgressModel)
            .filter(
                UserChecklistProgressModel.user_id == user_id,
                UserChecklistProgressModel.checklist_item_id == item_id,
            )
            .first()
        )
        if row is None:
            row = UserChecklistProgressModel(
                user_id=user_id,
                checklist_item_id=item_id,
                is_completed=False,
            )
            self.db.add(row)

        row.is_completed = completed
        row.completed_at = datetime.now(pytz.utc).isoformat() if completed else None

        points = 0
        if completed and item.is_essential and row.points_awarded_at is None:
            points = ESSENTIAL_ITEM_POINTS
            row.points_awarded_at = row.completed_at
        self.db.flush()

        total_points = self.gamification.award_points(user_id, points)
        new_badges = self.gamification.evaluate_badges(user_id) if completed else []
        self.db.commit()

        detail = self._build_detail(item.checklist, user_id)
        logger.info(
            "User %s set checklist item %s completed=%s (+%d points)",
            user_id, item_id, completed, points,
        )
        return ToggleItemResponse(
            item=checklist_item_to_info(
                item, completed=completed, completed_at=row.completed_at
            ),
            checklist_id=item.checklist_id,
            points_awarded=points,
            total_points=total_points,
            completion_percentage=detail.completion_percentage,
            new_badges=new_badges,
        )

    def create_checklist(
        self, req: CreateChecklistRequest, created_by: Optional[str] = None
    ) -> ChecklistDetail:
        checklist = ChecklistModel(
            title=req.title,
            description=req.description,
            disaster_type=req.disaster_type,
            is_published=req.is_published,
            created_by=created_by,
        )
        for position, item in enumerate(req.items):
            checklist.items.append(
                ChecklistItemModel(
                    item_text=item.item_text,
                    category=item.category,
                    is_essential=item.is_essential,
                    order_index=item.order_index if item.order_index is not None else position,
                )
            )
        self.db.add(checklist)
        self.db.commit()
        self.db.refresh(checklist)
        logger.info("Created checklist '%s' with %d items", checklist.title, len(req.items))
        return self._build_detail(checklist, created_by or "")

    def delete_checklist(self, checklist_id: str) -> None:
        checklist = (
            self.db.query(ChecklistModel).filter(ChecklistModel.id == checklist_id).first()
        )
        if checklist is None:
            raise ChecklistNotFoundError(checklist_id)
        item_ids = [item.id for item in checklist.items]
        if item_ids:
            self.db.query(UserChecklistProgressModel).filter(
                UserChecklistProgressModel.checklist_item_id.in_(item_ids)
            ).delete(synchronize_session=False)
        self.db.delete(checklist)
        self.db.commit()
        logger.info("Deleted checklist: %s", checklist_id)
