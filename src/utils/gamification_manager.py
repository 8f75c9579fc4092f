"""Points, levels and badges.

This module owns the gamification layer: the per-user points upsert, the
progress statistics badges are judged against, badge evaluation and level
computation.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import DISASTER_TYPES, LEVELS
from core.exceptions import BadgeAlreadyExistsError, BadgeNotFoundError, ValidationError
from models.checklist import ChecklistItemModel, ChecklistModel
from models.gamification import BadgeModel, UserBadgeModel, UserPointsModel
from models.lesson import LessonModel
from models.progress import UserChecklistProgressModel, UserProgressModel
from models.quiz import QuizAttemptModel, QuizModel
from schemas.badge import BadgeInfo
from utils.converters import badge_to_info

logger = logging.getLogger(__name__)

# Requirement keys compared as "actual count >= required count"
COUNT_REQUIREMENTS = (
    "lessons_completed",
    "quizzes_passed",
    "checklist_items_completed",
    "checklists_completed",
    "disaster_types_mastered",
)


@dataclass
class ProgressStats:
    """Completion counters for one user."""

    lessons_completed: int = 0
    quizzes_passed: int = 0
    checklist_items_completed: int = 0
    checklists_completed: int = 0
    lessons_completed_by_type: Dict[str, int] = field(default_factory=dict)
    lessons_total_by_type: Dict[str, int] = field(default_factory=dict)
    completed_checklist_ids: Set[str] = field(default_factory=set)

    @property
    def mastered_types(self) -> Set[str]:
        """Disaster types whose published lessons are all completed."""
        return {
            disaster_type
            for disaster_type, total in self.lessons_total_by_type.items()
            if total > 0 and self.lessons_completed_by_type.get(disaster_type, 0) >= total
        }

    @property
    def disaster_types_mastered(self) -> int:
        return len(self.mastered_types)


def validate_requirements(requirements: Dict[str, Any]) -> None:
    """Reject badge requirements that could never be evaluated.

    Raises:
        ValidationError: On unknown keys, non-integer counts or an unknown
            disaster type.
    """
    for key, value in requirements.items():
        if key == "disaster_type":
            if value not in DISASTER_TYPES:
                raise ValidationError(f"Unknown disaster type in requirements: {value}")
            continue
        if key not in COUNT_REQUIREMENTS:
            raise ValidationError(f"Unsupported badge requirement: {key}")
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValidationError(f"Requirement '{key}' must be a non-negative integer")


def requirements_met(
    points_threshold: Optional[int],
    requirements: Optional[Dict[str, Any]],
    stats: ProgressStats,
    total_points: int,
) -> bool:
    """Decide whether a badge's criteria all hold.

    A badge without any criterion is never earned automatically.

    Args:
        points_threshold: Minimum total points, or None.
        requirements: Requirement mapping stored on the badge.
        stats: The user's progress counters.
        total_points: The user's current points total.

    Returns:
        True when every stated criterion is satisfied.
    """
    requirements = requirements or {}
    has_criteria = False

    if points_threshold is not None:
        has_criteria = True
        if total_points < points_threshold:
            return False

    disaster_type = requirements.get("disaster_type")
    for key, required in requirements.items():
        if key == "disaster_type":
            continue
        if key not in COUNT_REQUIREMENTS:
            logger.warning("Ignoring badge with unsupported requirement '%s'", key)
            return False
        if isinstance(required, bool) or not isinstance(required, int):
            logger.warning("Ignoring badge with non-integer requirement '%s'", key)
            return False
        has_criteria = True
        if key == "lessons_completed" and disaster_type:
            actual = stats.lessons_completed_by_type.get(disaster_type, 0)
        else:
            actual = getattr(stats, key)
        if actual < required:
            return False

    if disaster_type and "lessons_completed" not in requirements:
        # A bare disaster type means every lesson of that type
        has_criteria = True
        if disaster_type not in stats.mastered_types:
            return False

    return has_criteria


def level_for_points(
    total_points: int, levels: List[Tuple[int, str]] = LEVELS
) -> Tuple[str, Optional[int], int]:
    """Map a points total to (level name, next level threshold, progress %).

    Progress is measured from the current level's minimum to the next
    level's minimum, and is 100 at the top level.
    """
    ordered = sorted(levels)
    current_index = 0
    for index, (minimum, _) in enumerate(ordered):
        if total_points >= minimum:
            current_index = index

    current_min, current_name = ordered[current_index]
    if current_index + 1 >= len(ordered):
        return current_name, None, 100

    next_min = ordered[current_index + 1][0]
    span = next_min - current_min
    progress = int((total_points - current_min) * 100 / span) if span > 0 else 100
    return current_name, next_min, max(0, min(progress, 100))


class GamificationManager:
    """Manages points, badges and progress statistics using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize GamificationManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    # --- Points ---

    def get_points(self, user_id: str) -> int:
        row = (
            self.db.query(UserPointsModel)
            .filter(UserPointsModel.user_id == user_id)
            .first()
        )
        return row.total_points if row else 0

    def award_points(self, user_id: str, amount: int) -> int:
        """Add points to a user's total, creating the row on first award.

        The change is flushed, not committed; callers commit together with
        the completion event that earned the points.

        Args:
            user_id: The user receiving the points.
            amount: Non-negative number of points.

        Returns:
            The new points total.

        Raises:
            ValidationError: If amount is negative.
        """
        if amount < 0:
            raise ValidationError("Points amount must be non-negative")

        row = (
            self.db.query(UserPointsModel)
            .filter(UserPointsModel.user_id == user_id)
            .first()
        )
        if row is None:
            row = UserPointsModel(user_id=user_id, total_points=amount)
            self.db.add(row)
        else:
            row.total_points = (row.total_points or 0) + amount
        self.db.flush()

        if amount:
            logger.info("Awarded %d points to user %s (total %d)", amount, user_id, row.total_points)
        return row.total_points

    # --- Statistics ---

    def collect_stats(self, user_id: str) -> ProgressStats:
        """Gather the completion counters for a user.

        Only published lessons and checklists count.
        """
        stats = ProgressStats()

        completed_by_type = (
            self.db.query(LessonModel.disaster_type, func.count(UserProgressModel.id))
            .join(LessonModel, LessonModel.id == UserProgressModel.lesson_id)
            .filter(
                UserProgressModel.user_id == user_id,
                UserProgressModel.is_completed.is_(True),
                LessonModel.is_published.is_(True),
            )
            .group_by(LessonModel.disaster_type)
            .all()
        )
        stats.lessons_completed_by_type = {t: n for t, n in completed_by_type}
        stats.lessons_completed = sum(stats.lessons_completed_by_type.values())

        totals_by_type = (
            self.db.query(LessonModel.disaster_type, func.count(LessonModel.id))
            .filter(LessonModel.is_published.is_(True))
            .group_by(LessonModel.disaster_type)
            .all()
        )
        stats.lessons_total_by_type = {t: n for t, n in totals_by_type}

        stats.quizzes_passed = (
            self.db.query(func.count(func.distinct(QuizAttemptModel.quiz_id)))
            .select_from(QuizAttemptModel)
            .join(QuizModel, QuizModel.id == QuizAttemptModel.quiz_id)
            .join(LessonModel, LessonModel.id == QuizModel.lesson_id)
            .filter(
                QuizAttemptModel.user_id == user_id,
                QuizAttemptModel.passed.is_(True),
                QuizModel.is_published.is_(True),
                LessonModel.is_published.is_(True),
            )
            .scalar()
            or 0
        )

        stats.checklist_items_completed = (
            self.db.query(func.count(UserChecklistProgressModel.id))
            .select_from(UserChecklistProgressModel)
            .join(
                ChecklistItemModel,
                ChecklistItemModel.id == UserChecklistProgressModel.checklist_item_id,
            )
            .join(ChecklistModel, ChecklistModel.id == ChecklistItemModel.checklist_id)
            .filter(
                UserChecklistProgressModel.user_id == user_id,
                UserChecklistProgressModel.is_completed.is_(True),
                ChecklistModel.is_published.is_(True),
            )
            .scalar()
            or 0
        )

        stats.completed_checklist_ids = self.completed_checklist_ids(user_id)
        stats.checklists_completed = len(stats.completed_checklist_ids)
        return stats

    def completed_checklist_ids(self, user_id: str) -> Set[str]:
        """IDs of published, non-empty checklists with every item completed."""
        item_counts = dict(
            self.db.query(ChecklistItemModel.checklist_id, func.count(ChecklistItemModel.id))
            .join(ChecklistModel, ChecklistModel.id == ChecklistItemModel.checklist_id)
            .filter(ChecklistModel.is_published.is_(True))
            .group_by(ChecklistItemModel.checklist_id)
            .all()
        )
        done_counts = dict(
            self.db.query(ChecklistItemModel.checklist_id, func.count(UserChecklistProgressModel.id))
            .join(
                UserChecklistProgressModel,
                UserChecklistProgressModel.checklist_item_id == ChecklistItemModel.id,
            )
            .filter(
                UserChecklistProgressModel.user_id == user_id,
                UserChecklistProgressModel.is_completed.is_(True),
            )
            .group_by(ChecklistItemModel.checklist_id)
            .all()
        )
        return {
            checklist_id
            for checklist_id, total in item_counts.items()
            if total > 0 and done_counts.get(checklist_id, 0) >= total
        }

    # --- Badges ---

    def evaluate_badges(self, user_id: str) -> List[BadgeInfo]:
        """Grant every badge the user now qualifies for but does not hold.

        Changes are flushed, not committed.

        Returns:
            The newly earned badges.
        """
        held = {
            badge_id
            for (badge_id,) in self.db.query(UserBadgeModel.badge_id)
            .filter(UserBadgeModel.user_id == user_id)
            .all()
        }
        candidates = [
            badge for badge in self.db.query(BadgeModel).all() if badge.id not in held
        ]
        if not candidates:
            return []

        stats = self.collect_stats(user_id)
        total_points = self.get_points(user_id)

        earned = []
        for badge in candidates:
            if not requirements_met(badge.points_threshold, badge.requirements, stats, total_points):
                continue
            user_badge = UserBadgeModel(user_id=user_id, badge_id=badge.id)
            self.db.add(user_badge)
            self.db.flush()
            logger.info("User %s earned badge '%s'", user_id, badge.name)
            earned.append(badge_to_info(badge, user_badge))
        return earned

    def list_badges(self, user_id: Optional[str] = None) -> List[BadgeInfo]:
        """List all badges, flagged as earned for the given user."""
        owned: Dict[str, UserBadgeModel] = {}
        if user_id:
            owned = {
                ub.badge_id: ub
                for ub in self.db.query(UserBadgeModel)
                .filter(UserBadgeModel.user_id == user_id)
                .all()
            }
        badges = (
            self.db.query(BadgeModel)
            .order_by(BadgeModel.points_threshold.is_(None), BadgeModel.points_threshold, BadgeModel.name)
            .all()
        )
        return [badge_to_info(b, owned.get(b.id)) for b in badges]

    def list_user_badges(self, user_id: str) -> List[Tuple[BadgeModel, UserBadgeModel]]:
        return (
            self.db.query(BadgeModel, UserBadgeModel)
            .join(UserBadgeModel, UserBadgeModel.badge_id == BadgeModel.id)
            .filter(UserBadgeModel.user_id == user_id)
            .order_by(UserBadgeModel.earned_at.desc())
            .all()
        )

    def create_badge(
        self,
        name: str,
        description: Optional[str] = None,
        icon_url: Optional[str] = None,
        points_threshold: Optional[int] = None,
        requirements: Optional[Dict[str, Any]] = None,
    ) -> BadgeInfo:
        """Create a badge definition.

        Raises:
            ValidationError: If the requirements cannot be evaluated.
            BadgeAlreadyExistsError: If a badge with this name exists.
        """
        requirements = requirements or {}
        validate_requirements(requirements)

        if self.db.query(BadgeModel).filter(BadgeModel.name == name).first():
            raise BadgeAlreadyExistsError(f"Badge '{name}' already exists")

        model = BadgeModel(
            name=name,
            description=description,
            icon_url=icon_url,
            points_threshold=points_threshold,
            requirements=requirements,
        )
        try:
            self.db.add(model)
            self.db.commit()
            self.db.refresh(model)
        except IntegrityError as e:
            self.db.rollback()
            raise BadgeAlreadyExistsError(f"Badge '{name}' already exists") from e

        logger.info("Created badge: %s", name)
        return badge_to_info(model)

    def delete_badge(self, badge_id: str) -> None:
        model = self.db.query(BadgeModel).filter(BadgeModel.id == badge_id).first()
        if not model:
            raise BadgeNotFoundError(badge_id)
        self.db.query(UserBadgeModel).filter(UserBadgeModel.badge_id == badge_id).delete()
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted badge: %s", model.name)
