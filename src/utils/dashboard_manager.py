"""Dashboard aggregation.

Builds the per-user progress summary: points and level, completion counts,
progress by disaster type, activity streak, recent activity and badges.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

import pytz
from sqlalchemy.orm import Session

from config import DISASTER_TYPES, ESSENTIAL_ITEM_POINTS, RECENT_ACTIVITY_LIMIT
from models.checklist import ChecklistItemModel
from models.progress import UserChecklistProgressModel
from models.quiz import QuizAttemptModel, QuizModel
from schemas.dashboard import ActivityEntry, DashboardResponse, DisasterProgress
from schemas.user import User
from utils.gamification_manager import GamificationManager, ProgressStats, level_for_points

logger = logging.getLogger(__name__)


def _to_date(iso_timestamp: str) -> date:
    return datetime.fromisoformat(iso_timestamp).astimezone(pytz.utc).date()


def compute_streak(activity_days: Iterable[date], today: date) -> int:
    """Count consecutive active days ending today or yesterday.

    A streak that last saw activity yesterday is still alive; anything older
    is broken.
    """
    days = set(activity_days)
    if today in days:
        cursor = today
    elif today - timedelta(days=1) in days:
        cursor = today - timedelta(days=1)
    else:
        return 0

    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def progress_by_type(stats: ProgressStats) -> List[DisasterProgress]:
    """Per disaster type lesson completion, for types that have lessons."""
    results = []
    for disaster_type in DISASTER_TYPES:
        total = stats.lessons_total_by_type.get(disaster_type, 0)
        if total == 0:
            continue
        completed = min(stats.lessons_completed_by_type.get(disaster_type, 0), total)
        results.append(
            DisasterProgress(
                disaster_type=disaster_type,
                completed=completed,
                total=total,
                percentage=int(completed * 100 / total + 0.5),
                mastered=completed >= total,
            )
        )
    return results


class DashboardManager:
    """Aggregates dashboard data for a user using SQLAlchemy."""

    def __init__(self, db: Session):
        self.db = db
        self.gamification = GamificationManager(db)

    def _quiz_activity(self, user_id: str) -> List[ActivityEntry]:
        rows = (
            self.db.query(QuizAttemptModel, QuizModel.title)
            .join(QuizModel, QuizModel.id == QuizAttemptModel.quiz_id)
            .filter(QuizAttemptModel.user_id == user_id)
            .all()
        )
        entries = []
        for attempt, title in rows:
            verb = "Passed" if attempt.passed else "Attempted"
            entries.append(
                ActivityEntry(
                    kind="quiz",
                    description=f"{verb} '{title}' ({attempt.score}/{attempt.total_questions})",
                    points=attempt.points_awarded,
                    occurred_at=attempt.completed_at,
                )
            )
        return entries

    def _checklist_activity(self, user_id: str) -> List[ActivityEntry]:
        """Checked items; points show only on the check that earned them."""
        rows = (
            self.db.query(UserChecklistProgressModel, ChecklistItemModel)
            .join(
                ChecklistItemModel,
                ChecklistItemModel.id == UserChecklistProgressModel.checklist_item_id,
            )
            .filter(
                UserChecklistProgressModel.user_id == user_id,
                UserChecklistProgressModel.is_completed.is_(True),
                UserChecklistProgressModel.completed_at.isnot(None),
            )
            .all()
        )
        return [
            ActivityEntry(
                kind="checklist_item",
                description=f"Checked off '{item.item_text}'",
                points=(
                    ESSENTIAL_ITEM_POINTS
                    if progress.points_awarded_at == progress.completed_at
                    else 0
                ),
                occurred_at=progress.completed_at,
            )
            for progress, item in rows
        ]

    def _badge_activity(self, user_id: str) -> List[ActivityEntry]:
        return [
            ActivityEntry(
                kind="badge",
                description=f"Earned '{badge.name}' badge",
                occurred_at=user_badge.earned_at,
            )
            for badge, user_badge in self.gamification.list_user_badges(user_id)
        ]

    def build_dashboard(
        self,
        user: User,
        today: Optional[date] = None,
        activity_limit: int = RECENT_ACTIVITY_LIMIT,
    ) -> DashboardResponse:
        """Build the dashboard summary for a user.

        Args:
            user: The current user.
            today: Reference date for the streak, defaults to the UTC date.
            activity_limit: Maximum number of recent activity entries.

        Returns:
            DashboardResponse for the user.
        """
        user_id = user.user_id
        stats = self.gamification.collect_stats(user_id)
        total_points = self.gamification.get_points(user_id)
        level, next_level_points, level_progress = level_for_points(total_points)
        badges = self.gamification.list_badges(user_id)

        quiz_activity = self._quiz_activity(user_id)
        checklist_activity = self._checklist_activity(user_id)
        activity = quiz_activity + checklist_activity + self._badge_activity(user_id)
        activity.sort(key=lambda entry: entry.occurred_at, reverse=True)

        if today is None:
            today = datetime.now(pytz.utc).date()
        streak = compute_streak(
            (_to_date(entry.occurred_at) for entry in quiz_activity + checklist_activity),
            today,
        )

        return DashboardResponse(
            full_name=user.full_name,
            role=user.role,
            total_points=total_points,
            level=level,
            next_level_points=next_level_points,
            level_progress=level_progress,
            lessons_completed=stats.lessons_completed,
            checklists_finished=stats.checklists_completed,
            badges_earned=sum(1 for badge in badges if badge.earned),
            badges_total=len(badges),
            streak_days=streak,
            progress_by_type=progress_by_type(stats),
            recent_activity=activity[:activity_limit],
            badges=badges,
        )
