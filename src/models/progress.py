"""User progress database models.

Completion state per user for lessons and for checklist items.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, UniqueConstraint

from .base import Base, new_id


class UserProgressModel(Base):
    """Lesson completion state for one user."""

    __tablename__ = "user_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "lesson_id", name="uq_user_progress_user_lesson"),
    )

    id = Column(String, primary_key=True, index=True, default=new_id)
    user_id = Column(
        String, ForeignKey("profiles.id", ondelete="CASCADE"), index=True, nullable=False
    )
    lesson_id = Column(
        String, ForeignKey("lessons.id", ondelete="CASCADE"), index=True, nullable=False
    )
    is_completed = Column(Boolean, nullable=False, default=False)
    time_spent_seconds = Column(Integer, nullable=False, default=0)
    completed_at = Column(String, nullable=True)  # ISO format string


class UserChecklistProgressModel(Base):
    """Checklist item completion state for one user."""

    __tablename__ = "user_checklist_progress"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "checklist_item_id",
            name="uq_user_checklist_progress_user_item",
        ),
    )

    id = Column(String, primary_key=True, index=True, default=new_id)
    user_id = Column(
        String, ForeignKey("profiles.id", ondelete="CASCADE"), index=True, nullable=False
    )
    checklist_item_id = Column(
        String,
        ForeignKey("checklist_items.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    is_completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(String, nullable=True)  # ISO format string
    # completed_at of the check that earned the essential-item points, set at most once
    points_awarded_at = Column(String, nullable=True)
