"""Points and badge database models."""

from sqlalchemy import JSON, Column, ForeignKey, Integer, String, UniqueConstraint

from .base import Base, new_id, utc_now_iso


class UserPointsModel(Base):
    """Running points total, one row per user."""

    __tablename__ = "user_points"

    id = Column(String, primary_key=True, index=True, default=new_id)
    user_id = Column(
        String,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        unique=True,
        index=True,
        nullable=False,
    )
    total_points = Column(Integer, nullable=False, default=0)
    updated_at = Column(String, nullable=False, default=utc_now_iso, onupdate=utc_now_iso)


class BadgeModel(Base):
    """Badge definition database model."""

    __tablename__ = "badges"

    id = Column(String, primary_key=True, index=True, default=new_id)
    name = Column(String, unique=True, nullable=False)
    description = Column(String, nullable=True)
    icon_url = Column(String, nullable=True)
    points_threshold = Column(Integer, nullable=True)
    requirements = Column(JSON, default=dict)  # e.g. {"lessons_completed": 5}
    created_at = Column(String, nullable=False, default=utc_now_iso)


class UserBadgeModel(Base):
    __tablename__ = "user_badges"
    __table_args__ = (
        UniqueConstraint("user_id", "badge_id", name="uq_user_badges_user_badge"),
    )

    id = Column(String, primary_key=True, index=True, default=new_id)
    user_id = Column(
        String, ForeignKey("profiles.id", ondelete="CASCADE"), index=True, nullable=False
    )
    badge_id = Column(
        String, ForeignKey("badges.id", ondelete="CASCADE"), index=True, nullable=False
    )
    earned_at = Column(String, nullable=False, default=utc_now_iso)
