"""User profile database model.

This module defines the profile (user account) database model using SQLAlchemy.
"""

from sqlalchemy import Column, Enum, String

from config import USER_ROLES
from .base import Base, new_id, utc_now_iso


class UserModel(Base):
    """User profile database model."""

    __tablename__ = "profiles"

    id = Column(String, primary_key=True, index=True, default=new_id)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    full_name = Column(String, nullable=False)
    role = Column(
        Enum(*USER_ROLES, name="user_role", create_constraint=True),
        nullable=False,
        default="student",
    )
    grade_level = Column(String, nullable=True)
    school_name = Column(String, nullable=True)
    created_at = Column(String, nullable=False, default=utc_now_iso)  # ISO format string
    updated_at = Column(String, nullable=False, default=utc_now_iso, onupdate=utc_now_iso)
