"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes,
building one manager per request around the request-scoped session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from core.database import get_db
from utils import checklist_manager
from utils import dashboard_manager
from utils import gamification_manager
from utils import lesson_manager
from utils import quiz_manager
from utils import user_manager


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_lesson_manager(db: Session = Depends(get_db)) -> lesson_manager.LessonManager:
    """Get LessonManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        LessonManager instance.
    """
    return lesson_manager.LessonManager(db)


def get_quiz_manager(db: Session = Depends(get_db)) -> quiz_manager.QuizManager:
    """Get QuizManager instance with request-scoped DB session."""
    return quiz_manager.QuizManager(db)


def get_checklist_manager(
    db: Session = Depends(get_db),
) -> checklist_manager.ChecklistManager:
    """Get ChecklistManager instance with request-scoped DB session."""
    return checklist_manager.ChecklistManager(db)


def get_gamification_manager(
    db: Session = Depends(get_db),
) -> gamification_manager.GamificationManager:
    """Get GamificationManager instance with request-scoped DB session."""
    return gamification_manager.GamificationManager(db)


def get_dashboard_manager(
    db: Session = Depends(get_db),
) -> dashboard_manager.DashboardManager:
    """Get DashboardManager instance with request-scoped DB session."""
    return dashboard_manager.DashboardManager(db)


# Type aliases for dependency injection
UserManagerDep = Annotated[
    user_manager.UserManager, Depends(get_user_manager)
]
LessonManagerDep = Annotated[
    lesson_manager.LessonManager, Depends(get_lesson_manager)
]
QuizManagerDep = Annotated[
    quiz_manager.QuizManager, Depends(get_quiz_manager)
]
ChecklistManagerDep = Annotated[
    checklist_manager.ChecklistManager, Depends(get_checklist_manager)
]
GamificationManagerDep = Annotated[
    gamification_manager.GamificationManager, Depends(get_gamification_manager)
]
DashboardManagerDep = Annotated[
    dashboard_manager.DashboardManager, Depends(get_dashboard_manager)
]
