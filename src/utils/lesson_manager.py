"""Lesson management module.

This module handles listing, grouping and persistence of lessons, and reading
the quiz attached to a lesson.
"""

import logging
from typing import Dict, List, Optional, Set

from sqlalchemy import func
from sqlalchemy.orm import Session

from config import DEFAULT_LESSON_POINTS, DISASTER_TYPES
from core.exceptions import LessonNotFoundError
from models.checklist import ChecklistModel
from models.lesson import LessonModel
from models.progress import UserProgressModel
from models.quiz import QuizAttemptModel, QuizModel
from schemas.lesson import (
    CreateLessonRequest,
    DisasterTypeInfo,
    LessonDetail,
    LessonGroup,
    LessonInfo,
    UpdateLessonRequest,
)
from utils.converters import lesson_to_detail, lesson_to_info

logger = logging.getLogger(__name__)


class LessonManager:
    """Manages lesson operations using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize LessonManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def _completed_lesson_ids(self, user_id: Optional[str]) -> Set[str]:
        if not user_id:
            return set()
        rows = (
            self.db.query(UserProgressModel.lesson_id)
            .filter(
                UserProgressModel.user_id == user_id,
                UserProgressModel.is_completed.is_(True),
            )
            .all()
        )
        return {lesson_id for (lesson_id,) in rows}

    def get_lesson_model(self, lesson_id: str, include_unpublished: bool = False) -> LessonModel:
        """Fetch a lesson row.

        Raises:
            LessonNotFoundError: If the lesson does not exist, or is
                unpublished and include_unpublished is False.
        """
        query = self.db.query(LessonModel).filter(LessonModel.id == lesson_id)
        if not include_unpublished:
            query = query.filter(LessonModel.is_published.is_(True))
        model = query.first()
        if model is None:
            raise LessonNotFoundError(lesson_id)
        return model

    def list_lessons(
        self,
        disaster_type: Optional[str] = None,
        include_unpublished: bool = False,
        user_id: Optional[str] = None,
    ) -> List[LessonInfo]:
        """List lessons, oldest first.

        Args:
            disaster_type: Optional disaster type filter.
            include_unpublished: Whether drafts are included (staff only).
            user_id: When given, each lesson carries the user's completion flag.

        Returns:
            List of LessonInfo objects.
        """
        query = self.db.query(LessonModel)
        if not include_unpublished:
            query = query.filter(LessonModel.is_published.is_(True))
        if disaster_type:
            query = query.filter(LessonModel.disaster_type == disaster_type)
        models = query.order_by(LessonModel.created_at.asc()).all()

        completed = self._completed_lesson_ids(user_id)
        return [lesson_to_info(m, completed=m.id in completed) for m in models]

    def group_by_disaster_type(self, user_id: Optional[str] = None) -> List[LessonGroup]:
        """Group published lessons by disaster type.

        Groups follow the order of DISASTER_TYPES; types without lessons are
        left out.
        """
        groups: Dict[str, List[LessonInfo]] = {}
        for lesson in self.list_lessons(user_id=user_id):
            groups.setdefault(lesson.disaster_type, []).append(lesson)

        return [
            LessonGroup(
                disaster_type=disaster_type,
                lesson_count=len(groups[disaster_type]),
                completed_count=sum(1 for lesson in groups[disaster_type] if lesson.completed),
                lessons=groups[disaster_type],
            )
            for disaster_type in DISASTER_TYPES
            if disaster_type in groups
        ]

    def get_quiz_for_lesson(
        self, lesson_id: str, include_unpublished: bool = False
    ) -> Optional[QuizModel]:
        query = self.db.query(QuizModel).filter(QuizModel.lesson_id == lesson_id)
        if not include_unpublished:
            query = query.filter(QuizModel.is_published.is_(True))
        return query.first()

    def get_lesson_detail(
        self,
        lesson_id: str,
        user_id: Optional[str] = None,
        include_unpublished: bool = False,
    ) -> LessonDetail:
        """Read a lesson together with its quiz (answers hidden).

        Raises:
            LessonNotFoundError: If the lesson is missing or not visible.
        """
        model = self.get_lesson_model(lesson_id, include_unpublished=include_unpublished)
        quiz = self.get_quiz_for_lesson(lesson_id, include_unpublished=include_unpublished)
        completed = lesson_id in self._completed_lesson_ids(user_id)
        return lesson_to_detail(model, quiz=quiz, completed=completed)

    def create_lesson(self, req: CreateLessonRequest, created_by: Optional[str] = None) -> LessonDetail:
        data = req.model_dump()
        if data["points_reward"] is None:
            data["points_reward"] = DEFAULT_LESSON_POINTS
        model = LessonModel(**data, created_by=created_by)
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Created lesson '%s' (%s)", model.title, model.disaster_type)
        return lesson_to_detail(model)

    def update_lesson(self, lesson_id: str, req: UpdateLessonRequest) -> LessonDetail:
        """Apply the fields set on the request to a lesson.

        Raises:
            LessonNotFoundError: If the lesson does not exist.
        """
        model = self.get_lesson_model(lesson_id, include_unpublished=True)
        for key, value in req.model_dump(exclude_unset=True).items():
            setattr(model, key, value)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Updated lesson: %s", lesson_id)
        quiz = self.get_quiz_for_lesson(lesson_id, include_unpublished=True)
        return lesson_to_detail(model, quiz=quiz)

    def delete_lesson(self, lesson_id: str) -> None:
        model = self.get_lesson_model(lesson_id, include_unpublished=True)
        # Progress and attempt rows are not covered by the ORM cascade
        self.db.query(UserProgressModel).filter(UserProgressModel.lesson_id == lesson_id).delete()
        quiz_ids = [quiz.id for quiz in model.quizzes]
        if quiz_ids:
            self.db.query(QuizAttemptModel).filter(
                QuizAttemptModel.quiz_id.in_(quiz_ids)
            ).delete(synchronize_session=False)
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted lesson: %s", lesson_id)

    def disaster_type_catalog(self) -> List[DisasterTypeInfo]:
        """Every disaster type with its published lesson count and checklist flag."""
        lesson_counts = dict(
            self.db.query(LessonModel.disaster_type, func.count(LessonModel.id))
            .filter(LessonModel.is_published.is_(True))
            .group_by(LessonModel.disaster_type)
            .all()
        )
        checklist_types = {
            disaster_type
            for (disaster_type,) in self.db.query(ChecklistModel.disaster_type)
            .filter(ChecklistModel.is_published.is_(True))
            .distinct()
            .all()
        }
        return [
            DisasterTypeInfo(
                disaster_type=disaster_type,
                lesson_count=lesson_counts.get(disaster_type, 0),
                has_checklist=disaster_type in checklist_types,
            )
            for disaster_type in DISASTER_TYPES
        ]
