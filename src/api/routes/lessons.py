"""Lesson routes.

This module handles HTTP endpoints for browsing lessons per disaster type,
reading a lesson with its quiz, and staff lesson/quiz authoring.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.auth import get_current_user, require_staff
from config import STAFF_ROLES
from core.dependencies import LessonManagerDep, QuizManagerDep
from core.exceptions import LessonNotFoundError, QuizAlreadyExistsError
from schemas.lesson import (
    CreateLessonRequest,
    DisasterTypeInfo,
    LessonDetail,
    LessonGroup,
    LessonInfo,
    UpdateLessonRequest,
)
from schemas.others import DisasterType
from schemas.quiz import CreateQuizRequest, QuizDetail
from schemas.user import User

router = APIRouter(prefix="/api", tags=["Lesson"])


@router.get("/disaster-types", response_model=List[DisasterTypeInfo], summary="Disaster type catalog")
def list_disaster_types(lesson_manager: LessonManagerDep) -> List[DisasterTypeInfo]:
    """List every disaster type with its lesson count and checklist availability."""
    return lesson_manager.disaster_type_catalog()


@router.get("/lessons", response_model=List[LessonInfo], summary="List lessons")
def list_lessons(
    lesson_manager: LessonManagerDep,
    disaster_type: Optional[DisasterType] = None,
    include_unpublished: bool = False,
    current_user: User = Depends(get_current_user),
) -> List[LessonInfo]:
    """List published lessons, oldest first.

    Args:
        lesson_manager: Injected LessonManager instance.
        disaster_type: Optional disaster type filter.
        include_unpublished: Include drafts; honoured for staff only.
        current_user: Current authenticated user.

    Returns:
        List of LessonInfo objects with the user's completion flags.
    """
    return lesson_manager.list_lessons(
        disaster_type=disaster_type,
        include_unpublished=include_unpublished and current_user.role in STAFF_ROLES,
        user_id=current_user.user_id,
    )


@router.get("/lessons/grouped", response_model=List[LessonGroup], summary="Lessons grouped by disaster type")
def list_lessons_grouped(
    lesson_manager: LessonManagerDep,
    current_user: User = Depends(get_current_user),
) -> List[LessonGroup]:
    return lesson_manager.group_by_disaster_type(user_id=current_user.user_id)


@router.get("/lessons/{lesson_id}", response_model=LessonDetail, summary="Lesson detail")
def get_lesson(
    lesson_id: str,
    lesson_manager: LessonManagerDep,
    current_user: User = Depends(get_current_user),
) -> LessonDetail:
    """Get a lesson with its quiz; correct answers are not included.

    Raises:
        HTTPException: 404 if the lesson is missing or unpublished.
    """
    try:
        return lesson_manager.get_lesson_detail(
            lesson_id,
            user_id=current_user.user_id,
            include_unpublished=current_user.role in STAFF_ROLES,
        )
    except LessonNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post(
    "/lessons",
    response_model=LessonDetail,
    status_code=status.HTTP_201_CREATED,
    summary="Create a lesson",
)
def create_lesson(
    req: CreateLessonRequest,
    lesson_manager: LessonManagerDep,
    current_user: User = Depends(require_staff),
) -> LessonDetail:
    return lesson_manager.create_lesson(req, created_by=current_user.user_id)


@router.patch("/lessons/{lesson_id}", response_model=LessonDetail, summary="Update a lesson")
def update_lesson(
    lesson_id: str,
    req: UpdateLessonRequest,
    lesson_manager: LessonManagerDep,
    current_user: User = Depends(require_staff),
) -> LessonDetail:
    try:
        return lesson_manager.update_lesson(lesson_id, req)
    except LessonNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/lessons/{lesson_id}", summary="Delete a lesson")
def delete_lesson(
    lesson_id: str,
    lesson_manager: LessonManagerDep,
    current_user: User = Depends(require_staff),
) -> dict:
    try:
        lesson_manager.delete_lesson(lesson_id)
    except LessonNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"success": True, "message": "Lesson deleted successfully"}


@router.post(
    "/lessons/{lesson_id}/quiz",
    response_model=QuizDetail,
    status_code=status.HTTP_201_CREATED,
    summary="Attach a quiz to a lesson",
)
def create_quiz(
    lesson_id: str,
    req: CreateQuizRequest,
    quiz_manager: QuizManagerDep,
    current_user: User = Depends(require_staff),
) -> QuizDetail:
    """Create the quiz of a lesson, including its questions.

    Raises:
        HTTPException: 404 if the lesson does not exist, 409 if it already
            has a quiz.
    """
    try:
        return quiz_manager.create_quiz(lesson_id, req)
    except LessonNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except QuizAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
