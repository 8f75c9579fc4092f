"""Quiz routes.

This module handles HTTP endpoints for submitting quiz attempts and reading
attempt history.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.auth import get_current_user, require_staff
from core.dependencies import QuizManagerDep
from core.exceptions import QuizNotFoundError, ValidationError
from schemas.quiz import QuizAttemptInfo, QuizDetail, QuizResult, SubmitQuizRequest
from schemas.user import User

router = APIRouter(prefix="/api/quizzes", tags=["Quiz"])


@router.get("/{quiz_id}", response_model=QuizDetail, summary="Quiz with answers (staff)")
def get_quiz(
    quiz_id: str,
    quiz_manager: QuizManagerDep,
    current_user: User = Depends(require_staff),
) -> QuizDetail:
    try:
        return quiz_manager.get_quiz_detail(quiz_id)
    except QuizNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("/{quiz_id}/attempts", response_model=QuizResult, summary="Submit a quiz attempt")
def submit_attempt(
    quiz_id: str,
    req: SubmitQuizRequest,
    quiz_manager: QuizManagerDep,
    current_user: User = Depends(get_current_user),
) -> QuizResult:
    """Grade the submitted answers and record the attempt.

    Args:
        quiz_id: The quiz being answered.
        req: Answers keyed by question id and the time taken.
        quiz_manager: Injected QuizManager instance.
        current_user: Current authenticated user.

    Returns:
        QuizResult with score, pass/fail, points and per-question feedback.

    Raises:
        HTTPException: 404 if the quiz is not found, 400 if the answers do
            not fit the quiz.
    """
    try:
        return quiz_manager.submit_attempt(
            current_user.user_id,
            quiz_id,
            req.answers,
            time_taken_seconds=req.time_taken_seconds,
        )
    except QuizNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/{quiz_id}/attempts", response_model=List[QuizAttemptInfo], summary="Own attempts")
def list_attempts(
    quiz_id: str,
    quiz_manager: QuizManagerDep,
    current_user: User = Depends(get_current_user),
) -> List[QuizAttemptInfo]:
    try:
        return quiz_manager.list_attempts(current_user.user_id, quiz_id)
    except QuizNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/{quiz_id}", summary="Delete a quiz")
def delete_quiz(
    quiz_id: str,
    quiz_manager: QuizManagerDep,
    current_user: User = Depends(require_staff),
) -> dict:
    try:
        quiz_manager.delete_quiz(quiz_id)
    except QuizNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"success": True, "message": "Quiz deleted successfully"}
