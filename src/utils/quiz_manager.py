"""Quiz management and scoring.

This module creates quizzes, grades submitted attempts and records the
resulting lesson progress and points.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Sequence

import pytz
from sqlalchemy.orm import Session

from config import DEFAULT_PASSING_SCORE, DEFAULT_QUIZ_POINTS
from core.exceptions import QuizAlreadyExistsError, QuizNotFoundError, ValidationError
from models.lesson import LessonModel
from models.progress import UserProgressModel
from models.quiz import QuizAttemptModel, QuizModel, QuizQuestionModel
from schemas.quiz import (
    CreateQuizRequest,
    QuestionFeedback,
    QuizAttemptInfo,
    QuizDetail,
    QuizResult,
)
from utils.converters import attempt_to_info, quiz_to_detail
from utils.gamification_manager import GamificationManager
from utils.lesson_manager import LessonManager

logger = logging.getLogger(__name__)

VALID_LETTERS = ("A", "B", "C", "D")


def option_letters(question: QuizQuestionModel) -> List[str]:
    """Letters of the non-empty options of a question."""
    options = (question.option_a, question.option_b, question.option_c, question.option_d)
    return [letter for letter, text in zip(VALID_LETTERS, options) if text]


@dataclass
class QuizScore:
    score: int
    total: int
    percentage: float
    feedback: List[QuestionFeedback]


def normalize_answers(
    questions: Sequence[QuizQuestionModel], answers: Dict[str, str]
) -> Dict[str, str]:
    """Validate and upper-case submitted answers.

    Every question must be answered with the letter of one of its options,
    and no answer may refer to a question outside the quiz.

    Raises:
        ValidationError: If the answers do not fit the quiz.
    """
    question_ids = {q.id for q in questions}
    unknown = set(answers) - question_ids
    if unknown:
        raise ValidationError(f"Answers reference unknown questions: {sorted(unknown)}")

    normalized = {}
    for question in questions:
        raw = answers.get(question.id)
        if raw is None or not str(raw).strip():
            raise ValidationError(f"Question '{question.id}' was not answered")
        letter = str(raw).strip().upper()
        if letter not in option_letters(question):
            raise ValidationError(f"Invalid answer '{raw}' for question '{question.id}'")
        normalized[question.id] = letter
    return normalized


def score_answers(
    questions: Sequence[QuizQuestionModel], answers: Dict[str, str]
) -> QuizScore:
    """Count the answers that match each question's correct answer.

    Args:
        questions: The quiz questions.
        answers: Selected letter keyed by question id.

    Returns:
        QuizScore with the raw score, percentage and per-question feedback.

    Raises:
        ValidationError: If the quiz has no questions.
    """
    total = len(questions)
    if total == 0:
        raise ValidationError("Quiz has no questions")

    score = 0
    feedback = []
    for question in sorted(questions, key=lambda q: q.order_index):
        selected = answers.get(question.id)
        is_correct = selected == question.correct_answer
        if is_correct:
            score += 1
        feedback.append(
            QuestionFeedback(
                question_id=question.id,
                selected_answer=selected,
                correct_answer=question.correct_answer,
                is_correct=is_correct,
                explanation=question.explanation,
            )
        )

    return QuizScore(
        score=score,
        total=total,
        percentage=score * 100.0 / total,
        feedback=feedback,
    )


def is_passing(percentage: float, passing_score: Optional[int]) -> bool:
    if passing_score is None:
        passing_score = DEFAULT_PASSING_SCORE
    return percentage >= passing_score


class QuizManager:
    """Manages quizzes and quiz attempts using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize QuizManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db
        self.lessons = LessonManager(db)
        self.gamification = GamificationManager(db)

    def get_quiz_model(self, quiz_id: str, include_unpublished: bool = False) -> QuizModel:
        """Fetch a quiz row whose lesson is visible.

        Raises:
            QuizNotFoundError: If the quiz or its lesson is missing or unpublished.
        """
        query = (
            self.db.query(QuizModel)
            .join(LessonModel, LessonModel.id == QuizModel.lesson_id)
            .filter(QuizModel.id == quiz_id)
        )
        if not include_unpublished:
            query = query.filter(
                QuizModel.is_published.is_(True),
                LessonModel.is_published.is_(True),
            )
        model = query.first()
        if model is None:
            raise QuizNotFoundError(quiz_id)
        return model

    def get_quiz_detail(self, quiz_id: str) -> QuizDetail:
        return quiz_to_detail(self.get_quiz_model(quiz_id, include_unpublished=True))

    def create_quiz(self, lesson_id: str, req: CreateQuizRequest) -> QuizDetail:
        """Attach a quiz with its questions to a lesson.

        Raises:
            LessonNotFoundError: If the lesson does not exist.
            QuizAlreadyExistsError: If the lesson already has a quiz.
        """
        lesson = self.lessons.get_lesson_model(lesson_id, include_unpublished=True)
        if self.lessons.get_quiz_for_lesson(lesson_id, include_unpublished=True):
            raise QuizAlreadyExistsError(f"Lesson '{lesson_id}' already has a quiz")

        quiz = QuizModel(
            lesson_id=lesson.id,
            title=req.title,
            description=req.description,
            passing_score=(
                req.passing_score if req.passing_score is not None else DEFAULT_PASSING_SCORE
            ),
            points_reward=(
                req.points_reward if req.points_reward is not None else DEFAULT_QUIZ_POINTS
            ),
            time_limit_minutes=req.time_limit_minutes,
            is_published=req.is_published,
        )
        for position, question in enumerate(req.questions):
            quiz.questions.append(
                QuizQuestionModel(
                    question_text=question.question_text,
                    option_a=question.option_a,
                    option_b=question.option_b,
                    option_c=question.option_c,
                    option_d=question.option_d,
                    correct_answer=question.correct_answer,
                    explanation=question.explanation,
                    order_index=(
                        question.order_index if question.order_index is not None else position
                    ),
                )
            )
        self.db.add(quiz)
        self.db.commit()
        self.db.refresh(quiz)
        logger.info("Created quiz '%s' with %d questions for lesson %s",
                    quiz.title, len(req.questions), lesson_id)
        return quiz_to_detail(quiz)

    def delete_quiz(self, quiz_id: str) -> None:
        model = self.get_quiz_model(quiz_id, include_unpublished=True)
        self.db.query(QuizAttemptModel).filter(QuizAttemptModel.quiz_id == quiz_id).delete()
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted quiz: %s", quiz_id)

    def _record_progress(
        self, user_id: str, lesson_id: str, passed: bool, time_spent: int
    ) -> bool:
        """Upsert lesson progress after an attempt.

        Completion is sticky: a failing attempt never clears it.

        Returns:
            True if this attempt completed the lesson for the first time.
        """
        progress = (
            self.db.query(UserProgressModel)
            .filter(
                UserProgressModel.user_id == user_id,
                UserProgressModel.lesson_id == lesson_id,
            )
            .first()
        )
        if progress is None:
            progress = UserProgressModel(
                user_id=user_id,
                lesson_id=lesson_id,
                is_completed=False,
                time_spent_seconds=0,
            )
            self.db.add(progress)

        progress.time_spent_seconds = (progress.time_spent_seconds or 0) + time_spent
        newly_completed = passed and not progress.is_completed
        if newly_completed:
            progress.is_completed = True
            progress.completed_at = datetime.now(pytz.utc).isoformat()
        self.db.flush()
        return newly_completed

    def submit_attempt(
        self,
        user_id: str,
        quiz_id: str,
        answers: Dict[str, str],
        time_taken_seconds: Optional[int] = None,
    ) -> QuizResult:
        """Grade an attempt and record its consequences.

        Stores the attempt, upserts lesson progress, and on the first pass of
        the lesson awards the lesson and quiz points and evaluates badges.

        Args:
            user_id: The submitting user.
            quiz_id: The quiz being answered.
            answers: Selected letter keyed by question id.
            time_taken_seconds: Client-measured time spent on the quiz.

        Returns:
            QuizResult with score, pass/fail, points and feedback.

        Raises:
            QuizNotFoundError: If the quiz is missing or not published.
            ValidationError: If the answers do not fit the quiz.
        """
        quiz = self.get_quiz_model(quiz_id)
        questions = list(quiz.questions)
        if not questions:
            raise ValidationError("Quiz has no questions")

        normalized = normalize_answers(questions, answers)
        result = score_answers(questions, normalized)
        passed = is_passing(result.percentage, quiz.passing_score)

        newly_completed = self._record_progress(
            user_id, quiz.lesson_id, passed, time_taken_seconds or 0
        )

        points_awarded = 0
        if newly_completed:
            lesson = quiz.lesson
            points_awarded = (lesson.points_reward or 0) + (quiz.points_reward or 0)
        total_points = self.gamification.award_points(user_id, points_awarded)

        attempt = QuizAttemptModel(
            user_id=user_id,
            quiz_id=quiz.id,
            score=result.score,
            total_questions=result.total,
            percentage=result.percentage,
            answers=normalized,
            time_taken_seconds=time_taken_seconds,
            passed=passed,
            points_awarded=points_awarded,
        )
        self.db.add(attempt)
        self.db.flush()

        new_badges = self.gamification.evaluate_badges(user_id) if passed else []
        self.db.commit()

        logger.info(
            "User %s scored %d/%d (%.1f%%) on quiz %s, passed=%s",
            user_id, result.score, result.total, result.percentage, quiz_id, passed,
        )
        return QuizResult(
            attempt_id=attempt.id,
            quiz_id=quiz.id,
            lesson_id=quiz.lesson_id,
            score=result.score,
            total_questions=result.total,
            percentage=round(result.percentage, 1),
            passing_score=quiz.passing_score,
            passed=passed,
            points_awarded=points_awarded,
            total_points=total_points,
            feedback=result.feedback,
            new_badges=new_badges,
        )

    def list_attempts(self, user_id: str, quiz_id: str) -> List[QuizAttemptInfo]:
        """List a user's attempts on a quiz, newest first."""
        self.get_quiz_model(quiz_id)
        models = (
            self.db.query(QuizAttemptModel)
            .filter(
                QuizAttemptModel.user_id == user_id,
                QuizAttemptModel.quiz_id == quiz_id,
            )
            .order_by(QuizAttemptModel.completed_at.desc())
            .all()
        )
        return [attempt_to_info(m) for m in models]
