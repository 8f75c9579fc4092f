"""Conversions between SQLAlchemy models and pydantic schemas."""

from typing import Optional

from models.checklist import ChecklistItemModel
from models.gamification import BadgeModel, UserBadgeModel
from models.lesson import LessonModel
from models.quiz import QuizAttemptModel, QuizModel, QuizQuestionModel
from models.user import UserModel
from schemas.badge import BadgeInfo
from schemas.checklist import ChecklistItemInfo
from schemas.lesson import LessonDetail, LessonInfo
from schemas.quiz import (
    QuestionDetail,
    QuestionPublic,
    QuizAttemptInfo,
    QuizDetail,
    QuizPublic,
)
from schemas.user import User, UserPublic


def model_to_user(model: UserModel) -> User:
    return User(
        user_id=model.id,
        username=model.username,
        email=model.email,
        password_hash=model.password_hash,
        full_name=model.full_name,
        role=model.role,
        grade_level=model.grade_level,
        school_name=model.school_name,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def user_to_public(user: User) -> UserPublic:
    return UserPublic(**user.public_dict())


def lesson_to_info(model: LessonModel, completed: bool = False) -> LessonInfo:
    return LessonInfo(
        id=model.id,
        title=model.title,
        description=model.description,
        disaster_type=model.disaster_type,
        difficulty_level=model.difficulty_level or 1,
        points_reward=model.points_reward or 0,
        image_url=model.image_url,
        is_published=bool(model.is_published),
        created_at=model.created_at,
        updated_at=model.updated_at,
        completed=completed,
    )


def lesson_to_detail(
    model: LessonModel,
    quiz: Optional[QuizModel] = None,
    completed: bool = False,
) -> LessonDetail:
    info = lesson_to_info(model, completed=completed)
    return LessonDetail(
        **info.model_dump(),
        content=model.content,
        video_url=model.video_url,
        pdf_url=model.pdf_url,
        simulation_url=model.simulation_url,
        created_by=model.created_by,
        quiz=quiz_to_public(quiz) if quiz is not None else None,
    )


def question_to_public(model: QuizQuestionModel) -> QuestionPublic:
    return QuestionPublic(
        id=model.id,
        question_text=model.question_text,
        option_a=model.option_a,
        option_b=model.option_b,
        option_c=model.option_c,
        option_d=model.option_d,
        order_index=model.order_index,
    )


def quiz_to_public(model: QuizModel) -> QuizPublic:
    """Convert a quiz to its student-facing form (answers hidden)."""
    questions = sorted(model.questions, key=lambda q: q.order_index)
    return QuizPublic(
        id=model.id,
        lesson_id=model.lesson_id,
        title=model.title,
        description=model.description,
        passing_score=model.passing_score,
        points_reward=model.points_reward or 0,
        time_limit_minutes=model.time_limit_minutes,
        questions=[question_to_public(q) for q in questions],
    )


def quiz_to_detail(model: QuizModel) -> QuizDetail:
    questions = sorted(model.questions, key=lambda q: q.order_index)
    return QuizDetail(
        id=model.id,
        lesson_id=model.lesson_id,
        title=model.title,
        description=model.description,
        passing_score=model.passing_score,
        points_reward=model.points_reward or 0,
        time_limit_minutes=model.time_limit_minutes,
        is_published=bool(model.is_published),
        questions=[
            QuestionDetail(
                **question_to_public(q).model_dump(),
                correct_answer=q.correct_answer,
                explanation=q.explanation,
            )
            for q in questions
        ],
    )


def attempt_to_info(model: QuizAttemptModel) -> QuizAttemptInfo:
    return QuizAttemptInfo(
        id=model.id,
        quiz_id=model.quiz_id,
        score=model.score,
        total_questions=model.total_questions,
        percentage=model.percentage,
        passed=bool(model.passed),
        points_awarded=model.points_awarded,
        time_taken_seconds=model.time_taken_seconds,
        completed_at=model.completed_at,
    )


def checklist_item_to_info(
    model: ChecklistItemModel,
    completed: bool = False,
    completed_at: Optional[str] = None,
) -> ChecklistItemInfo:
    return ChecklistItemInfo(
        id=model.id,
        item_text=model.item_text,
        category=model.category,
        is_essential=bool(model.is_essential),
        order_index=model.order_index,
        completed=completed,
        completed_at=completed_at,
    )


def badge_to_info(
    model: BadgeModel, user_badge: Optional[UserBadgeModel] = None
) -> BadgeInfo:
    return BadgeInfo(
        id=model.id,
        name=model.name,
        description=model.description,
        icon_url=model.icon_url,
        points_threshold=model.points_threshold,
        requirements=model.requirements or {},
        earned=user_badge is not None,
        earned_at=user_badge.earned_at if user_badge is not None else None,
    )
