"""Quiz database models.

A quiz belongs to a lesson and owns an ordered list of multiple-choice
questions. Every submission is stored as a quiz attempt.
"""

from sqlalchemy import JSON, Boolean, Column, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from config import DEFAULT_PASSING_SCORE, DEFAULT_QUIZ_POINTS
from .base import Base, new_id, utc_now_iso


class QuizModel(Base):
    __tablename__ = "quizzes"

    id = Column(String, primary_key=True, index=True, default=new_id)
    lesson_id = Column(
        String, ForeignKey("lessons.id", ondelete="CASCADE"), index=True, nullable=False
    )
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    passing_score = Column(Integer, default=DEFAULT_PASSING_SCORE)  # percentage 0-100
    points_reward = Column(Integer, default=DEFAULT_QUIZ_POINTS)
    time_limit_minutes = Column(Integer, nullable=True)
    is_published = Column(Boolean, default=True)
    created_at = Column(String, nullable=False, default=utc_now_iso)
    updated_at = Column(String, nullable=False, default=utc_now_iso, onupdate=utc_now_iso)

    lesson = relationship("LessonModel", back_populates="quizzes")
    questions = relationship(
        "QuizQuestionModel",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="QuizQuestionModel.order_index",
    )


class QuizQuestionModel(Base):
    __tablename__ = "quiz_questions"

    id = Column(String, primary_key=True, index=True, default=new_id)
    quiz_id = Column(
        String, ForeignKey("quizzes.id", ondelete="CASCADE"), index=True, nullable=False
    )
    question_text = Column(Text, nullable=False)
    option_a = Column(String, nullable=False)
    option_b = Column(String, nullable=False)
    option_c = Column(String, nullable=True)
    option_d = Column(String, nullable=True)
    correct_answer = Column(String(1), nullable=False)  # 'A'..'D'
    explanation = Column(Text, nullable=True)
    order_index = Column(Integer, nullable=False)
    created_at = Column(String, nullable=False, default=utc_now_iso)

    quiz = relationship("QuizModel", back_populates="questions")


class QuizAttemptModel(Base):
    __tablename__ = "quiz_attempts"

    id = Column(String, primary_key=True, index=True, default=new_id)
    user_id = Column(
        String, ForeignKey("profiles.id", ondelete="CASCADE"), index=True, nullable=False
    )
    quiz_id = Column(
        String, ForeignKey("quizzes.id", ondelete="CASCADE"), index=True, nullable=False
    )
    score = Column(Integer, nullable=False)
    total_questions = Column(Integer, nullable=False)
    percentage = Column(Float, nullable=False)
    answers = Column(JSON, default=dict)  # question id -> selected letter
    time_taken_seconds = Column(Integer, nullable=True)
    passed = Column(Boolean, nullable=False, default=False)
    points_awarded = Column(Integer, nullable=False, default=0)
    completed_at = Column(String, nullable=False, default=utc_now_iso, index=True)
