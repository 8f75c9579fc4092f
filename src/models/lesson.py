from sqlalchemy import Boolean, Column, Enum, Integer, String, Text
from sqlalchemy.orm import relationship

from config import DEFAULT_LESSON_POINTS, DISASTER_TYPES
from .base import Base, new_id, utc_now_iso


class LessonModel(Base):
    __tablename__ = "lessons"

    id = Column(String, primary_key=True, index=True, default=new_id)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    content = Column(Text, nullable=True)
    disaster_type = Column(
        Enum(*DISASTER_TYPES, name="disaster_type", create_constraint=True),
        index=True,
        nullable=False,
    )
    difficulty_level = Column(Integer, default=1)
    points_reward = Column(Integer, default=DEFAULT_LESSON_POINTS)
    image_url = Column(String, nullable=True)
    video_url = Column(String, nullable=True)
    pdf_url = Column(String, nullable=True)
    simulation_url = Column(String, nullable=True)
    is_published = Column(Boolean, default=True, index=True)
    created_by = Column(String, nullable=True)
    created_at = Column(String, nullable=False, default=utc_now_iso)
    updated_at = Column(String, nullable=False, default=utc_now_iso, onupdate=utc_now_iso)

    quizzes = relationship(
        "QuizModel",
        back_populates="lesson",
        cascade="all, delete-orphan",
    )
