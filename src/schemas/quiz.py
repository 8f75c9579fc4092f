"""Quiz schema definitions.

Public quiz payloads never include correct answers or explanations; those are
only revealed in the feedback of a submitted attempt.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from schemas.badge import BadgeInfo
from schemas.others import AnswerLetter


class QuestionCreate(BaseModel):
    question_text: str = Field(min_length=1)
    option_a: str = Field(min_length=1)
    option_b: str = Field(min_length=1)
    option_c: Optional[str] = None
    option_d: Optional[str] = None
    correct_answer: AnswerLetter
    explanation: Optional[str] = None
    order_index: Optional[int] = Field(
        default=None, description="Position in the quiz; defaults to list order."
    )

    @model_validator(mode="after")
    def check_correct_answer_present(self):
        options = {"A": self.option_a, "B": self.option_b, "C": self.option_c, "D": self.option_d}
        if not options[self.correct_answer]:
            raise ValueError(
                f"correct_answer '{self.correct_answer}' refers to an empty option"
            )
        return self


class CreateQuizRequest(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    passing_score: Optional[int] = Field(
        default=None,
        ge=0,
        le=100,
        description="Percentage required to pass. Defaults to the configured passing score.",
    )
    points_reward: Optional[int] = Field(default=None, ge=0)
    time_limit_minutes: Optional[int] = Field(default=None, ge=1)
    is_published: bool = True
    questions: List[QuestionCreate] = Field(min_length=1)


class QuestionPublic(BaseModel):
    id: str
    question_text: str
    option_a: str
    option_b: str
    option_c: Optional[str] = None
    option_d: Optional[str] = None
    order_index: int


class QuestionDetail(QuestionPublic):
    correct_answer: AnswerLetter
    explanation: Optional[str] = None


class QuizPublic(BaseModel):
    id: str
    lesson_id: str
    title: str
    description: Optional[str] = None
    passing_score: int
    points_reward: int
    time_limit_minutes: Optional[int] = None
    questions: List[QuestionPublic]


class QuizDetail(QuizPublic):
    is_published: bool
    questions: List[QuestionDetail]


class SubmitQuizRequest(BaseModel):
    answers: Dict[str, str] = Field(
        description="Selected option letter keyed by question id."
    )
    time_taken_seconds: Optional[int] = Field(default=None, ge=0)


class QuestionFeedback(BaseModel):
    question_id: str
    selected_answer: Optional[str] = None
    correct_answer: str
    is_correct: bool
    explanation: Optional[str] = None


class QuizResult(BaseModel):
    attempt_id: str
    quiz_id: str
    lesson_id: str
    score: int
    total_questions: int
    percentage: float
    passing_score: int
    passed: bool
    points_awarded: int
    total_points: int
    feedback: List[QuestionFeedback]
    new_badges: List[BadgeInfo] = Field(default_factory=list)


class QuizAttemptInfo(BaseModel):
    id: str
    quiz_id: str
    score: int
    total_questions: int
    percentage: float
    passed: bool
    points_awarded: int
    time_taken_seconds: Optional[int] = None
    completed_at: str
