from .base import Base
from .user import UserModel
from .lesson import LessonModel
from .quiz import QuizModel, QuizQuestionModel, QuizAttemptModel
from .checklist import ChecklistModel, ChecklistItemModel
from .progress import UserProgressModel, UserChecklistProgressModel
from .gamification import UserPointsModel, BadgeModel, UserBadgeModel
