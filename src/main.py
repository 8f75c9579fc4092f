"""Command-line entry point for loading demo content.

Usage:
    python src/main.py seed    # add demo lessons, checklists and badges
    python src/main.py reset   # drop all tables, then seed

Seeding is idempotent: lessons and checklists whose title already exists and
badges whose name already exists are skipped.
"""

import logging
import sys
from typing import List

from sqlalchemy.orm import Session

from core.database import SessionLocal, reset_db
from core.logging_config import setup_logging
from models.checklist import ChecklistModel
from models.gamification import BadgeModel
from models.lesson import LessonModel
from schemas.checklist import ChecklistItemCreate, CreateChecklistRequest
from schemas.lesson import CreateLessonRequest
from schemas.quiz import CreateQuizRequest, QuestionCreate
from utils.checklist_manager import ChecklistManager
from utils.gamification_manager import GamificationManager
from utils.lesson_manager import LessonManager
from utils.quiz_manager import QuizManager

logger = logging.getLogger(__name__)


DEMO_LESSONS = [
    {
        "lesson": CreateLessonRequest(
            title="Earthquake Basics: Drop, Cover, Hold On",
            description="What to do during the first seconds of an earthquake.",
            content=(
                "When the ground starts shaking, DROP to your hands and knees, take COVER "
                "under a sturdy desk or table, and HOLD ON until the shaking stops. Stay "
                "away from windows and heavy furniture that can fall. Do not run outside "
                "while the shaking continues."
            ),
            disaster_type="earthquake",
            difficulty_level=1,
        ),
        "quiz": CreateQuizRequest(
            title="Earthquake Basics Quiz",
            questions=[
                QuestionCreate(
                    question_text="What is the first thing to do when an earthquake starts?",
                    option_a="Run outside",
                    option_b="Drop to your hands and knees",
                    option_c="Stand in a doorway",
                    option_d="Call a friend",
                    correct_answer="B",
                    explanation="Dropping down keeps you from being knocked over.",
                ),
                QuestionCreate(
                    question_text="Where should you take cover indoors?",
                    option_a="Under a sturdy table",
                    option_b="Next to a window",
                    option_c="Beside a tall bookshelf",
                    option_d="In an elevator",
                    correct_answer="A",
                    explanation="A sturdy table protects you from falling objects.",
                ),
                QuestionCreate(
                    question_text="When is it safe to stop holding on?",
                    option_a="After ten seconds",
                    option_b="When the shaking stops",
                    correct_answer="B",
                ),
            ],
        ),
    },
    {
        "lesson": CreateLessonRequest(
            title="Fire Safety at Home",
            description="Smoke alarms, escape routes and what to do if clothes catch fire.",
            content=(
                "Test smoke alarms every month. Plan two ways out of every room and agree "
                "on a meeting place outside. Stay low under smoke. If your clothes catch "
                "fire: stop, drop and roll."
            ),
            disaster_type="fire",
            difficulty_level=1,
        ),
        "quiz": CreateQuizRequest(
            title="Fire Safety Quiz",
            questions=[
                QuestionCreate(
                    question_text="How often should smoke alarms be tested?",
                    option_a="Every month",
                    option_b="Every five years",
                    option_c="Never",
                    correct_answer="A",
                ),
                QuestionCreate(
                    question_text="What should you do if your clothes catch fire?",
                    option_a="Run for help",
                    option_b="Stop, drop and roll",
                    option_c="Open a window",
                    correct_answer="B",
                    explanation="Running feeds the flames with oxygen.",
                ),
            ],
        ),
    },
    {
        "lesson": CreateLessonRequest(
            title="Flood Awareness",
            description="Understanding flood warnings and staying out of floodwater.",
            content=(
                "Move to higher ground when a flood warning is issued. Never walk or drive "
                "through floodwater: fifteen centimetres of moving water can knock you "
                "down. Keep important documents in a waterproof container."
            ),
            disaster_type="flood",
            difficulty_level=2,
        ),
        "quiz": CreateQuizRequest(
            title="Flood Awareness Quiz",
            questions=[
                QuestionCreate(
                    question_text="Is it safe to walk through moving floodwater?",
                    option_a="Yes, if it is below the knee",
                    option_b="No, even shallow moving water can knock you down",
                    correct_answer="B",
                ),
                QuestionCreate(
                    question_text="Where should you go during a flood warning?",
                    option_a="The basement",
                    option_b="Higher ground",
                    option_c="The nearest river bank",
                    correct_answer="B",
                ),
            ],
        ),
    },
    {
        "lesson": CreateLessonRequest(
            title="Tornado Shelter Basics",
            description="Finding the safest place when a tornado warning is issued.",
            content=(
                "Go to a basement or an interior room on the lowest floor without windows. "
                "Cover your head and neck. Mobile homes do not offer protection; leave "
                "for a sturdy shelter in advance."
            ),
            disaster_type="tornado",
            difficulty_level=2,
        ),
        "quiz": CreateQuizRequest(
            title="Tornado Shelter Quiz",
            questions=[
                QuestionCreate(
                    question_text="Which room is safest during a tornado?",
                    option_a="A top-floor bedroom",
                    option_b="An interior room on the lowest floor",
                    option_c="A room with large windows",
                    correct_answer="B",
                ),
                QuestionCreate(
                    question_text="What part of your body should you protect first?",
                    option_a="Head and neck",
                    option_b="Feet",
                    correct_answer="A",
                ),
            ],
        ),
    },
]


DEMO_CHECKLISTS = [
    CreateChecklistRequest(
        title="Earthquake Emergency Kit",
        description="Supplies and steps to get ready before an earthquake.",
        disaster_type="earthquake",
        items=[
            ChecklistItemCreate(item_text="Water, 4 litres per person per day for 3 days", category="supplies", is_essential=True),
            ChecklistItemCreate(item_text="First aid kit", category="supplies", is_essential=True),
            ChecklistItemCreate(item_text="Flashlight with spare batteries", category="supplies", is_essential=True),
            ChecklistItemCreate(item_text="Secure heavy furniture to walls", category="home"),
            ChecklistItemCreate(item_text="Agree on a family meeting point", category="plan"),
        ],
    ),
    CreateChecklistRequest(
        title="Fire Preparedness",
        description="Reduce fire risk and plan your escape.",
        disaster_type="fire",
        items=[
            ChecklistItemCreate(item_text="Install smoke alarms on every level", category="home", is_essential=True),
            ChecklistItemCreate(item_text="Keep a fire extinguisher in the kitchen", category="home", is_essential=True),
            ChecklistItemCreate(item_text="Practise a home escape plan twice a year", category="plan"),
            ChecklistItemCreate(item_text="Keep exits clear of clutter", category="home"),
        ],
    ),
    CreateChecklistRequest(
        title="Flood Readiness",
        description="Protect your household and documents from floodwater.",
        disaster_type="flood",
        items=[
            ChecklistItemCreate(item_text="Store documents in a waterproof container", category="supplies", is_essential=True),
            ChecklistItemCreate(item_text="Know your evacuation route to higher ground", category="plan", is_essential=True),
            ChecklistItemCreate(item_text="Move valuables above floor level", category="home"),
            ChecklistItemCreate(item_text="Sign up for local flood alerts", category="plan"),
        ],
    ),
    CreateChecklistRequest(
        title="Tornado Safety",
        description="Be ready to shelter quickly.",
        disaster_type="tornado",
        items=[
            ChecklistItemCreate(item_text="Identify the safest room in your home", category="plan", is_essential=True),
            ChecklistItemCreate(item_text="Keep a weather radio with batteries", category="supplies", is_essential=True),
            ChecklistItemCreate(item_text="Keep helmets or cushions in the shelter room", category="supplies"),
        ],
    ),
]


DEMO_BADGES = [
    {
        "name": "First Steps",
        "description": "Complete your first lesson.",
        "requirements": {"lessons_completed": 1},
    },
    {
        "name": "Quiz Whiz",
        "description": "Pass five quizzes.",
        "requirements": {"quizzes_passed": 5},
    },
    {
        "name": "Prepared Household",
        "description": "Finish a whole preparedness checklist.",
        "requirements": {"checklists_completed": 1},
    },
    {
        "name": "Quake Ready",
        "description": "Complete every earthquake lesson.",
        "requirements": {"disaster_type": "earthquake"},
    },
    {
        "name": "Century Club",
        "description": "Earn 100 points.",
        "points_threshold": 100,
    },
    {
        "name": "Preparedness Hero",
        "description": "Master three disaster types.",
        "requirements": {"disaster_types_mastered": 3},
    },
]


def seed_lessons(db: Session) -> int:
    lesson_manager = LessonManager(db)
    quiz_manager = QuizManager(db)
    existing = {title for (title,) in db.query(LessonModel.title).all()}
    created = 0
    for entry in DEMO_LESSONS:
        lesson_req = entry["lesson"]
        if lesson_req.title in existing:
            logger.info("Skipping existing lesson '%s'", lesson_req.title)
            continue
        lesson = lesson_manager.create_lesson(lesson_req)
        quiz_manager.create_quiz(lesson.id, entry["quiz"])
        created += 1
    return created


def seed_checklists(db: Session) -> int:
    checklist_manager = ChecklistManager(db)
    existing = {title for (title,) in db.query(ChecklistModel.title).all()}
    created = 0
    for checklist_req in DEMO_CHECKLISTS:
        if checklist_req.title in existing:
            logger.info("Skipping existing checklist '%s'", checklist_req.title)
            continue
        checklist_manager.create_checklist(checklist_req)
        created += 1
    return created


def seed_badges(db: Session) -> int:
    gamification_manager = GamificationManager(db)
    existing = {name for (name,) in db.query(BadgeModel.name).all()}
    created = 0
    for badge in DEMO_BADGES:
        if badge["name"] in existing:
            logger.info("Skipping existing badge '%s'", badge["name"])
            continue
        gamification_manager.create_badge(**badge)
        created += 1
    return created


def seed(db: Session) -> List[int]:
    """Load the demo content set.

    Returns:
        Numbers of lessons, checklists and badges created.
    """
    counts = [seed_lessons(db), seed_checklists(db), seed_badges(db)]
    logger.info(
        "Seed finished: %d lessons, %d checklists, %d badges created", *counts
    )
    return counts


def main() -> None:
    """Main entry point."""
    setup_logging()

    command = sys.argv[1] if len(sys.argv) > 1 else "seed"
    if command not in ("seed", "reset"):
        print(f"Unknown command '{command}'. Usage: python src/main.py [seed|reset]")
        sys.exit(2)

    if command == "reset":
        logger.warning("Dropping and recreating all tables")
        reset_db()

    with SessionLocal() as db:
        seed(db)


if __name__ == "__main__":
    main()
