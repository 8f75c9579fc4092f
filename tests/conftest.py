"""Shared fixtures: in-memory database, API client and authenticated users."""

import os
import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parent.parent / "src"
sys.path.insert(0, str(SRC_DIR))

# Must be set before any application module reads config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_TOKEN"] = "test-admin-token"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import app
from core.database import get_db
from models.base import Base

ADMIN_TOKEN = "test-admin-token"
PASSWORD = "password123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def register(client, username, role="student", admin_token=None, **extra):
    payload = {
        "username": username,
        "email": f"{username}@example.com",
        "password": PASSWORD,
        "full_name": username.title(),
        "role": role,
    }
    if admin_token is not None:
        payload["admin_token"] = admin_token
    payload.update(extra)
    return client.post("/api/auth/register", json=payload)


def login_headers(client, username, role="student"):
    """Register a user and return bearer headers for them."""
    admin_token = ADMIN_TOKEN if role in ("teacher", "admin") else None
    response = register(client, username, role=role, admin_token=admin_token)
    assert response.status_code == 201, response.text
    response = client.post(
        "/api/auth/login", json={"username": username, "password": PASSWORD}
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def student_headers(client):
    return login_headers(client, "student1")


@pytest.fixture
def teacher_headers(client):
    return login_headers(client, "teacher1", role="teacher")


@pytest.fixture
def admin_headers(client):
    return login_headers(client, "admin1", role="admin")


def make_lesson(client, headers, **overrides):
    payload = {
        "title": "Earthquake Basics",
        "description": "Drop, cover and hold on.",
        "content": "When the ground shakes, drop, cover and hold on.",
        "disaster_type": "earthquake",
    }
    payload.update(overrides)
    response = client.post("/api/lessons", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def make_quiz(client, headers, lesson_id, **overrides):
    """Attach a three-question quiz whose answers are B, A, C."""
    payload = {
        "title": "Earthquake Quiz",
        "questions": [
            {
                "question_text": "First thing to do when shaking starts?",
                "option_a": "Run outside",
                "option_b": "Drop to the ground",
                "option_c": "Stand by a window",
                "correct_answer": "B",
                "explanation": "Dropping keeps you from falling.",
            },
            {
                "question_text": "Where should you take cover?",
                "option_a": "Under a sturdy table",
                "option_b": "Next to a bookshelf",
                "correct_answer": "A",
            },
            {
                "question_text": "When can you stop holding on?",
                "option_a": "Immediately",
                "option_b": "After five seconds",
                "option_c": "When the shaking stops",
                "correct_answer": "C",
            },
        ],
    }
    payload.update(overrides)
    response = client.post(
        f"/api/lessons/{lesson_id}/quiz", json=payload, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def lesson_with_quiz(client, teacher_headers):
    lesson = make_lesson(client, teacher_headers)
    quiz = make_quiz(client, teacher_headers, lesson["id"])
    return {
        "lesson": lesson,
        "quiz": quiz,
        "question_ids": [q["id"] for q in quiz["questions"]],
    }


def answers_for(question_ids, letters):
    return dict(zip(question_ids, letters))


def make_checklist(client, headers, **overrides):
    """Create a checklist with two essential items and one optional item."""
    payload = {
        "title": "Earthquake Kit",
        "disaster_type": "earthquake",
        "items": [
            {"item_text": "Water for three days", "category": "supplies", "is_essential": True},
            {"item_text": "First aid kit", "category": "supplies", "is_essential": True},
            {"item_text": "Secure bookshelves", "category": "home"},
        ],
    }
    payload.update(overrides)
    response = client.post("/api/checklists", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()
