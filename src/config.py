"""Configuration module for the Preparedness Portal API.

This module provides centralized configuration management, including directory
paths, database and API server settings, authentication and gamification
defaults. All configuration values can be overridden via environment variables.
"""

import os
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

# Data directory name
DATA_DIR_NAME = os.getenv("DATA_DIR_NAME", "data")
DATA_DIR = ROOT_DIR / DATA_DIR_NAME

# --- Database Configuration ---

DATABASE_URL: str = os.getenv(
    "DATABASE_URL", f"sqlite:///{DATA_DIR}/preparedness.db"
)

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))

# CORS allowed origins (comma-separated list)
# Default includes local development addresses. For production, set via
# CORS_ALLOWED_ORIGINS environment variable.
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,"
    "http://127.0.0.1:3000,http://localhost:8080",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Authentication Configuration ---

JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "your-secret-key-change-in-production")
JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
    os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7))
)

# bcrypt cost factor for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

# Admin token for teacher/admin self-registration (set via ADMIN_TOKEN environment variable)
ADMIN_TOKEN: Optional[str] = os.getenv("ADMIN_TOKEN")

# --- Domain Enumerations ---

DISASTER_TYPES: Tuple[str, ...] = (
    "earthquake",
    "fire",
    "flood",
    "hurricane",
    "tornado",
    "tsunami",
    "wildfire",
    "pandemic",
    "terrorism",
    "other",
)

USER_ROLES: Tuple[str, ...] = ("student", "teacher", "admin")

STAFF_ROLES: Tuple[str, ...] = ("teacher", "admin")

# --- Quiz & Gamification Configuration ---

# Percentage (0-100) a quiz attempt must reach to pass when the quiz does not
# define its own threshold.
DEFAULT_PASSING_SCORE: int = int(os.getenv("DEFAULT_PASSING_SCORE", "70"))

DEFAULT_LESSON_POINTS: int = int(os.getenv("DEFAULT_LESSON_POINTS", "10"))
DEFAULT_QUIZ_POINTS: int = int(os.getenv("DEFAULT_QUIZ_POINTS", "20"))

# Points granted the first time an essential checklist item is completed.
ESSENTIAL_ITEM_POINTS: int = int(os.getenv("ESSENTIAL_ITEM_POINTS", "5"))

# Ordered (minimum points, level name) pairs used by the dashboard.
LEVELS: List[Tuple[int, str]] = [
    (0, "Beginner"),
    (100, "Prepared Learner"),
    (250, "Safety Scout"),
    (500, "Safety Champion"),
    (1000, "Preparedness Hero"),
]

# Maximum number of entries in the dashboard recent activity feed.
RECENT_ACTIVITY_LIMIT: int = int(os.getenv("RECENT_ACTIVITY_LIMIT", "10"))
