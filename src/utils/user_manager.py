"""User management utilities.

This module provides user management functionality including profile storage,
password hashing and profile updates.
"""

import logging
from typing import List, Optional

import bcrypt
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from config import BCRYPT_ROUNDS
from core.exceptions import UserAlreadyExistsError, UserNotFoundError
from models.user import UserModel
from schemas.user import User
from utils.converters import model_to_user

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _password_bytes(password) -> bytes:
    if isinstance(password, str):
        password_bytes = password.encode("utf-8")
    elif isinstance(password, bytes):
        password_bytes = password
    else:
        password_bytes = str(password).encode("utf-8")
    return password_bytes[:BCRYPT_MAX_BYTES]


class UserManager:
    """Manages user profile persistence and operations using SQLAlchemy."""

    def __init__(self, db: Session, rounds: int = BCRYPT_ROUNDS):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
            rounds: bcrypt cost factor.
        """
        self.db = db
        self.rounds = rounds

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password.

        Returns:
            Hashed password (bcrypt hash string).
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(_password_bytes(password), salt)
        return hashed.decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            plain_password: Plain text password to verify.
            hashed_password: Bcrypt hash string to verify against.

        Returns:
            True if password matches, False otherwise.
        """
        if isinstance(hashed_password, str):
            hash_bytes = hashed_password.encode("utf-8")
        else:
            hash_bytes = hashed_password

        try:
            return bcrypt.checkpw(_password_bytes(plain_password), hash_bytes)
        except ValueError as e:
            # Malformed stored hash
            logger.error("Password verification error: %s", e)
            return False

    def create_user(
        self,
        username: str,
        email: str,
        password: str,
        full_name: str,
        role: str = "student",
        grade_level: Optional[str] = None,
        school_name: Optional[str] = None,
    ) -> User:
        """Create a new user profile.

        Args:
            username: Username for the new user.
            email: Email address, unique across users.
            password: Plain text password.
            full_name: Name shown on the dashboard.
            role: User role ('student', 'teacher' or 'admin').
            grade_level: Optional grade level.
            school_name: Optional school name.

        Returns:
            Created User object.

        Raises:
            UserAlreadyExistsError: If the username or email is already taken.
        """
        existing = (
            self.db.query(UserModel)
            .filter((UserModel.username == username) | (UserModel.email == email))
            .first()
        )
        if existing:
            if existing.username == username:
                raise UserAlreadyExistsError(f"User '{username}' already exists")
            raise UserAlreadyExistsError(f"Email '{email}' is already registered")

        model = UserModel(
            username=username,
            email=email,
            password_hash=self.hash_password(password),
            full_name=full_name,
            role=role,
            grade_level=grade_level,
            school_name=school_name,
        )

        # Handle potential race condition: if two requests check simultaneously,
        # both might pass the check but database unique constraint will catch it
        try:
            self.db.add(model)
            self.db.commit()
            self.db.refresh(model)
        except IntegrityError as e:
            self.db.rollback()
            if "unique" in str(e).lower():
                raise UserAlreadyExistsError(f"User '{username}' already exists") from e
            raise

        logger.info("Created user: %s (%s)", username, role)
        return model_to_user(model)

    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get a user by username.

        Args:
            username: Username to look up.

        Returns:
            User object if found, None otherwise.
        """
        model = self.db.query(UserModel).filter(UserModel.username == username).first()
        if model:
            return model_to_user(model)
        return None

    def get_user_by_id(self, user_id: str) -> User:
        """Get a user by user ID.

        Args:
            user_id: User ID to look up.

        Returns:
            User object.

        Raises:
            UserNotFoundError: If no user has this ID.
        """
        model = self.db.query(UserModel).filter(UserModel.id == user_id).first()
        if model is None:
            raise UserNotFoundError(user_id)
        return model_to_user(model)

    def list_users(self) -> List[User]:
        models = self.db.query(UserModel).order_by(UserModel.created_at).all()
        return [model_to_user(m) for m in models]

    def update_profile(
        self,
        user_id: str,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
        grade_level: Optional[str] = None,
        school_name: Optional[str] = None,
    ) -> User:
        """Update profile fields; arguments left as None are not changed.

        Raises:
            UserNotFoundError: If no user has this ID.
            UserAlreadyExistsError: If the new email belongs to another user.
        """
        model = self.db.query(UserModel).filter(UserModel.id == user_id).first()
        if model is None:
            raise UserNotFoundError(user_id)

        if email is not None and email != model.email:
            taken = (
                self.db.query(UserModel)
                .filter(UserModel.email == email, UserModel.id != user_id)
                .first()
            )
            if taken:
                raise UserAlreadyExistsError(f"Email '{email}' is already registered")
            model.email = email
        if full_name is not None:
            model.full_name = full_name
        if grade_level is not None:
            model.grade_level = grade_level
        if school_name is not None:
            model.school_name = school_name

        self.db.commit()
        self.db.refresh(model)
        logger.info("Updated profile: %s", model.username)
        return model_to_user(model)
