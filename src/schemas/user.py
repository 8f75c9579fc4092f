"""User schema definitions.

This module defines the User data model and the request/response payloads of
the authentication endpoints.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from schemas.others import UserRole


class User(BaseModel):
    """Internal representation of a user profile, including the password hash."""

    user_id: str = Field(description="The unique identifier for the user.")
    username: str
    email: str
    password_hash: str = Field(description="bcrypt hash, never returned to clients.")
    full_name: str
    role: UserRole = "student"
    grade_level: Optional[str] = None
    school_name: Optional[str] = None
    created_at: str
    updated_at: str

    def public_dict(self) -> Dict[str, Any]:
        data = self.model_dump()
        data.pop("password_hash", None)
        return data


class UserPublic(BaseModel):
    """User profile without credentials."""

    user_id: str
    username: str
    email: str
    full_name: str
    role: UserRole
    grade_level: Optional[str] = None
    school_name: Optional[str] = None
    created_at: str
    updated_at: str


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=64)
    email: str = Field(min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=8)
    full_name: str = Field(min_length=1)
    role: str = Field(default="student", description="'student', 'teacher' or 'admin'")
    grade_level: Optional[str] = None
    school_name: Optional[str] = None
    admin_token: Optional[str] = Field(
        default=None,
        description="Required when registering a teacher or admin account.",
    )


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    user: UserPublic
    token: str
    token_type: str = "bearer"


class CurrentUserResponse(BaseModel):
    user: UserPublic


class UpdateProfileRequest(BaseModel):
    """Fields a user may change on their own profile. Omitted fields are kept."""

    full_name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = Field(default=None, pattern=r"^[^@\s]+@[^@\s]+$")
    grade_level: Optional[str] = None
    school_name: Optional[str] = None
