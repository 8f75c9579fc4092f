"""Shared type aliases used across request and response schemas."""

from typing import Literal

DisasterType = Literal[
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
]

UserRole = Literal["student", "teacher", "admin"]

AnswerLetter = Literal["A", "B", "C", "D"]
