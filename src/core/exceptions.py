"""Custom exception classes for the Preparedness Portal.

This module defines application-specific exceptions following Google Python
Style Guide.
"""


class PortalError(Exception):
    """Base exception for all Preparedness Portal errors."""

    pass


class UserNotFoundError(PortalError):
    """Raised when a requested user cannot be found."""

    def __init__(self, user_ref: str):
        """Initialize the exception.

        Args:
            user_ref: The user ID or username that was not found.
        """
        self.user_ref = user_ref
        super().__init__(f"User '{user_ref}' not found")


class UserAlreadyExistsError(PortalError):
    """Raised when trying to create a user that already exists."""

    pass


class LessonNotFoundError(PortalError):
    """Raised when a requested lesson cannot be found."""

    def __init__(self, lesson_id: str):
        """Initialize the exception.

        Args:
            lesson_id: The ID of the lesson that was not found.
        """
        self.lesson_id = lesson_id
        super().__init__(f"Lesson '{lesson_id}' not found")


class QuizNotFoundError(PortalError):
    """Raised when a requested quiz cannot be found."""

    def __init__(self, quiz_id: str):
        self.quiz_id = quiz_id
        super().__init__(f"Quiz '{quiz_id}' not found")


class QuizAlreadyExistsError(PortalError):
    """Raised when a lesson already has a quiz."""

    pass


class ChecklistNotFoundError(PortalError):
    """Raised when a requested checklist cannot be found."""

    def __init__(self, checklist_ref: str):
        """Initialize the exception.

        Args:
            checklist_ref: The checklist ID or disaster type that was not found.
        """
        self.checklist_ref = checklist_ref
        super().__init__(f"Checklist '{checklist_ref}' not found")


class ChecklistItemNotFoundError(PortalError):
    """Raised when a requested checklist item cannot be found."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Checklist item '{item_id}' not found")


class BadgeNotFoundError(PortalError):
    """Raised when a requested badge cannot be found."""

    def __init__(self, badge_id: str):
        self.badge_id = badge_id
        super().__init__(f"Badge '{badge_id}' not found")


class BadgeAlreadyExistsError(PortalError):
    """Raised when a badge with the same name already exists."""

    pass


class ConfigurationError(PortalError):
    """Raised when there is a configuration error."""

    pass


class ValidationError(PortalError):
    """Raised when data validation fails."""

    pass
