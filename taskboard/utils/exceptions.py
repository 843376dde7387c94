"""Custom exceptions for the taskboard backend"""

from typing import Optional


class TaskboardError(Exception):
    """Base exception for taskboard. Carries the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        if status_code is not None:
            self.status_code = status_code
        self.message = message
        super().__init__(message)


class ValidationFailure(TaskboardError):
    """Missing or malformed input"""
    status_code = 400


class AuthenticationFailure(TaskboardError):
    """Missing, invalid or expired token"""
    status_code = 401


class InvalidCredentials(TaskboardError):
    """Login rejected. Same message whether the email or the password was wrong."""
    status_code = 400

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class AuthorizationFailure(TaskboardError):
    """Authenticated, but wrong role or not the owner"""
    status_code = 403


class NotFound(TaskboardError):
    """Referenced account or task does not exist"""
    status_code = 404


class Conflict(TaskboardError):
    """Duplicate email"""
    status_code = 400


class AlreadyExists(Conflict):
    """Registration for an email that is already taken"""

    def __init__(self, message: str = "User already exists"):
        super().__init__(message)


class EmailConflict(Conflict):
    """Email update collides with another account"""

    def __init__(self, message: str = "Email already in use"):
        super().__init__(message)


class StoreError(TaskboardError):
    """Unexpected document store failure"""
    status_code = 500


class ConfigError(TaskboardError):
    """Configuration error"""
    pass
