"""
User Resource - Exceptions
"""
from typing import Dict, List, Optional

FieldErrors = Dict[str, List[str]]


class UserResourceError(Exception):
    """Base exception for user resource errors"""
    pass


class BadRequestError(UserResourceError):
    """Raised when routing or body data is missing or malformed as a whole"""
    pass


class UnprocessableEntityError(UserResourceError):
    """Raised when input fails field-level validation"""

    def __init__(self, errors: FieldErrors, message: Optional[str] = None):
        self.errors = errors
        super().__init__(message or f"Validation failed for: {', '.join(sorted(errors))}")


class UserNotFoundError(UserResourceError):
    """Raised when no user exists at the requested identifier"""

    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")
