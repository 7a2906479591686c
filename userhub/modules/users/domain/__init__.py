"""
Domain Models

Pure data model for the user entity and the error taxonomy.
"""

from .user import UserEntity
from .exceptions import (
    UserResourceError,
    BadRequestError,
    UnprocessableEntityError,
    UserNotFoundError,
)

__all__ = [
    "UserEntity",
    "UserResourceError",
    "BadRequestError",
    "UnprocessableEntityError",
    "UserNotFoundError",
]
