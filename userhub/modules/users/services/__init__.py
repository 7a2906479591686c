"""
Business Logic Services

Services contain business logic and orchestrate repository calls.
"""

from .mapper import EntityMapper
from .user_service import UserService, PageRequest, UserPage, ReplaceOutcome

__all__ = [
    "EntityMapper",
    "UserService",
    "PageRequest",
    "UserPage",
    "ReplaceOutcome",
]
