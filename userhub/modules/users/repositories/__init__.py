"""
Data Access Layer (Repositories)

Repositories handle all storage interactions.
"""

from .user_repository import UserRepository, InMemoryUserRepository, DatabaseUserRepository

__all__ = [
    "UserRepository",
    "InMemoryUserRepository",
    "DatabaseUserRepository",
]
