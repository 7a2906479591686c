"""
User Domain Model

Pure data model representing a user entity.
"""
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class UserEntity:
    """User domain model. `id` is assigned by the store when left unset."""
    id: Optional[uuid.UUID] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    login: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "UserEntity":
        """Create UserEntity from dictionary (e.g., from database row)."""
        raw_id = data.get("id")
        return cls(
            id=uuid.UUID(str(raw_id)) if raw_id is not None else None,
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            login=data.get("login"),
        )

    def to_dict(self) -> dict:
        """Convert UserEntity to dictionary."""
        return {
            "id": str(self.id) if self.id is not None else None,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "login": self.login,
        }
