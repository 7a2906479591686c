"""
User Repository

Data access for user entities. `UserRepository` is the contract the service
depends on; two implementations are provided: an in-process store and a SQL
store over `databases`.
"""
import dataclasses
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import List, Optional, Tuple
from databases import Database
from userhub.modules.users.domain.user import UserEntity

logger = logging.getLogger("userhub.users.repository")


class UserRepository(ABC):
    """Persistence operations on user entities keyed by UUID."""

    @abstractmethod
    async def find_by_id(self, user_id: uuid.UUID) -> Optional[UserEntity]:
        ...

    @abstractmethod
    async def insert(self, user: UserEntity) -> UserEntity:
        """Store a new user, generating an id when it has none."""

    @abstractmethod
    async def update(self, user: UserEntity) -> None:
        """Overwrite an existing user in place."""

    @abstractmethod
    async def update_or_insert(self, user: UserEntity) -> Tuple[UserEntity, bool]:
        """Update the user with `user.id`, or insert it. Returns (user, inserted)."""

    @abstractmethod
    async def delete(self, user_id: uuid.UUID) -> None:
        ...

    @abstractmethod
    async def get_page(self, page_number: int, page_size: int) -> List[UserEntity]:
        """One page of users in a stable order. `page_number` is 1-based."""


class InMemoryUserRepository(UserRepository):
    """
    Dictionary-backed store, ordered by insertion.

    Entities are copied on the way in and out so callers never share state
    with the store. A lock makes each operation atomic.
    """

    def __init__(self):
        self._users: "OrderedDict[uuid.UUID, UserEntity]" = OrderedDict()
        self._lock = threading.Lock()

    async def find_by_id(self, user_id: uuid.UUID) -> Optional[UserEntity]:
        with self._lock:
            user = self._users.get(user_id)
            return dataclasses.replace(user) if user else None

    async def insert(self, user: UserEntity) -> UserEntity:
        stored = dataclasses.replace(user, id=user.id or uuid.uuid4())
        with self._lock:
            if stored.id in self._users:
                raise ValueError(f"User {stored.id} already exists")
            self._users[stored.id] = stored
        return dataclasses.replace(stored)

    async def update(self, user: UserEntity) -> None:
        with self._lock:
            if user.id not in self._users:
                raise ValueError(f"User {user.id} does not exist")
            self._users[user.id] = dataclasses.replace(user)

    async def update_or_insert(self, user: UserEntity) -> Tuple[UserEntity, bool]:
        if user.id is None:
            raise ValueError("update_or_insert requires a user id")
        with self._lock:
            inserted = user.id not in self._users
            self._users[user.id] = dataclasses.replace(user)
        return dataclasses.replace(user), inserted

    async def delete(self, user_id: uuid.UUID) -> None:
        with self._lock:
            self._users.pop(user_id, None)

    async def get_page(self, page_number: int, page_size: int) -> List[UserEntity]:
        offset = (page_number - 1) * page_size
        with self._lock:
            users = list(self._users.values())[offset:offset + page_size]
        return [dataclasses.replace(user) for user in users]


class DatabaseUserRepository(UserRepository):
    """Repository over the `users` table."""

    def __init__(self, database: Database):
        self.database = database

    async def find_by_id(self, user_id: uuid.UUID) -> Optional[UserEntity]:
        query = """
            SELECT id, first_name, last_name, login
            FROM users
            WHERE id = :user_id
        """
        row = await self.database.fetch_one(query, {"user_id": str(user_id)})
        if not row:
            return None
        return UserEntity.from_dict(dict(row))

    async def insert(self, user: UserEntity) -> UserEntity:
        stored = dataclasses.replace(user, id=user.id or uuid.uuid4())
        query = """
            INSERT INTO users (id, first_name, last_name, login)
            VALUES (:id, :first_name, :last_name, :login)
        """
        await self.database.execute(query, stored.to_dict())
        logger.debug(f"[DatabaseUserRepository.insert] user_id={stored.id}")
        return stored

    async def update(self, user: UserEntity) -> None:
        query = """
            UPDATE users
            SET first_name = :first_name, last_name = :last_name, login = :login
            WHERE id = :id
        """
        await self.database.execute(query, user.to_dict())

    async def update_or_insert(self, user: UserEntity) -> Tuple[UserEntity, bool]:
        if user.id is None:
            raise ValueError("update_or_insert requires a user id")
        # The conflict clause decides the outcome: exactly one concurrent
        # caller gets the RETURNING row, the rest fall through to UPDATE.
        query = """
            INSERT INTO users (id, first_name, last_name, login)
            VALUES (:id, :first_name, :last_name, :login)
            ON CONFLICT (id) DO NOTHING
            RETURNING id
        """
        row = await self.database.fetch_one(query, user.to_dict())
        if row is not None:
            logger.debug(f"[DatabaseUserRepository.update_or_insert] inserted | user_id={user.id}")
            return user, True
        await self.update(user)
        return user, False

    async def delete(self, user_id: uuid.UUID) -> None:
        query = "DELETE FROM users WHERE id = :user_id"
        await self.database.execute(query, {"user_id": str(user_id)})

    async def get_page(self, page_number: int, page_size: int) -> List[UserEntity]:
        query = """
            SELECT id, first_name, last_name, login
            FROM users
            ORDER BY created_at, id
            LIMIT :limit OFFSET :offset
        """
        rows = await self.database.fetch_all(query, {
            "limit": page_size,
            "offset": (page_number - 1) * page_size,
        })
        return [UserEntity.from_dict(dict(row)) for row in rows]
