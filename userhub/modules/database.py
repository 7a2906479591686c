"""
Database Connection

Thin wrapper around `databases.Database` used by the SQL-backed repository.
"""
import logging
from typing import Optional
from databases import Database

logger = logging.getLogger("userhub.database")

CREATE_USERS_TABLE = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    first_name TEXT,
    last_name TEXT,
    login TEXT NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""


class ConnectionManager:
    """
    Manages database connection lifecycle.
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("database_url must be set")
        self.database_url = database_url
        self._database: Optional[Database] = None

    @property
    def database(self) -> Database:
        if self._database is None:
            self._database = Database(self.database_url)
        return self._database

    async def connect(self) -> None:
        if not self.database.is_connected:
            await self.database.connect()
            logger.info("Database connection established")

    async def disconnect(self) -> None:
        if self._database and self._database.is_connected:
            await self._database.disconnect()
            logger.info("Database connection closed")

    async def init_schema(self) -> None:
        """Create the users table if it does not exist."""
        await self.database.execute(query=CREATE_USERS_TABLE)
