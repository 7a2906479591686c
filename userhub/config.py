"""
Application Configuration

Settings are read from the environment (and a local .env file, if present).
"""
import os
from typing import List, Optional
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

load_dotenv()


class Settings(BaseModel):
    """Runtime settings for the userhub service."""
    model_config = ConfigDict(frozen=True)

    app_title: str = "userhub"
    database_url: Optional[str] = None
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            app_title=os.getenv("APP_TITLE", "userhub"),
            database_url=os.getenv("DATABASE_URL") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        )


def get_settings() -> Settings:
    return Settings.from_env()
