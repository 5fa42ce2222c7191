# user_service/config.py

import os
import logging
from typing import Optional
from dotenv import load_dotenv


DEFAULT_DATABASE_URL = "sqlite:///./data/app.db"


def _get_positive_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


class Settings:
    """
    Process configuration read from environment variables.
    Values are resolved once, when the object is created.
    """

    def __init__(self):
        self.database_url: str = os.getenv("DATABASE_URL", "").strip() or DEFAULT_DATABASE_URL
        self.database_user: Optional[str] = os.getenv("DATABASE_USER") or None
        self.database_password: Optional[str] = os.getenv("DATABASE_PASSWORD") or None
        self.database_pool_size: int = _get_positive_int("DATABASE_POOL_SIZE", 10)
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = _get_positive_int("PORT", 8080)
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.cors_origins: list[str] = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


def load_settings(env_file: Optional[str] = None) -> Settings:
    # Variables already present in the environment take precedence over .env
    load_dotenv(dotenv_path=env_file, override=False)
    return Settings()


def configure_logging(settings: Settings):
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
