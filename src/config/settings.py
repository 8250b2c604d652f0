"""Application settings for the synced folder store.

Environment variables are loaded from a ``.env`` file using ``python-dotenv``
and exposed through a Pydantic settings object.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

# Load environment variables from a .env file if present
load_dotenv()

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
DEFAULT_DB_PATH = Path("data") / "folder_sync.sqlite3"
DEFAULT_LOG_FILE = Path("logs") / "app.log"
DEFAULT_LOG_LEVEL = "DEBUG"


class Settings(BaseModel):
    """Immutable settings object used across the application."""

    db_path: Path
    log_file: Path
    log_level: int = logging.DEBUG

    model_config = ConfigDict(frozen=True)


def _build_settings() -> Settings:
    """Construct the ``Settings`` instance based on environment variables."""

    db_path = Path(os.getenv("FOLDER_SYNC_DB") or DEFAULT_DB_PATH)
    log_file = Path(os.getenv("FOLDER_SYNC_LOG_FILE") or DEFAULT_LOG_FILE)

    level_name = (os.getenv("FOLDER_SYNC_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise RuntimeError(f"FOLDER_SYNC_LOG_LEVEL has an unknown level: {level_name}")

    return Settings(db_path=db_path, log_file=log_file, log_level=level)


# Public settings instance
settings = _build_settings()
