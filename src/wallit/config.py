"""Runtime configuration read from the environment."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_RATE_API_URL = "https://open.er-api.com/v6/latest/USD"
DEFAULT_TIMEZONE = "America/Santiago"


def default_database_path() -> str:
    """Return ~/.wallit/wallit.db, creating the directory if needed."""
    db_dir = Path.home() / ".wallit"
    db_dir.mkdir(exist_ok=True)
    return str(db_dir / "wallit.db")


@dataclass(frozen=True)
class Settings:
    """Application settings.

    Attributes:
        database_path: SQLite file (WALLIT_DB_PATH)
        user_id: Current user for the CLI (WALLIT_USER)
        rate_api_url: Exchange rate source (WALLIT_RATE_API_URL)
        timezone: Timezone used for "today" (WALLIT_TIMEZONE)
        log_level: Logging level name (WALLIT_LOG_LEVEL)
    """

    database_path: Optional[str] = None
    user_id: Optional[str] = None
    rate_api_url: str = DEFAULT_RATE_API_URL
    timezone: str = DEFAULT_TIMEZONE
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_path=os.environ.get("WALLIT_DB_PATH"),
            user_id=os.environ.get("WALLIT_USER"),
            rate_api_url=os.environ.get("WALLIT_RATE_API_URL", DEFAULT_RATE_API_URL),
            timezone=os.environ.get("WALLIT_TIMEZONE", DEFAULT_TIMEZONE),
            log_level=os.environ.get("WALLIT_LOG_LEVEL", "WARNING"),
        )
