"""Configuration management utilities for the voter status dashboard.

Provides:
- A small ``Config`` base class with dict/JSON round-tripping
- ``AppConfig``: API and dashboard settings loaded from environment variables
- Known values for the voters table (voting statuses, searchable columns)
"""

from pathlib import Path
from typing import Dict, Any
import json
import os


# ── Voters table constants ────────────────────────────────────────────────────

VOTING_DONE_STATUSES = frozenset({"Completed", "Direct"})
NOT_YET_STATUSES = frozenset({"Pending", "In Transit"})

# Text columns matched by the server-side ``search`` parameter.
SEARCH_COLUMNS = (
    "voter_id",
    "full_name",
    "eng_full_name",
    "booth_number",
    "booth_name",
    "booth_address",
    "house_number",
    "updated_mobile_no",
    "colony_name",
    "assigned_colony_name",
    "voting_status",
)

# Page size used by the dashboard to pull the whole table in one request.
UNBOUNDED_PAGE_SIZE = 100_000


class Config:
    """Base configuration class for organizing application settings."""

    def __init__(self):
        """Initialize configuration with default values."""
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary.

        Returns:
            Dictionary of all config attributes
        """
        return {k: v for k, v in self.__dict__.items() if not k.startswith("_")}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create config from dictionary, overriding the defaults."""
        config = cls()
        for key, value in data.items():
            setattr(config, key, value)
        return config

    def save_json(self, path: Path) -> None:
        """Save configuration to JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2, default=str)

    @classmethod
    def load_json(cls, path: Path) -> "Config":
        """Load configuration from JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file is not valid JSON
        """
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class AppConfig(Config):
    """Application-level configuration loaded from environment variables.

    All env vars have sensible defaults so the API and the dashboard work out
    of the box against a local server.

    Environment variables:
        APP_DB_PATH: Path to the SQLite voters database (default: voters.sqlite)
        APP_PORT: API server port (default: 8000)
        APP_HOST: API server bind address (default: 127.0.0.1)
        APP_LOG_FORMAT: Logging format, "text" or "json" (default: text)
        APP_CORS_ORIGINS: Comma-separated allowed origins (default: *)
        APP_DB_POOL_SIZE: Max DB connections lent out at once (default: 10)
        APP_DB_POOL_WAIT: Seconds a request waits for a free connection (default: 30)
        DASHBOARD_API_URL: Base URL of the listing API (default: http://127.0.0.1:8000)
        DASHBOARD_POLL_SECONDS: Poll period in seconds (default: 5)
        DASHBOARD_CELEBRATION_SECONDS: Celebration auto-clear delay (default: 5)
        DASHBOARD_PAGE_SIZE: Rows per dashboard page (default: 50)
        DASHBOARD_HTTP_TIMEOUT: Request timeout in seconds (default: 30)
        DASHBOARD_NARROW_STATS: Narrow summary stats by every filter, not
            only the booth filter (default: 0)
    """

    def __init__(self) -> None:
        super().__init__()
        self.db_path = Path(os.getenv("APP_DB_PATH", "voters.sqlite"))
        self.api_port = int(os.getenv("APP_PORT", "8000"))
        self.api_host = os.getenv("APP_HOST", "127.0.0.1")
        self.log_format = os.getenv("APP_LOG_FORMAT", "text")
        raw_origins = os.getenv("APP_CORS_ORIGINS", "*")
        self.cors_origins: list[str] = (
            ["*"] if raw_origins == "*"
            else [o.strip() for o in raw_origins.split(",") if o.strip()]
        )
        self.pool_size = int(os.getenv("APP_DB_POOL_SIZE", "10"))
        self.pool_wait = float(os.getenv("APP_DB_POOL_WAIT", "30"))

        self.api_url = os.getenv("DASHBOARD_API_URL", "http://127.0.0.1:8000").rstrip("/")
        self.poll_seconds = float(os.getenv("DASHBOARD_POLL_SECONDS", "5"))
        self.celebration_seconds = float(os.getenv("DASHBOARD_CELEBRATION_SECONDS", "5"))
        self.page_size = int(os.getenv("DASHBOARD_PAGE_SIZE", "50"))
        self.http_timeout = float(os.getenv("DASHBOARD_HTTP_TIMEOUT", "30"))
        self.narrow_stats = _env_flag("DASHBOARD_NARROW_STATS")

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create an AppConfig instance populated from environment variables."""
        return cls()
