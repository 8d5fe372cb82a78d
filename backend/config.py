import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

# Values shipped in .env.example that mean "not configured"
PLACEHOLDER_KEYS = {"", "your-api-key-here"}

DEFAULT_ADVISOR_MODEL = "claude-sonnet-4-5"
DEFAULT_ADVISOR_TIMEOUT = 10.0
DEFAULT_DATABASE_PATH = "taskpulse.db"

# Relative database paths are anchored here, not at the server's working directory
BACKEND_DIR = os.path.dirname(os.path.abspath(__file__))


def resolve_database_path(path: str) -> str:
    """Absolute path of the sqlite file; relative paths are taken from backend/."""
    return os.path.abspath(os.path.join(BACKEND_DIR, os.path.expanduser(path)))


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the analytics service and its migrations."""
    anthropic_api_key: Optional[str] = None
    advisor_model: str = DEFAULT_ADVISOR_MODEL
    advisor_timeout: float = DEFAULT_ADVISOR_TIMEOUT
    database_path: str = DEFAULT_DATABASE_PATH

    @property
    def advisor_enabled(self) -> bool:
        return (self.anthropic_api_key or "").strip() not in PLACEHOLDER_KEYS

    @property
    def database_file(self) -> str:
        return resolve_database_path(self.database_path)

    @property
    def database_url(self) -> str:
        return f"sqlite:///{self.database_file}"

    @classmethod
    def from_env(cls) -> "Settings":
        timeout_raw = os.getenv("TASKPULSE_ADVISOR_TIMEOUT")
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_ADVISOR_TIMEOUT
        except ValueError:
            timeout = DEFAULT_ADVISOR_TIMEOUT
        return cls(
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY"),
            advisor_model=os.getenv("TASKPULSE_ADVISOR_MODEL") or DEFAULT_ADVISOR_MODEL,
            advisor_timeout=timeout,
            database_path=os.getenv("TASKPULSE_DATABASE_PATH") or DEFAULT_DATABASE_PATH,
        )
