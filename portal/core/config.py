"""
Configuration helpers for the portal backend.

Settings are read once from environment variables so that routers/services
never fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

ROOT_DIR = Path(__file__).resolve().parents[2]


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    data_dir: Path
    news_db_path: Path
    users_csv_path: Path
    session_database_url: str
    session_ttl_seconds: int
    port: int
    log_level: str
    login_rate_limit: int
    login_rate_window_seconds: int
    editor_bootstrap_id: str
    editor_bootstrap_password: str

    @property
    def secure_cookies(self) -> bool:
        return self.app_env == "prod"


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str | None, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    data_dir = Path(os.getenv("PORTAL_DATA_DIR") or ROOT_DIR / "data")
    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        data_dir=data_dir,
        news_db_path=Path(os.getenv("NEWS_DB_PATH") or data_dir / "db.json"),
        users_csv_path=Path(os.getenv("USERS_CSV_PATH") or data_dir / "users.csv"),
        session_database_url=os.getenv("SESSION_DATABASE_URL", "sqlite://").strip() or "sqlite://",
        session_ttl_seconds=_int(os.getenv("SESSION_TTL_SECONDS", "86400"), 86400),
        port=_int(os.getenv("PORT", "3000"), 3000),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        login_rate_limit=_int(os.getenv("LOGIN_RATE_LIMIT", "10"), 10),
        login_rate_window_seconds=_int(os.getenv("LOGIN_RATE_WINDOW_SECONDS", "60"), 60),
        editor_bootstrap_id=(os.getenv("EDITOR_BOOTSTRAP_ID") or "").strip(),
        editor_bootstrap_password=os.getenv("EDITOR_BOOTSTRAP_PASSWORD") or "",
    )
