import os
from pathlib import Path

# Basic settings helper to read environment configuration.

DEFAULT_DB_PATH = Path(__file__).resolve().parent / "app.db"


def _as_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.lower() in ("1", "true", "yes", "on")


def _as_int(val: str | None, default: int) -> int:
    if not val:
        return default
    try:
        return int(val)
    except ValueError:
        return default


class Settings:
    def __init__(self) -> None:
        self.HOST: str = os.getenv("HOST") or "0.0.0.0"
        self.PORT: int = _as_int(os.getenv("PORT"), 3001)
        self.DATABASE_URL: str = os.getenv("DATABASE_URL") or f"sqlite:///{DEFAULT_DB_PATH}"
        self.LOG_LEVEL: str = (os.getenv("LOG_LEVEL") or "INFO").upper()
        self.SQL_ECHO: bool = _as_bool(os.getenv("SQL_ECHO"), False)


settings = Settings()
