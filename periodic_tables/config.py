import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv("config.env")


def _as_list(val: str | None, default: str = "*") -> list[str]:
    raw = default if val is None else val
    return [item.strip() for item in raw.split(",") if item.strip()]


def _as_hhmm(val: str) -> int:
    """'10:30' -> 1030"""
    return int(val.strip()[:5].replace(":", ""))


@dataclass
class Settings:
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./periodic_tables.db")
    opening_time: str = os.getenv("OPENING_TIME", "10:30")
    closing_time: str = os.getenv("CLOSING_TIME", "21:30")
    # Python weekday index, Monday == 0
    closed_weekday: int = int(os.getenv("CLOSED_WEEKDAY", "1"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    cors_origins: list[str] = field(default_factory=lambda: _as_list(os.getenv("CORS_ORIGINS")))

    @property
    def opening_hhmm(self) -> int:
        return _as_hhmm(self.opening_time)

    @property
    def closing_hhmm(self) -> int:
        return _as_hhmm(self.closing_time)


settings = Settings()
