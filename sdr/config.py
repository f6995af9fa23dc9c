from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

# -----------------------------
# .env Loader
# -----------------------------
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
ENV_PATH = os.path.join(BASE_DIR, "..", ".env")
load_dotenv(dotenv_path=ENV_PATH, override=True)

DEFAULT_OFFICE_NAME = "Bright Smile Dental"
DEFAULT_TZ = "America/Chicago"


# -----------------------------
# Env helpers
# -----------------------------
def env_bool(key: str, default: bool = False) -> bool:
    v = os.getenv(key)
    if v is None:
        return default
    return str(v).strip().lower() in ("1", "true", "yes", "on")


def env_int(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, default))
    except (TypeError, ValueError):
        return default


def env_float(key: str, default: float) -> float:
    try:
        return float(os.getenv(key, default))
    except (TypeError, ValueError):
        return default


def env_str(key: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(key)
    return v if (v and str(v).strip() != "") else default


# -----------------------------
# Settings Object
# -----------------------------
@dataclass(frozen=True)
class Settings:
    OFFICE_NAME: str
    OFFICE_TZ: str
    ASSIGNEE_FIRST_NAME: Optional[str]
    ASSIGNEE_LAST_NAME: Optional[str]
    ACCOUNT_PHONE_NUMBER: Optional[str]
    DEFAULT_START_CAMPAIGN: str
    POWER_HOUR_BATCH: int
    AI_ENABLED: bool
    AI_API_KEY: Optional[str]
    AI_BASE_URL: str
    AI_MODEL: str
    AI_TEMPERATURE: float
    AI_MAX_TOKENS: int
    AI_TIMEOUT: float
    AIRTABLE_API_KEY: Optional[str]
    SDR_BASE_ID: Optional[str]
    FORCE_IN_MEMORY: bool
    REDIS_URL: Optional[str]
    SWEEP_LOCK_TTL: int


@lru_cache(maxsize=1)
def settings() -> Settings:
    return Settings(
        OFFICE_NAME=env_str("OFFICE_NAME", DEFAULT_OFFICE_NAME),
        OFFICE_TZ=env_str("OFFICE_TZ", DEFAULT_TZ),
        ASSIGNEE_FIRST_NAME=env_str("ASSIGNEE_FIRST_NAME"),
        ASSIGNEE_LAST_NAME=env_str("ASSIGNEE_LAST_NAME"),
        ACCOUNT_PHONE_NUMBER=env_str("ACCOUNT_PHONE_NUMBER"),
        DEFAULT_START_CAMPAIGN=env_str("DEFAULT_START_CAMPAIGN", "listValidation"),
        POWER_HOUR_BATCH=env_int("POWER_HOUR_BATCH", 25),
        AI_ENABLED=env_bool("AI_ENABLED", False),
        AI_API_KEY=env_str("DEEPSEEK_API_KEY") or env_str("OPENAI_API_KEY"),
        AI_BASE_URL=env_str("AI_BASE_URL", "https://api.deepseek.com"),
        AI_MODEL=env_str("AI_MODEL", "deepseek-chat"),
        AI_TEMPERATURE=env_float("AI_TEMPERATURE", 0.7),
        AI_MAX_TOKENS=env_int("AI_MAX_TOKENS", 150),
        AI_TIMEOUT=env_float("AI_TIMEOUT", 12.0),
        AIRTABLE_API_KEY=env_str("AIRTABLE_API_KEY"),
        SDR_BASE_ID=env_str("SDR_BASE_ID") or env_str("AIRTABLE_SDR_BASE_ID"),
        FORCE_IN_MEMORY=env_bool("SDR_FORCE_IN_MEMORY", False),
        REDIS_URL=env_str("REDIS_URL"),
        SWEEP_LOCK_TTL=env_int("SWEEP_LOCK_TTL", 300),
    )


# -----------------------------
# Office config
# -----------------------------
@dataclass(frozen=True)
class Assignee:
    """Account rep whose name and number can appear in outbound copy."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None

    @property
    def full_name(self) -> Optional[str]:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) if parts else None


@dataclass(frozen=True)
class OfficeConfig:
    office_name: str = DEFAULT_OFFICE_NAME
    timezone: str = DEFAULT_TZ
    assignee: Assignee = field(default_factory=Assignee)
    default_campaign: str = "listValidation"
    power_hour_batch: int = 25

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def now(self) -> datetime:
        return datetime.now(self.tz)

    @classmethod
    def from_settings(cls, s: Optional[Settings] = None) -> "OfficeConfig":
        s = s or settings()
        return cls(
            office_name=s.OFFICE_NAME,
            timezone=s.OFFICE_TZ,
            assignee=Assignee(
                first_name=s.ASSIGNEE_FIRST_NAME,
                last_name=s.ASSIGNEE_LAST_NAME,
                phone_number=s.ACCOUNT_PHONE_NUMBER,
            ),
            default_campaign=s.DEFAULT_START_CAMPAIGN,
            power_hour_batch=s.POWER_HOUR_BATCH,
        )
