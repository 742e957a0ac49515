"""
Scheduler configuration.

Values come from environment variables (a `.env` file is loaded first)
and are validated by a pydantic model.

Variables:
    NEW_CARD_LIMIT            Daily cap on new cards (default 20)
    DATABASE_URL              SQLAlchemy URL (default sqlite file under logs/)
    TEST_MODE                 "true" switches the default database to test_learning.db
    WEAK_LAPSE_THRESHOLD      Lapses needed for a weak word (default 7)
    WEAK_STABILITY_THRESHOLD  Stability below which a word is weak (default 3.0)
    STALE_DAYS                Days without review before a word is stale (default 80)
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from vocab_srs.analytics.constants import (
    STALE_DAYS,
    WEAK_LAPSE_THRESHOLD,
    WEAK_STABILITY_THRESHOLD,
)

load_dotenv()

DB_DIR = Path("logs")

DEFAULT_NEW_CARD_LIMIT = 20
NEW_CARD_LIMIT_CHOICES = (10, 20, 30)  # Offered in the settings screen


class SchedulerSettings(BaseModel):
    """Tunables supplied to the scheduling core."""
    new_card_limit: int = Field(DEFAULT_NEW_CARD_LIMIT, ge=0)
    database_url: str
    test_mode: bool = False
    weak_lapse_threshold: int = Field(WEAK_LAPSE_THRESHOLD, ge=0)
    weak_stability_threshold: float = Field(WEAK_STABILITY_THRESHOLD, ge=0)
    stale_days: int = Field(STALE_DAYS, ge=0)


def is_test_mode() -> bool:
    """Check if running in test mode."""
    return os.getenv("TEST_MODE", "false").lower() == "true"


def default_database_url() -> str:
    """SQLite file under logs/, separate file in test mode."""
    db_name = "test_learning.db" if is_test_mode() else "learning.db"
    return f"sqlite:///{DB_DIR / db_name}"


def load_settings() -> SchedulerSettings:
    """
    Build settings from the environment.

    Raises:
        pydantic.ValidationError: a variable is set to an invalid value
    """
    values = {
        "database_url": os.getenv("DATABASE_URL") or default_database_url(),
        "test_mode": is_test_mode(),
    }
    env_fields = {
        "new_card_limit": "NEW_CARD_LIMIT",
        "weak_lapse_threshold": "WEAK_LAPSE_THRESHOLD",
        "weak_stability_threshold": "WEAK_STABILITY_THRESHOLD",
        "stale_days": "STALE_DAYS",
    }
    for field, var in env_fields.items():
        raw = os.getenv(var)
        if raw:
            values[field] = raw
    return SchedulerSettings(**values)
