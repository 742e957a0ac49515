"""
Default thresholds for the statistics views.
"""

from __future__ import annotations

from typing import Final


WEAK_LAPSE_THRESHOLD: Final[int] = 7         # Lapses needed to count as weak
WEAK_STABILITY_THRESHOLD: Final[float] = 3.0  # ...while stability stays below this
STALE_DAYS: Final[int] = 80                  # Days without review before a word is stale
STRONGEST_LIMIT: Final[int] = 20

EVENT_COLUMNS: Final[list[str]] = ["card_id", "timestamp", "rating", "day_utc"]
