"""
Error taxonomy for the scheduling core.

Every failure is scoped to one review step or one session load and is
recoverable by retrying the user action.
"""

from __future__ import annotations


class SchedulerError(Exception):
    """Base class for all scheduling core errors."""


class InvalidRating(SchedulerError, ValueError):
    """A rating outside Again/Hard/Good/Easy reached the transition function."""

    def __init__(self, rating: object):
        super().__init__(f"Rating {rating!r} is not allowed in the review flow")
        self.rating = rating


class SchedulingError(SchedulerError):
    """The memory-model computation failed for a card/rating/now combination."""

    def __init__(self, card_id: str, reason: str):
        super().__init__(f"Cannot schedule card {card_id!r}: {reason}")
        self.card_id = card_id
        self.reason = reason


class PersistenceFailure(SchedulerError):
    """Fetching or saving cards failed in the persistence layer."""


class CardNotFound(SchedulerError, LookupError):
    """No card is stored under the requested id."""

    def __init__(self, card_id: str):
        super().__init__(f"No card stored for {card_id!r}")
        self.card_id = card_id
