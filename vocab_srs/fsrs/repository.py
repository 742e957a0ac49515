"""
Card repository interface.

The scheduling core borrows read access to the card collection and hands
back updated Card values; the repository decides how they are stored.
There is no change tracking: a card is written only when passed to a
save operation.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Iterable, Optional

from vocab_srs.fsrs.memory_state import Card
from vocab_srs.quiz_stats import QuizStats

class CardRepository(ABC):
    """
    Storage contract for cards, review events and quiz statistics.

    Implementations raise PersistenceFailure when the backend fails and
    never commit part of a save.
    """

    @abstractmethod
    def fetch_cards(self, card_ids: Optional[Iterable[str]] = None) -> list[Card]:
        """
        Fetch cards in stable insertion order.

        Args:
            card_ids: Restrict to these ids (None = all cards)
        """

    @abstractmethod
    def fetch_card(self, card_id: str) -> Optional[Card]:
        """Fetch one card, or None if it was never stored."""

    @abstractmethod
    def save_cards(self, cards: Iterable[Card]) -> None:
        """Insert or update cards in a single transaction."""

    @abstractmethod
    def save_review(self, card: Card, event: dict) -> None:
        """Persist a reviewed card and its review event atomically."""

    @abstractmethod
    def get_review_events(self, card_ids: Optional[Iterable[str]] = None) -> list[dict]:
        """Review events, oldest first."""

    @abstractmethod
    def fetch_quiz_stats(self) -> QuizStats:
        """Quiz statistics; zeroed stats before the first quiz."""

    @abstractmethod
    def save_quiz_stats(self, stats: QuizStats) -> None:
        """Replace the stored quiz statistics."""


class InMemoryCardRepository(CardRepository):
    """
    Dict-backed repository for hosts without a database.

    Stores copies so callers can never change stored state by mutating
    a card they hold.
    """

    def __init__(self, cards: Iterable[Card] = ()):
        self._cards: dict[str, Card] = {}
        self._events: list[dict] = []
        self._quiz_stats = QuizStats()
        self.save_cards(cards)

    def fetch_cards(self, card_ids=None):
        if card_ids is None:
            return [replace(c) for c in self._cards.values()]
        wanted = set(card_ids)
        return [replace(c) for c in self._cards.values() if c.card_id in wanted]

    def fetch_card(self, card_id):
        card = self._cards.get(card_id)
        return replace(card) if card is not None else None

    def save_cards(self, cards):
        for card in cards:
            self._cards[card.card_id] = replace(card)

    def save_review(self, card, event):
        self._cards[card.card_id] = replace(card)
        self._events.append(dict(event))

    def get_review_events(self, card_ids=None):
        if card_ids is None:
            return [dict(e) for e in self._events]
        wanted = set(card_ids)
        return [dict(e) for e in self._events if e['card_id'] in wanted]

    def fetch_quiz_stats(self):
        return self._quiz_stats

    def save_quiz_stats(self, stats):
        self._quiz_stats = stats
