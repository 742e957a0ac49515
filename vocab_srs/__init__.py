"""Spaced-repetition scheduler for vocabulary flashcards."""

__version__ = "0.1.0"
