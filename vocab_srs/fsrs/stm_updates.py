"""
Short-Term Memory (STM) Updates

Stability updates for reviews inside the learning steps (New, Learning
and Relearning cards), where the interval is minutes rather than days.

Key principle:
Same-day practice moves stability by a rating-dependent factor only;
it never consults the forgetting curve.
"""

from __future__ import annotations
import math

from vocab_srs.fsrs.constants import Rating, S_MIN, DEFAULT_WEIGHTS


W = DEFAULT_WEIGHTS


def next_short_term_stability(stability: float, rating: Rating) -> float:
    """
    Stability after a same-day review.

    Formula: S' = S * exp(w17 * (G - 3 + w18))

    Interpretation:
    - AGAIN/HARD shrink stability
    - GOOD grows it slightly
    - EASY grows it the most

    Args:
        stability: Current stability
        rating: Learner feedback

    Returns:
        New stability value
    """
    return max(S_MIN, stability * math.exp(W[17] * (int(rating) - 3 + W[18])))


def stays_in_learning(rating: Rating) -> bool:
    """AGAIN and HARD keep a Learning/Relearning card in its learning steps."""
    return rating in (Rating.AGAIN, Rating.HARD)
