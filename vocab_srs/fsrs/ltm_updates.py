"""
Long-Term Memory (LTM) Updates

Implements the FSRS-5 stability, difficulty and interval formulas used
when a card is reviewed after at least one scheduled interval.

Key principles:
- Spaced, effortful success produces the largest stability gains
- Failures are penalized more when recall was expected (high R)
- Difficulty drifts back toward the Easy baseline (mean reversion)
"""

from __future__ import annotations
import math

from vocab_srs.fsrs.constants import (
    Rating,
    DECAY,
    FACTOR,
    REQUEST_RETENTION,
    MAXIMUM_INTERVAL,
    S_MIN,
    D_MIN,
    D_MAX,
    DEFAULT_WEIGHTS,
)


W = DEFAULT_WEIGHTS


def constrain_difficulty(difficulty: float) -> float:
    """Clip difficulty to [D_MIN, D_MAX]."""
    return max(D_MIN, min(D_MAX, difficulty))


def init_stability(rating: Rating) -> float:
    """
    Stability after the first review of a New card.

    Formula: S0(G) = w[G-1]
    """
    return max(W[int(rating) - 1], 0.1)


def init_difficulty(rating: Rating) -> float:
    """
    Difficulty after the first review of a New card.

    Formula: D0(G) = w4 - exp(w5 * (G - 1)) + 1, clipped to [1, 10]
    """
    return constrain_difficulty(W[4] - math.exp(W[5] * (int(rating) - 1)) + 1.0)


def next_difficulty(difficulty: float, rating: Rating) -> float:
    """
    Update difficulty based on the review outcome.

    Formula:
        ΔD = -w6 * (G - 3)
        D' = D + ΔD * (10 - D) / 9          (linear damping)
        D'' = w7 * D0(EASY) + (1 - w7) * D'  (mean reversion)

    Damping keeps difficulty from saturating near 10; mean reversion
    pulls it slowly back toward the Easy baseline.

    Args:
        difficulty: Current difficulty
        rating: Learner feedback

    Returns:
        New difficulty value (clipped to [1, 10])
    """
    delta_d = -W[6] * (int(rating) - 3)
    damped = difficulty + delta_d * (10.0 - difficulty) / 9.0
    reverted = W[7] * init_difficulty(Rating.EASY) + (1.0 - W[7]) * damped
    return constrain_difficulty(reverted)


def next_recall_stability(
    difficulty: float,
    stability: float,
    retrievability: float,
    rating: Rating
) -> float:
    """
    Update stability after a successful retrieval (Hard/Good/Easy).

    Formula:
        S' = S * (1 + exp(w8) * (11 - D) * S^(-w9)
                  * (exp((1 - R) * w10) - 1) * penalty * bonus)

    Where penalty = w15 for Hard, bonus = w16 for Easy, else 1.

    Args:
        difficulty: Difficulty before the update
        stability: Current stability
        retrievability: Recall probability at review time
        rating: Learner feedback (HARD, GOOD or EASY)

    Returns:
        New stability value
    """
    if rating == Rating.AGAIN:
        raise ValueError("Use next_forget_stability for AGAIN feedback")

    hard_penalty = W[15] if rating == Rating.HARD else 1.0
    easy_bonus = W[16] if rating == Rating.EASY else 1.0

    growth = (
        math.exp(W[8])
        * (11.0 - difficulty)
        * math.pow(stability, -W[9])
        * (math.exp((1.0 - retrievability) * W[10]) - 1.0)
        * hard_penalty
        * easy_bonus
    )
    return max(S_MIN, stability * (1.0 + growth))


def next_forget_stability(
    difficulty: float,
    stability: float,
    retrievability: float
) -> float:
    """
    Update stability after a failed retrieval (Again).

    Formula:
        S' = w11 * D^(-w12) * ((S + 1)^w13 - 1) * exp((1 - R) * w14)

    Capped by S / exp(w17 * w18) so a lapse never raises stability
    above what a same-day Again would leave.

    Args:
        difficulty: Difficulty before the update
        stability: Current stability
        retrievability: Recall probability at review time

    Returns:
        New stability value (reduced)
    """
    long_term = (
        W[11]
        * math.pow(difficulty, -W[12])
        * (math.pow(stability + 1.0, W[13]) - 1.0)
        * math.exp((1.0 - retrievability) * W[14])
    )
    short_term_bound = stability / math.exp(W[17] * W[18])
    return max(S_MIN, min(long_term, short_term_bound))


def next_interval(stability: float) -> int:
    """
    Days until retrievability decays to REQUEST_RETENTION.

    Formula: I = S / FACTOR * (retention^(1/DECAY) - 1), rounded,
    clipped to [1, MAXIMUM_INTERVAL].
    """
    interval = stability / FACTOR * (math.pow(REQUEST_RETENTION, 1.0 / DECAY) - 1.0)
    return int(min(max(round(interval), 1), MAXIMUM_INTERVAL))
