"""
FSRS Constants and Parameters

All configurable parameters for the FSRS-5 algorithm in one place.
Weights are the published FSRS-5 defaults.
"""

from datetime import timedelta
from enum import IntEnum


# ---- Ratings ----

class Rating(IntEnum):
    """Learner feedback on a retrieval attempt."""
    MANUAL = 0  # Administrative reschedule, never valid in the review flow
    AGAIN = 1   # Retrieval failed
    HARD = 2    # Retrieved with high effort
    GOOD = 3    # Retrieved normally
    EASY = 4    # Retrieved fluently


LEARNER_RATINGS = (Rating.AGAIN, Rating.HARD, Rating.GOOD, Rating.EASY)


# ---- Card States ----

class State(IntEnum):
    """Lifecycle state of a card's memory model."""
    NEW = 0
    LEARNING = 1
    REVIEW = 2
    RELEARNING = 3


# ---- Global Constants ----

REQUEST_RETENTION = 0.9   # Target recall probability at the due date
MAXIMUM_INTERVAL = 36500  # Days
DECAY = -0.5
FACTOR = 19 / 81          # Chosen so that R(S, S) == 0.9

S_MIN = 0.01   # Minimum stability (days)
D_MIN = 1.0    # Minimum difficulty
D_MAX = 10.0   # Maximum difficulty


# ---- Model Weights (FSRS-5 defaults) ----

DEFAULT_WEIGHTS = (
    0.40255, 1.18385, 3.173, 15.69105,  # w0-w3: initial stability per rating
    7.1949, 0.5345,                     # w4-w5: initial difficulty
    1.4604, 0.0046,                     # w6-w7: difficulty step, mean reversion
    1.54575, 0.1192, 1.01925,           # w8-w10: recall stability
    1.9395, 0.11, 0.29605, 2.2698,      # w11-w14: forget stability
    0.2315, 2.9898,                     # w15-w16: hard penalty, easy bonus
    0.51655, 0.6621,                    # w17-w18: short-term stability
)


# ---- Short-Term Learning Steps ----
# Due offsets for cards that stay in Learning/Relearning

NEW_CARD_STEPS = {
    Rating.AGAIN: timedelta(minutes=1),
    Rating.HARD: timedelta(minutes=5),
    Rating.GOOD: timedelta(minutes=10),
}

LEARNING_STEPS = {
    Rating.AGAIN: timedelta(minutes=5),
    Rating.HARD: timedelta(minutes=10),
}

RELEARNING_STEP = timedelta(minutes=5)
