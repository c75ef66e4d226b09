"""
Scheduling Constants

Enums shared by every algorithm plus the default parameter values for both
concrete schedulers, kept in one place.
"""

from enum import Enum, IntEnum


# ---- Card lifecycle ----

class CardState(IntEnum):
    """Lifecycle state of a card. NEW is the only initial state."""
    NEW = 0
    LEARNING = 1
    REVIEW = 2
    RELEARNING = 3


class CardType(IntEnum):
    """Kind of card content."""
    BASIC = 0  # front/back text pair


# ---- Universal rating ----

class PerformanceResponse(IntEnum):
    """Reviewer's answer, translated per algorithm into its native rating."""
    AGAIN = 0  # Recall failed
    HARD = 1   # Recalled with high effort
    GOOD = 2   # Recalled normally
    EASY = 3   # Recalled effortlessly


class SchedulingAlgorithm(str, Enum):
    """Algorithms a deck store can be driven by."""
    ANKI = "anki"  # StepScheduler
    FSRS = "fsrs"  # MemoryModelScheduler


# ---- StepScheduler defaults ----

DEFAULT_EASE_FACTOR = 2.5

STEP_LAPSE_INTERVAL = 0.5           # interval multiplier on AGAIN
STEP_EASY_INTERVAL = 4              # days, first EASY out of a ladder
STEP_EASY_BONUS = 1.3               # extra multiplier on EASY for review cards
STEP_GRADUATING_INTERVAL = 1        # days, leaving a ladder on GOOD
STEP_MIN_EASE_FACTOR = 1.3
STEP_EASE_FACTOR_DECREMENT = 0.2
STEP_EASE_FACTOR_INCREMENT = 0.15
STEP_HARD_INTERVAL_MULTIPLIER = 1.2
STEP_LEARNING_STEPS = (1, 10)       # minutes
STEP_RELEARNING_STEPS = (10,)       # minutes


# ---- MemoryModelScheduler defaults ----

MEMORY_REQUEST_RETENTION = 0.9      # target probability of recall
MEMORY_MAXIMUM_INTERVAL = 36500     # days
MEMORY_LEARNING_STEPS = (1, 10)     # minutes
MEMORY_RELEARNING_STEPS = (10,)     # minutes

# Weight vectors: FSRS-6 uses 21 weights. Shorter vectors from older
# model versions are padded with values that reproduce their behaviour
# (no short-term stability exponent, decay 0.5).
MEMORY_WEIGHT_COUNT = 21
MEMORY_MIN_WEIGHT_COUNT = 18
MEMORY_WEIGHT_PADDING = (0.0, 0.0, 0.0, 0.5)  # w17..w20

# Native "reschedule without a review" rating. Never produced from a
# PerformanceResponse and rejected wherever a review is applied.
MANUAL_RATING = 0
