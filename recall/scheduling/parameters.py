"""
Algorithm parameter records.

Each engine is generic over one of these. Engines start from their defaults
and accept partial overrides; see SchedulingEngine.set_parameters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from recall.errors import InvalidParametersError
from recall.scheduling import constants


@dataclass(frozen=True)
class StepParameters:
    """Parameters of the SM-2 style step scheduler."""
    lapse_interval: float = constants.STEP_LAPSE_INTERVAL
    easy_interval: float = constants.STEP_EASY_INTERVAL
    easy_bonus: float = constants.STEP_EASY_BONUS
    graduating_interval: float = constants.STEP_GRADUATING_INTERVAL
    min_ease_factor: float = constants.STEP_MIN_EASE_FACTOR
    ease_factor_decrement: float = constants.STEP_EASE_FACTOR_DECREMENT
    ease_factor_increment: float = constants.STEP_EASE_FACTOR_INCREMENT
    hard_interval_multiplier: float = constants.STEP_HARD_INTERVAL_MULTIPLIER
    learning_steps: tuple[float, ...] = constants.STEP_LEARNING_STEPS
    relearning_steps: tuple[float, ...] = constants.STEP_RELEARNING_STEPS

    def __post_init__(self):
        # Persisted settings arrive as JSON lists
        object.__setattr__(self, "learning_steps", tuple(self.learning_steps))
        object.__setattr__(self, "relearning_steps", tuple(self.relearning_steps))


@dataclass(frozen=True)
class MemoryModelParameters:
    """
    Parameters of the memory-model scheduler.

    `w` is the model's weight vector; None means the fsrs library default.
    Vectors of 18 to 20 weights from older model versions are upgraded to
    the 21 weights of FSRS-6.
    """
    w: Optional[tuple[float, ...]] = None
    request_retention: float = constants.MEMORY_REQUEST_RETENTION
    maximum_interval: int = constants.MEMORY_MAXIMUM_INTERVAL
    enable_fuzz: bool = False
    enable_short_term: bool = True
    learning_steps: tuple[float, ...] = constants.MEMORY_LEARNING_STEPS
    relearning_steps: tuple[float, ...] = constants.MEMORY_RELEARNING_STEPS

    def __post_init__(self):
        if self.w is not None:
            object.__setattr__(self, "w", upgrade_weights(self.w))
        object.__setattr__(self, "learning_steps", tuple(self.learning_steps))
        object.__setattr__(self, "relearning_steps", tuple(self.relearning_steps))


def upgrade_weights(weights) -> tuple[float, ...]:
    """
    Normalize a weight vector to the FSRS-6 length.

    Raises:
        InvalidParametersError: Fewer than 18 or more than 21 weights,
            or a weight that is not a number
    """
    try:
        values = tuple(float(w) for w in weights)
    except (TypeError, ValueError):
        raise InvalidParametersError(f"Memory model weights must be numbers: {weights!r}") from None

    count = len(values)
    if not constants.MEMORY_MIN_WEIGHT_COUNT <= count <= constants.MEMORY_WEIGHT_COUNT:
        raise InvalidParametersError(
            f"Expected {constants.MEMORY_MIN_WEIGHT_COUNT} to "
            f"{constants.MEMORY_WEIGHT_COUNT} memory model weights, got {count}"
        )

    return values + constants.MEMORY_WEIGHT_PADDING[count - 17:]
