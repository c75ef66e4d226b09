"""
Scheduling - Spaced-Repetition Engine

Main API for scheduling flashcard reviews.

Two interchangeable algorithms share one contract (SchedulingEngine):
- StepScheduler: SM-2 style ease factor with learning/relearning ladders
- MemoryModelScheduler: FSRS stability/difficulty model

Quick start:
    from recall import scheduling

    engine = scheduling.StepScheduler()
    card = engine.create_new_card("card-1", scheduling.basic_content("hond", "dog"))
    engine.add_item(card)

    engine.start_new_session()
    item = engine.get_next_review_item()
    engine.update_item_after_review(item, scheduling.PerformanceResponse.GOOD)
"""

# Card record
from recall.scheduling.card import CardRecord, basic_content

# Engines
from recall.scheduling.engine import Clock, SchedulingEngine
from recall.scheduling.step_scheduler import StepMetadata, StepScheduler
from recall.scheduling.memory_model import MemoryModelScheduler, native_rating
from recall.scheduling.memory_state import MemoryState, state_from_index

# Registry
from recall.scheduling.registry import (
    ALGORITHM_SPECS,
    AlgorithmSpec,
    build_engine,
    get_algorithm_spec
)

# Constants and parameters
from recall.scheduling.constants import (
    MANUAL_RATING,
    CardState,
    CardType,
    PerformanceResponse,
    SchedulingAlgorithm
)
from recall.scheduling.parameters import MemoryModelParameters, StepParameters


__all__ = [
    # Card record
    "CardRecord",
    "basic_content",

    # Engines
    "Clock",
    "SchedulingEngine",
    "StepScheduler",
    "StepMetadata",
    "MemoryModelScheduler",
    "MemoryState",
    "native_rating",
    "state_from_index",

    # Registry
    "ALGORITHM_SPECS",
    "AlgorithmSpec",
    "build_engine",
    "get_algorithm_spec",

    # Enums
    "CardState",
    "CardType",
    "PerformanceResponse",
    "SchedulingAlgorithm",
    "MANUAL_RATING",

    # Parameters
    "StepParameters",
    "MemoryModelParameters",
]
