"""
Algorithm registry.

Maps each SchedulingAlgorithm to its engine class and to the settings
field holding its parameter overrides.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import TYPE_CHECKING, Any, Callable, Optional

from recall.scheduling.constants import SchedulingAlgorithm
from recall.scheduling.engine import Clock, SchedulingEngine
from recall.scheduling.memory_model import MemoryModelScheduler
from recall.scheduling.step_scheduler import StepScheduler

if TYPE_CHECKING:
    from recall.config import RecallSettings


@dataclass(frozen=True)
class AlgorithmSpec:
    """
    Engine configuration for one algorithm.
    """
    algorithm: SchedulingAlgorithm
    label: str
    description: str
    engine_class: Callable[..., SchedulingEngine]
    parameters_field: str  # RecallSettings attribute with the overrides


ALGORITHM_SPECS: dict[SchedulingAlgorithm, AlgorithmSpec] = {
    SchedulingAlgorithm.ANKI: AlgorithmSpec(
        algorithm=SchedulingAlgorithm.ANKI,
        label="Anki",
        description="Ease factor and fixed intervals with learning steps",
        engine_class=StepScheduler,
        parameters_field="step_parameters",
    ),
    SchedulingAlgorithm.FSRS: AlgorithmSpec(
        algorithm=SchedulingAlgorithm.FSRS,
        label="FSRS",
        description="Stability/difficulty memory model",
        engine_class=MemoryModelScheduler,
        parameters_field="memory_model_parameters",
    ),
}


def get_algorithm_spec(algorithm: SchedulingAlgorithm | str) -> AlgorithmSpec:
    return ALGORITHM_SPECS[SchedulingAlgorithm(algorithm)]


def build_engine(
    settings: "RecallSettings",
    clock: Optional[Clock] = None,
    tz: Optional[tzinfo] = None
) -> SchedulingEngine:
    """
    Create the engine selected by `settings`, with its parameter overrides.

    Args:
        settings: Typed view of the persisted settings section
        clock: Optional clock passed through to the engine
        tz: Optional session time zone passed through to the engine

    Returns:
        A fresh engine with no items
    """
    spec = get_algorithm_spec(settings.scheduling_algorithm)
    overrides: dict[str, Any] = getattr(settings, spec.parameters_field) or {}
    return spec.engine_class(overrides, clock=clock, tz=tz)
