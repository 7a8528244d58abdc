"""Cycle Module - one full decision tick.

paths -> superposition -> demon reweighting -> collapse -> history
      -> experience -> (every N cycles) learn

The demon's bias is read from the learning layer each cycle, so what the
layer learns feeds back into the next selections.
"""
import logging
from dataclasses import dataclass, field

from groundloop.config.features import FEATURE_DEMON_ENABLED, FEATURE_LEARNING_ENABLED
from groundloop.core.constants import LEARN_INTERVAL_CYCLES, MEASURE_REFERENCE_WEIGHT
from groundloop.core.receipt import emit_receipt
from groundloop.geometry import reference_alignment
from groundloop.learning import Experience, LearningLayer, LearningResult, Outcome
from groundloop.measure import MeasurementEvent, MeasurementHistory, collapse
from groundloop.quantum import (
    DemonState,
    Superposition,
    born_probabilities,
    build_superposition,
    create_demon,
    demon_at_measurement,
    shannon_entropy,
)

logger = logging.getLogger("groundloop.cycle")


@dataclass
class CycleState:
    """Everything carried from one cycle to the next. Paths are not carried."""
    demon: DemonState = field(default_factory=create_demon)
    history: MeasurementHistory = field(default_factory=MeasurementHistory)
    learning: LearningLayer = field(default_factory=LearningLayer)
    cycle_count: int = 0


@dataclass(frozen=True)
class CycleResult:
    cycle: int
    event: MeasurementEvent
    reweighted: Superposition
    entropy_reduced: float
    information_cost: float
    bias: float
    experience: Experience | None = None
    learning: LearningResult | None = None


def run_cycle(
    paths,
    state: CycleState,
    random_draw: float,
    identity_growth: float = 0.0,
    reference_weight: float = MEASURE_REFERENCE_WEIGHT,
    tenant_id: str = "default",
) -> CycleResult:
    """Run one decision cycle and update state in place.

    Args:
        paths: Candidate paths for this cycle (non-empty)
        state: CycleState, mutated
        random_draw: Uniform draw in [0, 1) for the collapse
        identity_growth: Outcome term supplied by the caller
        reference_weight: Born-rule tilt toward the reference
        tenant_id: Tenant identifier for receipts

    Returns:
        CycleResult

    Raises:
        StopRule: If paths is empty or random_draw is outside [0, 1)
    """
    sup = build_superposition(paths, tenant_id)

    demon = state.demon
    if FEATURE_LEARNING_ENABLED:
        demon = state.learning.adapted_demon(demon)

    entropy_reduced = 0.0
    cost = 0.0
    reweighted = sup
    if FEATURE_DEMON_ENABLED:
        reweighted, step = demon_at_measurement(sup, demon, tenant_id)
        entropy_reduced = step.entropy_reduction
        cost = step.information_cost
        demon = step.demon
    state.demon = demon

    event = collapse(reweighted, reference_weight, random_draw, prior=sup, tenant_id=tenant_id)
    state.history.record(event)
    state.cycle_count += 1

    experience = None
    learning_result = None
    if FEATURE_LEARNING_ENABLED:
        outcome = Outcome(
            successful=event.verified,
            coherence=reweighted.coherence,
            mu_alignment=reference_alignment(event.raw_amplitude),
            identity_growth=identity_growth,
            entropy_paid=cost,
        )
        experience = state.learning.record_experience(
            event.selected_path,
            demon.bias_strength,
            shannon_entropy(born_probabilities(reweighted)),
            outcome,
        )
        if state.cycle_count % LEARN_INTERVAL_CYCLES == 0:
            learning_result = state.learning.learn()
            logger.debug("cycle %d: learn updated=%s bias=%.4f",
                         state.cycle_count, learning_result.updated, learning_result.new_bias)

    emit_receipt("cycle", {
        "cycle": state.cycle_count,
        "selected_index": event.selected_index,
        "category": event.selected_path.category.value,
        "verified": event.verified,
        "learned": learning_result is not None and learning_result.updated,
        "bias": demon.bias_strength,
        "entropy_reduced": entropy_reduced,
        "information_cost": cost,
    }, tenant_id=tenant_id)

    return CycleResult(
        cycle=state.cycle_count,
        event=event,
        reweighted=reweighted,
        entropy_reduced=entropy_reduced,
        information_cost=cost,
        bias=demon.bias_strength,
        experience=experience,
        learning=learning_result,
    )
