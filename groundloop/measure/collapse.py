"""Collapse Module - one tick of measurement.

Superposition -> sample one path -> project onto the reference line (unless
turned off) -> verify -> quantify uncertainty.

Randomness always arrives as an explicit draw in [0, 1). Given the same
(superposition, reference_weight, random_draw) the event is identical.
"""
from dataclasses import dataclass

from groundloop.core.constants import (
    DEMON_DEFAULT_BIAS,
    MEASURE_ALIGNMENT_THRESHOLD,
    MEASURE_CONFIDENCE_THRESHOLD,
    MEASURE_PROJECT_TO_REFERENCE,
    MEASURE_REFERENCE_WEIGHT,
)
from groundloop.core.receipt import dual_hash, emit_receipt, stoprule_contract
from groundloop.geometry import Vector2, energy, is_on_reference_ray, project_to_reference
from groundloop.quantum import (
    BornRuleConfig,
    DemonState,
    Path,
    Superposition,
    born_probabilities,
    create_demon,
    grounded_born_probabilities,
    reweight,
    shannon_entropy,
)

from .uncertainty import quantify_uncertainty
from .verify import verify


@dataclass(frozen=True)
class MeasurementEvent:
    """Immutable record of one collapse."""
    selected_index: int
    selected_path: Path
    probability: float
    raw_amplitude: Vector2
    grounded_amplitude: Vector2
    grounding_cost: float
    verified: bool
    verification_score: float
    uncertainty: float
    confidence: float
    prior_entropy: float
    was_already_grounded: bool


@dataclass(frozen=True)
class MeasurementConfig:
    """Tunables for a full measurement tick.

    born_rule: grounded Born rule weights; None samples with the
        reference-tilted rule at reference_weight
    project_to_reference: ground the selected amplitude on the reference line
    """
    use_demon: bool = True
    demon_bias: float = DEMON_DEFAULT_BIAS
    reference_weight: float = MEASURE_REFERENCE_WEIGHT
    alignment_threshold: float = MEASURE_ALIGNMENT_THRESHOLD
    confidence_threshold: float = MEASURE_CONFIDENCE_THRESHOLD
    born_rule: BornRuleConfig | None = None
    project_to_reference: bool = MEASURE_PROJECT_TO_REFERENCE


DEFAULT_MEASUREMENT_CONFIG = MeasurementConfig()


def select_index(probabilities: list[float], random_draw: float) -> int:
    """Inverse-CDF sampling: first index whose cumulative sum exceeds the draw.

    If rounding leaves the cumulative sum short of the draw, the last index wins.
    """
    cumulative = 0.0
    for i, p in enumerate(probabilities):
        cumulative += p
        if random_draw < cumulative:
            return i
    return len(probabilities) - 1


def grounding_cost(raw: Vector2, grounded: Vector2) -> float:
    """|E(raw) - E(grounded)|."""
    return abs(energy(raw) - energy(grounded))


def collapse(
    sup: Superposition,
    reference_weight: float,
    random_draw: float,
    *,
    prior: Superposition | None = None,
    alignment_threshold: float = MEASURE_ALIGNMENT_THRESHOLD,
    confidence_threshold: float = MEASURE_CONFIDENCE_THRESHOLD,
    born: BornRuleConfig | None = None,
    ground: bool = MEASURE_PROJECT_TO_REFERENCE,
    tenant_id: str = "default",
) -> MeasurementEvent:
    """Collapse a superposition to exactly one path.

    Args:
        sup: Superposition to sample from (non-empty)
        reference_weight: Tilt of the Born rule toward the reference (0 = plain)
        random_draw: Uniform draw in [0, 1)
        prior: Superposition before any reweighting, for the entropy term of
            the uncertainty (defaults to sup)
        alignment_threshold: Verification alignment threshold
        confidence_threshold: Verification confidence threshold
        born: Sample with the grounded Born rule instead; reference_weight
            is then ignored
        ground: Project the selected amplitude onto the reference line. If
            False the raw amplitude is kept and the grounding cost is 0
        tenant_id: Tenant identifier for receipts

    Returns:
        MeasurementEvent

    Raises:
        StopRule: If sup is empty or random_draw is outside [0, 1)
    """
    if not sup.paths:
        stoprule_contract("collapse_paths", "Cannot collapse an empty superposition", tenant_id)
    if not (0.0 <= random_draw < 1.0):
        stoprule_contract("collapse_draw", f"random_draw {random_draw} outside [0, 1)", tenant_id)

    prior = prior if prior is not None else sup
    if born is not None:
        probabilities = grounded_born_probabilities(sup, born, tenant_id)
        reference_weight = born.reference_weight
    else:
        probabilities = born_probabilities(sup, reference_weight)
    index = select_index(probabilities, random_draw)

    path = sup.paths[index]
    raw = sup.amplitudes[index]
    grounded = project_to_reference(raw) if ground else raw
    cost = grounding_cost(raw, grounded)

    verification = verify(grounded, path, alignment_threshold, confidence_threshold)
    uncertainty = quantify_uncertainty(grounded, prior)

    event = MeasurementEvent(
        selected_index=index,
        selected_path=path,
        probability=probabilities[index],
        raw_amplitude=raw,
        grounded_amplitude=grounded,
        grounding_cost=cost,
        verified=verification.passed,
        verification_score=verification.score,
        uncertainty=uncertainty.total,
        confidence=uncertainty.confidence,
        prior_entropy=shannon_entropy(born_probabilities(prior)),
        was_already_grounded=is_on_reference_ray(raw),
    )

    emit_receipt("measurement", {
        "selected_index": index,
        "path_id": path.id,
        "category": path.category.value,
        "probability": event.probability,
        "grounding_cost": cost,
        "verified": event.verified,
        "verification_score": event.verification_score,
        "uncertainty": event.uncertainty,
        "confidence": event.confidence,
        "reference_weight": reference_weight,
        "born_rule": "grounded" if born is not None else "tilted",
        "projected": ground,
        "probabilities_hash": dual_hash(str(probabilities)),
    }, tenant_id=tenant_id)

    return event


def measure(
    sup: Superposition,
    random_draw: float,
    config: MeasurementConfig = DEFAULT_MEASUREMENT_CONFIG,
    demon: DemonState | None = None,
    tenant_id: str = "default",
) -> MeasurementEvent:
    """Full tick: optional demon reweighting, then collapse against the original prior.

    Args:
        sup: Prior superposition
        random_draw: Uniform draw in [0, 1)
        config: MeasurementConfig
        demon: Demon to use; a fresh one with config.demon_bias if None
        tenant_id: Tenant identifier for receipts

    Returns:
        MeasurementEvent
    """
    working = sup
    if config.use_demon:
        state = demon if demon is not None else create_demon(config.demon_bias)
        working, _ = reweight(sup, state, tenant_id)

    return collapse(
        working,
        config.reference_weight,
        random_draw,
        prior=sup,
        alignment_threshold=config.alignment_threshold,
        confidence_threshold=config.confidence_threshold,
        born=config.born_rule,
        ground=config.project_to_reference,
        tenant_id=tenant_id,
    )
