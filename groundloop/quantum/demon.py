"""Demon Module - entropy-reducing selection bias toward the reference.

The demon shrinks amplitudes far from the reference direction and keeps
those close to it. That lowers the entropy of the distribution, and the
demon pays for it: information cost = 1.1 * |entropy reduced|, always.

Reweighting is deterministic. No randomness enters here.
"""
import math
from dataclasses import dataclass, replace

from groundloop.core.constants import (
    DEMON_COST_FACTOR,
    DEMON_DEFAULT_BIAS,
    DEMON_DISTANCE_EPSILON,
    REASONING_SOFT_STRENGTH,
)
from groundloop.core.receipt import emit_receipt
from groundloop.geometry import REFERENCE

from .superposition import (
    Superposition,
    born_probabilities,
    create_superposition,
    normalize,
    shannon_entropy,
    soft_collapse,
)
from .validate import Constraint, validate


@dataclass(frozen=True)
class DemonState:
    """Selection bias state. Each reweight produces an updated copy."""
    bias_strength: float = DEMON_DEFAULT_BIAS
    cumulative_entropy_reduced: float = 0.0
    cumulative_information_cost: float = 0.0
    selections_made: int = 0


@dataclass(frozen=True)
class DemonMeasurement:
    """Diagnostics for one demon pass.

    entropy_reduction is raw and may be negative; information_cost never is.
    """
    demon: DemonState
    prior_entropy: float
    posterior_entropy: float
    entropy_reduction: float
    information_cost: float
    bias_applied: float          # change in the dominant path's probability


def create_demon(bias_strength: float = DEMON_DEFAULT_BIAS) -> DemonState:
    return DemonState(bias_strength=bias_strength)


def information_cost(entropy_reduced: float) -> float:
    """Cost of a selection. Exceeds the benefit even when entropy went up."""
    if not math.isfinite(entropy_reduced):
        return 0.0
    return abs(entropy_reduced) * DEMON_COST_FACTOR


def _apply_bias(sup: Superposition, bias_strength: float) -> Superposition:
    """weight_i = exp(-bias * d_i / (max d + eps)); amplitudes scaled, phases kept."""
    distances = [amp.distance(REFERENCE) for amp in sup.amplitudes]
    max_dist = max(distances, default=0.0) + DEMON_DISTANCE_EPSILON

    new_paths = []
    for path, d in zip(sup.paths, distances):
        weight = math.exp(-bias_strength * d / max_dist)
        new_paths.append(replace(path, amplitude=path.amplitude.scale(weight)))
    return normalize(create_superposition(new_paths))


def reweight(
    sup: Superposition,
    state: DemonState,
    tenant_id: str = "default",
) -> tuple[Superposition, DemonState]:
    """Reweight sup toward the reference and account for the entropy moved.

    Args:
        sup: Superposition to bias
        state: Current demon state (bias_strength is read, totals accumulated)
        tenant_id: Tenant identifier for receipts

    Returns:
        (reweighted normalized Superposition, updated DemonState)
    """
    new_sup = _apply_bias(sup, state.bias_strength)

    entropy_before = shannon_entropy(born_probabilities(sup))
    entropy_after = shannon_entropy(born_probabilities(new_sup))
    entropy_reduced = entropy_before - entropy_after
    cost = information_cost(entropy_reduced)

    new_state = replace(
        state,
        cumulative_entropy_reduced=state.cumulative_entropy_reduced + entropy_reduced,
        cumulative_information_cost=state.cumulative_information_cost + cost,
        selections_made=state.selections_made + 1,
    )

    emit_receipt("demon_selection", {
        "bias_strength": state.bias_strength,
        "entropy_before": entropy_before,
        "entropy_after": entropy_after,
        "entropy_reduced": entropy_reduced,
        "information_cost": cost,
        "selections_made": new_state.selections_made,
        "n_paths": len(sup.paths),
    }, tenant_id=tenant_id)

    return new_sup, new_state


reweight_toward_reference = reweight


def demon_at_measurement(
    sup: Superposition,
    state: DemonState,
    tenant_id: str = "default",
) -> tuple[Superposition, DemonMeasurement]:
    """Reweight and report how much the demon moved the distribution."""
    prior_probs = born_probabilities(sup)
    biased, new_state = reweight(sup, state, tenant_id)
    posterior_probs = born_probabilities(biased)

    prior_entropy = shannon_entropy(prior_probs)
    posterior_entropy = shannon_entropy(posterior_probs)
    reduction = prior_entropy - posterior_entropy

    return biased, DemonMeasurement(
        demon=new_state,
        prior_entropy=prior_entropy,
        posterior_entropy=posterior_entropy,
        entropy_reduction=reduction,
        information_cost=information_cost(reduction),
        bias_applied=max(posterior_probs, default=0.0) - max(prior_probs, default=0.0),
    )


def reasoning_step(
    sup: Superposition,
    state: DemonState,
    constraints: list[Constraint],
    soft_strength: float = REASONING_SOFT_STRENGTH,
    tenant_id: str = "default",
) -> tuple[Superposition, DemonState]:
    """Reweight, validate, then soft-collapse toward the best validated path."""
    biased, new_state = reweight(sup, state, tenant_id)
    validation = validate(biased, constraints)

    best_index = 0
    best_score = 0.0
    for i, score in enumerate(validation.path_scores):
        weighted = score * biased.amplitudes[i].magnitude ** 2
        if weighted > best_score:
            best_score = weighted
            best_index = i

    return soft_collapse(biased, best_index, soft_strength), new_state
