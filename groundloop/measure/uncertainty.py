"""Uncertainty decomposition for a measurement.

total = 0.4 * angular + 0.4 * quantum + 0.2 * epistemic

angular:   distance of the amplitude from the reference line, capped at 1
quantum:   Shannon entropy of the prior distribution / ln(n)
epistemic: standard deviation of path confidences
"""
import math
from dataclasses import dataclass

from groundloop.core.constants import (
    UNCERTAINTY_BANDS,
    UNCERTAINTY_FALLBACK_BAND,
    UNCERTAINTY_WEIGHTS,
)
from groundloop.geometry import Vector2, project_to_reference
from groundloop.quantum import Superposition, born_probabilities, shannon_entropy


@dataclass(frozen=True)
class UncertaintyQuantification:
    total: float
    angular: float
    quantum: float
    epistemic: float
    confidence: float
    interpretation: str


def interpret(total: float) -> str:
    for upper, label in UNCERTAINTY_BANDS:
        if total < upper:
            return label
    return UNCERTAINTY_FALLBACK_BAND


def quantify_uncertainty(amplitude: Vector2, prior: Superposition) -> UncertaintyQuantification:
    """Quantify how far a measurement sits from perfect ground."""
    angular = min(1.0, amplitude.distance(project_to_reference(amplitude)))
    if not math.isfinite(angular):
        angular = 1.0

    n = len(prior.paths)
    max_entropy = math.log(n) if n > 1 else 0.0
    quantum = shannon_entropy(born_probabilities(prior)) / max_entropy if max_entropy > 0 else 0.0

    confidences = [p.confidence for p in prior.paths]
    if confidences:
        mean = sum(confidences) / len(confidences)
        epistemic = math.sqrt(sum((c - mean) ** 2 for c in confidences) / len(confidences))
    else:
        epistemic = 0.0

    total = (
        UNCERTAINTY_WEIGHTS["angular"] * angular
        + UNCERTAINTY_WEIGHTS["quantum"] * quantum
        + UNCERTAINTY_WEIGHTS["epistemic"] * epistemic
    )

    return UncertaintyQuantification(
        total=total,
        angular=angular,
        quantum=quantum,
        epistemic=epistemic,
        confidence=1.0 - total,
        interpretation=interpret(total),
    )
