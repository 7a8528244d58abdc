"""Constraint validation over a superposition.

Each failed constraint multiplies a path's score by (1 - weight).
"""
from dataclasses import dataclass
from typing import Callable

from groundloop.core.constants import (
    ALIGNMENT_CONSTRAINT_WEIGHT,
    CONFIDENCE_CONSTRAINT_WEIGHT,
)

from .superposition import Path, Superposition


@dataclass(frozen=True)
class Constraint:
    """A named predicate over paths with an importance weight in [0, 1]."""
    id: str
    check: Callable[[Path], bool]
    weight: float


@dataclass(frozen=True)
class ValidationResult:
    path_scores: tuple[float, ...]
    overall_score: float
    violations: tuple[tuple[str, ...], ...]


def validate(sup: Superposition, constraints: list[Constraint]) -> ValidationResult:
    """Score every path against the constraints.

    overall_score is the probability-weighted mean of path scores
    (0.0 for a zero-mass superposition).
    """
    scores = []
    violations = []
    for path in sup.paths:
        score = 1.0
        failed = []
        for constraint in constraints:
            if not constraint.check(path):
                score *= (1 - constraint.weight)
                failed.append(constraint.id)
        scores.append(score)
        violations.append(tuple(failed))

    weighted = sum(amp.magnitude ** 2 * scores[i] for i, amp in enumerate(sup.amplitudes))
    overall = weighted / sup.total_probability if sup.total_probability > 0 else 0.0

    return ValidationResult(
        path_scores=tuple(scores),
        overall_score=overall,
        violations=tuple(violations),
    )


def alignment_constraint(threshold: float = 0.5) -> Constraint:
    """Paths should sit within threshold radians of the reference phase."""
    return Constraint(
        id="reference_alignment",
        check=lambda path: abs(path.relative_phase) < threshold,
        weight=ALIGNMENT_CONSTRAINT_WEIGHT,
    )


def confidence_constraint(min_confidence: float = 0.5) -> Constraint:
    return Constraint(
        id="confidence",
        check=lambda path: path.confidence >= min_confidence,
        weight=CONFIDENCE_CONSTRAINT_WEIGHT,
    )
