"""Bias Adaptation - the demon learns how hard to pull toward the reference.

If aligned experiences are worth more than non-aligned ones, the optimal
bias rises; otherwise it falls. current_bias follows optimal_bias through a
first-order low-pass filter and always stays within [0.1, 2.0].
"""
import math
from dataclasses import dataclass, replace

from groundloop.core.constants import (
    ALIGNED_THRESHOLD,
    BIAS_HISTORY_SIZE,
    BIAS_MAX,
    BIAS_MIN,
    DEMON_DEFAULT_BIAS,
    LEARNING_RATE,
    MIN_EXPERIENCES_FOR_LEARNING,
    VALUE_NEUTRAL,
)

from .experience import Experience
from .value import clamp


@dataclass(frozen=True)
class BiasAdaptation:
    current_bias: float = DEMON_DEFAULT_BIAS
    history: tuple[float, ...] = (DEMON_DEFAULT_BIAS,)
    adaptation_rate: float = LEARNING_RATE
    mu_success_rate: float = 0.5
    non_mu_success_rate: float = 0.5
    optimal_bias: float = DEMON_DEFAULT_BIAS


def create_bias_adaptation(initial_bias: float = DEMON_DEFAULT_BIAS) -> BiasAdaptation:
    initial_bias = clamp(initial_bias, BIAS_MIN, BIAS_MAX)
    return BiasAdaptation(
        current_bias=initial_bias,
        history=(initial_bias,),
        optimal_bias=initial_bias,
    )


def is_aligned(experience: Experience, threshold: float = ALIGNED_THRESHOLD) -> bool:
    return experience.mu_alignment > threshold


def _success_rate(group: list[Experience], fallback: float) -> float:
    if not group:
        return fallback
    return sum(1 for e in group if e.successful) / len(group)


def _average_value(group: list[Experience]) -> float:
    if not group:
        return VALUE_NEUTRAL
    return sum(e.computed_value for e in group) / len(group)


def adapt_bias(
    adaptation: BiasAdaptation,
    experiences: list[Experience],
    min_experiences: int = MIN_EXPERIENCES_FOR_LEARNING,
) -> BiasAdaptation:
    """Move current_bias toward the bias the replay window suggests.

    Below min_experiences the state is returned unchanged.
    """
    if len(experiences) < min_experiences:
        return adaptation

    aligned = [e for e in experiences if is_aligned(e)]
    non_aligned = [e for e in experiences if not is_aligned(e)]

    value_diff = _average_value(aligned) - _average_value(non_aligned)
    if not math.isfinite(value_diff):
        value_diff = 0.0
    optimal = clamp(adaptation.current_bias + value_diff, BIAS_MIN, BIAS_MAX)
    new_bias = adaptation.current_bias + adaptation.adaptation_rate * (optimal - adaptation.current_bias)
    new_bias = clamp(new_bias, BIAS_MIN, BIAS_MAX)

    return replace(
        adaptation,
        current_bias=new_bias,
        history=(adaptation.history + (new_bias,))[-BIAS_HISTORY_SIZE:],
        mu_success_rate=_success_rate(aligned, adaptation.mu_success_rate),
        non_mu_success_rate=_success_rate(non_aligned, adaptation.non_mu_success_rate),
        optimal_bias=optimal,
    )
