"""Superposition Module - weighted candidate paths held side by side.

psi = sum_i a_i |path_i>, normalized so that sum_i |a_i|^2 = 1.

Amplitudes are ordinary 2D vectors. Probability is |a|^2 (Born rule),
optionally tilted toward the reference direction, or weighted by reference
distance, confidence and energy together (grounded Born rule).
"""
import math
from dataclasses import dataclass, replace
from typing import Any

from groundloop.core.constants import (
    BORN_CONFIDENCE_WEIGHT,
    BORN_NEUTRAL_CONFIDENCE,
    BORN_REFERENCE_WEIGHT,
    BORN_TEMPERATURE,
    CONSTRUCTIVE_RATIO,
    DESTRUCTIVE_RATIO,
    NORMALIZED_TOLERANCE,
    SOFT_COLLAPSE_STRENGTH,
)
from groundloop.core.receipt import emit_anomaly, stoprule_contract
from groundloop.geometry import (
    REFERENCE,
    ZERO,
    Category,
    Vector2,
    category_direction,
    energy,
    is_on_reference_ray,
    nearest_basis_index,
    relative_phase,
    wrap_angle,
)


@dataclass(frozen=True)
class Path:
    """A candidate interpretation with an amplitude and a classical confidence.

    saliency and relevance are value-function features supplied by the
    stimulus generator; they do not affect selection.
    """
    id: str
    category: Category
    amplitude: Vector2
    content: Any = None
    confidence: float = 1.0
    saliency: float = 0.5
    relevance: float = 0.5

    @property
    def magnitude(self) -> float:
        return self.amplitude.magnitude

    @property
    def phase(self) -> float:
        return self.amplitude.angle

    @property
    def relative_phase(self) -> float:
        return relative_phase(self.amplitude)

    @property
    def basis_index(self) -> int:
        return nearest_basis_index(self.amplitude)

    @property
    def on_reference_ray(self) -> bool:
        return is_on_reference_ray(self.amplitude)


def create_path(
    path_id: str,
    category: Category,
    amplitude: Vector2,
    content: Any = None,
    confidence: float = 1.0,
    saliency: float = 0.5,
    relevance: float = 0.5,
) -> Path:
    """Create a path, rejecting confidences outside [0, 1].

    Raises:
        StopRule: If confidence is not a finite value in [0, 1]
    """
    if not (math.isfinite(confidence) and 0.0 <= confidence <= 1.0):
        stoprule_contract("path_confidence", f"Path {path_id} confidence {confidence} outside [0, 1]")
    return Path(
        id=path_id,
        category=Category(category),
        amplitude=amplitude,
        content=content,
        confidence=confidence,
        saliency=saliency,
        relevance=relevance,
    )


def create_aligned_path(
    path_id: str,
    category: Category,
    magnitude: float,
    content: Any = None,
    confidence: float = 1.0,
    saliency: float = 0.5,
    relevance: float = 0.5,
) -> Path:
    """Create a path pointing along its category's basis direction."""
    amplitude = category_direction(Category(category)).scale(magnitude)
    return create_path(path_id, category, amplitude, content, confidence, saliency, relevance)


@dataclass(frozen=True)
class Superposition:
    """An ordered set of paths plus derived probability figures. Pure value."""
    paths: tuple[Path, ...]
    amplitudes: tuple[Vector2, ...]
    total_probability: float
    normalized: bool
    dominant_index: int
    coherence: float

    def __len__(self) -> int:
        return len(self.paths)


def create_superposition(paths) -> Superposition:
    """Compute amplitudes, mass, dominant index and coherence. Inputs untouched.

    Coherence uses the arithmetic mean of the raw phase angles, then wraps each
    deviation into [-pi, pi]: coherence = exp(-mean squared deviation).
    """
    paths = tuple(paths)
    amplitudes = tuple(p.amplitude for p in paths)
    probabilities = [a.magnitude ** 2 for a in amplitudes]
    total = sum(probabilities)

    max_prob = 0.0
    dominant = 0
    for i, p in enumerate(probabilities):
        if p > max_prob:
            max_prob = p
            dominant = i

    if amplitudes:
        phases = [a.angle for a in amplitudes]
        avg_phase = sum(phases) / len(phases)
        variance = sum(wrap_angle(p - avg_phase) ** 2 for p in phases) / len(phases)
        coherence = math.exp(-variance)
    else:
        coherence = 1.0

    return Superposition(
        paths=paths,
        amplitudes=amplitudes,
        total_probability=total,
        normalized=abs(total - 1.0) < NORMALIZED_TOLERANCE,
        dominant_index=dominant,
        coherence=coherence,
    )


def normalize(sup: Superposition) -> Superposition:
    """Rescale every amplitude by 1/sqrt(total mass).

    Zero mass returns the input unchanged.
    """
    total = sup.total_probability
    if total == 0 or not math.isfinite(total):
        return sup

    factor = 1.0 / math.sqrt(total)
    return create_superposition(
        replace(path, amplitude=path.amplitude.scale(factor)) for path in sup.paths
    )


def build_superposition(paths, tenant_id: str = "default") -> Superposition:
    """Build and normalize the weighted set for one cycle.

    Args:
        paths: Non-empty iterable of Path
        tenant_id: Tenant identifier for receipts

    Returns:
        Normalized Superposition (unnormalized if every amplitude is zero)

    Raises:
        StopRule: If paths is empty
    """
    paths = tuple(paths)
    if not paths:
        stoprule_contract("superposition_paths", "Cannot build a superposition from zero paths", tenant_id)

    sup = create_superposition(paths)
    if sup.total_probability == 0:
        emit_anomaly("superposition_mass", "degenerate", "passthrough",
                     baseline=1.0, delta=-1.0, tenant_id=tenant_id)
        return sup
    return normalize(sup)


# === INTERFERENCE ===

@dataclass(frozen=True)
class InterferenceResult:
    """Outcome of adding two amplitudes after a phase shift."""
    amplitude1: Vector2
    amplitude2: Vector2          # after phase shift
    combined: Vector2
    classification: str          # constructive | destructive | partial
    strength: float
    phase_difference: float
    relative_to_reference: float


def interfere(a: Vector2, b: Vector2, phase_shift: float = 0.0) -> InterferenceResult:
    """Combine a with b rotated by phase_shift and classify the result."""
    shifted = b.rotate(phase_shift)
    combined = a.add(shifted)

    mag1 = a.magnitude
    mag2 = shifted.magnitude
    mag_combined = combined.magnitude

    if mag_combined > CONSTRUCTIVE_RATIO * (mag1 + mag2):
        classification = "constructive"
    elif mag_combined < DESTRUCTIVE_RATIO * abs(mag1 - mag2):
        classification = "destructive"
    else:
        classification = "partial"

    no_interference = math.sqrt(mag1 * mag1 + mag2 * mag2)
    strength = abs(mag_combined - no_interference) / no_interference if no_interference > 0 else 0.0

    return InterferenceResult(
        amplitude1=a,
        amplitude2=shifted,
        combined=combined,
        classification=classification,
        strength=strength,
        phase_difference=wrap_angle(shifted.angle - a.angle),
        relative_to_reference=relative_phase(combined),
    )


def interference_pattern(sup: Superposition) -> dict:
    """Sum all amplitudes and count pairwise interference types.

    Returns:
        Dict with total_amplitude, constructive_count, destructive_count,
        coherence_boost (|sum|^2 / sum |a_i|^2, 1.0 for zero mass)
    """
    total = ZERO
    for amp in sup.amplitudes:
        total = total.add(amp)

    constructive = 0
    destructive = 0
    n = len(sup.amplitudes)
    for i in range(n):
        for j in range(i + 1, n):
            kind = interfere(sup.amplitudes[i], sup.amplitudes[j]).classification
            if kind == "constructive":
                constructive += 1
            elif kind == "destructive":
                destructive += 1

    sum_squares = sum(a.magnitude ** 2 for a in sup.amplitudes)
    boost = total.magnitude ** 2 / sum_squares if sum_squares > 0 else 1.0

    return {
        "total_amplitude": total,
        "constructive_count": constructive,
        "destructive_count": destructive,
        "coherence_boost": boost,
    }


# === BORN RULE ===

def _renormalize(weights: list[float]) -> list[float]:
    """Scale weights to sum to 1; all-zero or non-finite mass becomes uniform."""
    n = len(weights)
    if n == 0:
        return []
    weights = [w if math.isfinite(w) and w > 0 else 0.0 for w in weights]
    total = sum(weights)
    if total <= 0 or not math.isfinite(total):
        return [1.0 / n] * n
    return [w / total for w in weights]


def _from_log_weights(log_weights: list[float | None]) -> list[float]:
    """exp(log_w - max log_w), renormalized. None marks a zero weight.

    Shifting by the max keeps exp() in range for any finite exponent.
    """
    finite = [lw for lw in log_weights if lw is not None and math.isfinite(lw)]
    if not finite:
        return _renormalize([0.0] * len(log_weights))
    top = max(finite)
    return _renormalize([
        math.exp(lw - top) if lw is not None and math.isfinite(lw) else 0.0
        for lw in log_weights
    ])


def _log_mass(amp: Vector2) -> float | None:
    mag = amp.magnitude
    if not (mag > 0 and math.isfinite(mag)):
        return None
    return 2.0 * math.log(mag)


def born_probabilities(sup: Superposition, reference_weight: float = 0.0) -> list[float]:
    """P(i) = |a_i|^2 * exp(-reference_weight * |a_i - REFERENCE|), renormalized.

    reference_weight = 0 is the plain Born rule. The tilt is applied in log
    space, so a large negative weight favours the far paths instead of
    overflowing.
    """
    if reference_weight == 0:
        return _renormalize([a.magnitude ** 2 for a in sup.amplitudes])

    log_weights = []
    for amp in sup.amplitudes:
        log_mass = _log_mass(amp)
        if log_mass is None:
            log_weights.append(None)
            continue
        log_weights.append(log_mass - reference_weight * amp.distance(REFERENCE))
    return _from_log_weights(log_weights)


@dataclass(frozen=True)
class BornRuleConfig:
    """Weights of the grounded Born rule.

    reference_weight: pull toward the reference (0 = none)
    confidence_weight: pull toward confident paths (0 = none)
    temperature: Boltzmann temperature over path energy, must be > 0
    """
    reference_weight: float = BORN_REFERENCE_WEIGHT
    confidence_weight: float = BORN_CONFIDENCE_WEIGHT
    temperature: float = BORN_TEMPERATURE


DEFAULT_BORN_CONFIG = BornRuleConfig()


def grounded_born_probabilities(
    sup: Superposition,
    config: BornRuleConfig = DEFAULT_BORN_CONFIG,
    tenant_id: str = "default",
) -> list[float]:
    """Born rule with reference, confidence and energy factors.

    P(i) ~ |a_i|^2 * exp(-w * d_i) * (1 + cw * (conf_i - 0.5)) * exp(-E(a_i) / T)

    A non-positive confidence factor gives the path zero weight.

    Raises:
        StopRule: If temperature is not a finite value > 0
    """
    if not (math.isfinite(config.temperature) and config.temperature > 0):
        stoprule_contract("born_temperature", f"Temperature {config.temperature} must be > 0", tenant_id)

    log_weights = []
    for path, amp in zip(sup.paths, sup.amplitudes):
        log_mass = _log_mass(amp)
        conf_factor = 1.0 + config.confidence_weight * (path.confidence - BORN_NEUTRAL_CONFIDENCE)
        if log_mass is None or not conf_factor > 0:
            log_weights.append(None)
            continue
        log_weights.append(
            log_mass
            - config.reference_weight * amp.distance(REFERENCE)
            + math.log(conf_factor)
            - energy(amp) / config.temperature
        )
    return _from_log_weights(log_weights)


def confidence_weighted_probabilities(sup: Superposition) -> list[float]:
    """P(i) = |a_i|^2 * confidence_i, renormalized."""
    return _renormalize([
        sup.amplitudes[i].magnitude ** 2 * path.confidence
        for i, path in enumerate(sup.paths)
    ])


def shannon_entropy(probabilities) -> float:
    """H = -sum p ln p, in nats."""
    h = 0.0
    for p in probabilities:
        if p > 0:
            h -= p * math.log(p)
    return h


def soft_collapse(
    sup: Superposition,
    measured_index: int,
    strength: float = SOFT_COLLAPSE_STRENGTH,
) -> Superposition:
    """Partial measurement: boost the measured path, shrink the rest, keep phases.

    strength 0 = no change, 1 = full collapse.
    """
    new_paths = []
    for i, path in enumerate(sup.paths):
        mag = path.magnitude
        if i == measured_index:
            mag = mag + (1 - mag) * strength
        else:
            mag = mag * (1 - strength)
        new_paths.append(replace(path, amplitude=Vector2.from_polar(mag, path.phase)))
    return normalize(create_superposition(new_paths))
