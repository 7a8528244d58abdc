"""Verification - graded check of a collapsed amplitude against the reference.

passed = alignment >= threshold AND confidence >= threshold.
The on-ray and low-energy checks feed the score but never gate.
"""
from dataclasses import dataclass

from groundloop.core.constants import (
    VERIFY_ALIGNMENT_THRESHOLD,
    VERIFY_CONFIDENCE_THRESHOLD,
    VERIFY_LOW_ENERGY_THRESHOLD,
    VERIFY_WEIGHTS,
)
from groundloop.geometry import Vector2, energy, is_on_reference_ray, reference_alignment
from groundloop.quantum import Path


@dataclass(frozen=True)
class VerificationResult:
    passed: bool
    score: float                 # graded, 0-1
    alignment: float             # cosine to the reference mapped to 0-1
    energy_level: float
    on_reference_ray: bool
    confidence_check: bool
    details: tuple[str, ...]


def verify(
    amplitude: Vector2,
    path: Path,
    alignment_threshold: float = VERIFY_ALIGNMENT_THRESHOLD,
    confidence_threshold: float = VERIFY_CONFIDENCE_THRESHOLD,
) -> VerificationResult:
    """Verify a collapsed amplitude.

    Args:
        amplitude: Amplitude to check (usually the grounded one)
        path: Path it came from (supplies confidence)
        alignment_threshold: Minimum alignment to pass
        confidence_threshold: Minimum path confidence to pass

    Returns:
        VerificationResult
    """
    details = []

    on_ray = is_on_reference_ray(amplitude)
    details.append("on reference ray" if on_ray else "off reference ray")

    alignment = reference_alignment(amplitude)
    alignment_passed = alignment >= alignment_threshold
    if alignment_passed:
        details.append(f"alignment {alignment:.1%}")
    else:
        details.append(f"alignment {alignment:.1%} below {alignment_threshold:.0%}")

    energy_level = energy(amplitude)
    low_energy = energy_level < VERIFY_LOW_ENERGY_THRESHOLD
    details.append(f"{'low' if low_energy else 'high'} energy {energy_level:.4f}")

    confidence_check = path.confidence >= confidence_threshold
    if confidence_check:
        details.append(f"confidence {path.confidence:.1%}")
    else:
        details.append(f"confidence {path.confidence:.1%} below {confidence_threshold:.0%}")

    score = (
        (VERIFY_WEIGHTS["on_ray"] if on_ray else 0.0)
        + VERIFY_WEIGHTS["alignment"] * alignment
        + VERIFY_WEIGHTS["energy"] * (1 - min(energy_level, 1.0))
        + VERIFY_WEIGHTS["confidence"] * path.confidence
    )

    return VerificationResult(
        passed=alignment_passed and confidence_check,
        score=score,
        alignment=alignment,
        energy_level=energy_level,
        on_reference_ray=on_ray,
        confidence_check=confidence_check,
        details=tuple(details),
    )
