"""Reference direction, the 8-fold basis, and grounding geometry.

The reference direction sits at 135 degrees with unit magnitude. Every
alignment, grounding and energy figure is measured against it.

Basis index n points along REFERENCE^n, i.e. at n * 135 degrees (mod 360).
The eight directions are 45 degrees apart and close after eight steps.
"""
import math
from enum import Enum

from groundloop.core.constants import (
    BASIS_SIZE,
    ON_RAY_TOLERANCE,
    REFERENCE_ANGLE,
    REFERENCE_MAGNITUDE,
)

from .vector import Vector2, wrap_angle


REFERENCE = Vector2.unit(REFERENCE_ANGLE).scale(REFERENCE_MAGNITUDE)


class Category(str, Enum):
    """The eight path categories. Each owns one basis direction."""
    INTEGRATIVE = "integrative"
    INTUITIVE = "intuitive"
    ANALYTICAL = "analytical"
    CREATIVE = "creative"
    CRITICAL = "critical"
    SYMBOLIC = "symbolic"
    NEURAL = "neural"
    HYBRID = "hybrid"


CATEGORY_BASIS: dict[Category, int] = {
    Category.INTEGRATIVE: 0,   # 0 deg, unity
    Category.INTUITIVE: 1,     # 135 deg, the reference itself
    Category.ANALYTICAL: 2,    # 270 deg
    Category.CREATIVE: 3,      # 45 deg
    Category.CRITICAL: 4,      # 180 deg
    Category.SYMBOLIC: 5,      # 315 deg, opposite the reference
    Category.NEURAL: 6,        # 90 deg
    Category.HYBRID: 7,        # 225 deg
}

BASIS_VECTORS: tuple[Vector2, ...] = tuple(
    Vector2.unit(n * REFERENCE_ANGLE) for n in range(BASIS_SIZE)
)

CATEGORY_DIRECTIONS: dict[Category, Vector2] = {
    category: BASIS_VECTORS[index] for category, index in CATEGORY_BASIS.items()
}


def basis_vector(n: int) -> Vector2:
    """n-th basis vector, index taken mod 8 (negative indices wrap)."""
    return BASIS_VECTORS[n % BASIS_SIZE]


def category_direction(category: Category) -> Vector2:
    """Canonical unit direction for a category."""
    return CATEGORY_DIRECTIONS[category]


def project_onto_basis(v: Vector2) -> list[float]:
    """Real coefficient of v along each basis vector (dot products)."""
    return [v.dot(b) for b in BASIS_VECTORS]


def nearest_basis_index(v: Vector2) -> int:
    """Index of the basis vector closest in angle to v."""
    phase = v.angle
    nearest = 0
    min_diff = abs(wrap_angle(phase - BASIS_VECTORS[0].angle))
    for i in range(1, BASIS_SIZE):
        diff = abs(wrap_angle(phase - BASIS_VECTORS[i].angle))
        if diff < min_diff:
            min_diff = diff
            nearest = i
    return nearest


# === GROUNDING ===

def project_to_reference(v: Vector2) -> Vector2:
    """Orthogonal projection of v onto the line spanned by the reference.

    Scalar projection, not a renormalization: the result is REFERENCE * (v . REFERENCE).
    """
    return REFERENCE.scale(v.dot(REFERENCE))


def is_on_reference_ray(v: Vector2) -> bool:
    """True if v already lies on the reference line."""
    return v.distance(project_to_reference(v)) < ON_RAY_TOLERANCE


def reference_alignment(v: Vector2) -> float:
    """Cosine similarity with the reference mapped to [0, 1].

    1 = same direction, 0.5 = orthogonal, 0 = opposite. Zero vector -> 0.
    """
    mag = v.magnitude * REFERENCE.magnitude
    if mag <= 0 or not math.isfinite(mag):
        return 0.0
    return (v.dot(REFERENCE) / mag + 1) / 2


def relative_phase(v: Vector2) -> float:
    """Phase of v relative to the reference angle, wrapped to [-pi, pi]."""
    return wrap_angle(v.angle - REFERENCE_ANGLE)


# === ENERGY: deviation from the reference ===

def radial_energy(v: Vector2, target_magnitude: float = REFERENCE_MAGNITUDE) -> float:
    """(|v| - target)^2 - energy from sitting at the wrong magnitude."""
    diff = v.magnitude - target_magnitude
    return diff * diff


def angular_energy(v: Vector2) -> float:
    """sin^2(angle - 135 deg) - zero on the reference line, one when orthogonal."""
    deviation = math.sin(v.angle - REFERENCE_ANGLE)
    return deviation * deviation


def energy(v: Vector2) -> float:
    """Total energy: radial deviation from unit magnitude plus angular deviation."""
    return radial_energy(v, REFERENCE_MAGNITUDE) + angular_energy(v)
