"""Geometry primitives: Vector2, the reference direction, the 8-fold basis."""
from .vector import ZERO, Vector2, wrap_angle
from .basis import (
    BASIS_VECTORS,
    CATEGORY_BASIS,
    CATEGORY_DIRECTIONS,
    REFERENCE,
    Category,
    angular_energy,
    basis_vector,
    category_direction,
    energy,
    is_on_reference_ray,
    nearest_basis_index,
    project_onto_basis,
    project_to_reference,
    radial_energy,
    reference_alignment,
    relative_phase,
)

__all__ = [
    "ZERO",
    "Vector2",
    "wrap_angle",
    "BASIS_VECTORS",
    "CATEGORY_BASIS",
    "CATEGORY_DIRECTIONS",
    "REFERENCE",
    "Category",
    "angular_energy",
    "basis_vector",
    "category_direction",
    "energy",
    "is_on_reference_ray",
    "nearest_basis_index",
    "project_onto_basis",
    "project_to_reference",
    "radial_energy",
    "reference_alignment",
    "relative_phase",
]
