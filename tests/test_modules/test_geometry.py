"""Tests for vectors, the 8-fold basis, and grounding geometry."""
import math

import pytest

from groundloop.geometry import (
    BASIS_VECTORS,
    REFERENCE,
    Category,
    Vector2,
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
    wrap_angle,
)


class TestVector2:
    """Vector2 arithmetic."""

    def test_magnitude_and_angle(self):
        v = Vector2(3.0, 4.0)
        assert v.magnitude == 5.0
        assert v.angle == pytest.approx(math.atan2(4.0, 3.0))

    def test_operators(self):
        a = Vector2(1.0, 2.0)
        b = Vector2(3.0, -1.0)
        assert a + b == Vector2(4.0, 1.0)
        assert a - b == Vector2(-2.0, 3.0)
        assert 2 * a == Vector2(2.0, 4.0)
        assert a.dot(b) == 1.0

    def test_rotate_quarter_turn(self):
        v = Vector2(1.0, 0.0).rotate(math.pi / 2)
        assert v.x == pytest.approx(0.0, abs=1e-12)
        assert v.y == pytest.approx(1.0)

    def test_is_finite(self):
        assert Vector2(1.0, 2.0).is_finite()
        assert not Vector2(math.nan, 0.0).is_finite()

    def test_wrap_angle(self):
        assert wrap_angle(3 * math.pi) == pytest.approx(math.pi)
        assert wrap_angle(-3 * math.pi) == pytest.approx(-math.pi)
        assert wrap_angle(0.5) == 0.5


class TestBasis:
    """8-fold basis: index n sits at n * 135 degrees."""

    def test_reference_is_135_degrees(self):
        assert REFERENCE.angle_degrees == pytest.approx(135.0)
        assert REFERENCE.magnitude == pytest.approx(1.0)

    def test_index_one_is_reference(self):
        assert basis_vector(1).x == pytest.approx(REFERENCE.x)
        assert basis_vector(1).y == pytest.approx(REFERENCE.y)

    def test_indices_wrap_mod_8(self):
        assert basis_vector(8) == basis_vector(0)
        assert basis_vector(-1) == basis_vector(7)
        assert basis_vector(11) == basis_vector(3)

    def test_eight_distinct_directions_45_degrees_apart(self):
        angles = sorted(round(math.degrees(v.angle) % 360) % 360 for v in BASIS_VECTORS)
        assert angles == [0, 45, 90, 135, 180, 225, 270, 315]

    def test_category_directions(self):
        assert category_direction(Category.INTEGRATIVE).angle_degrees == pytest.approx(0.0)
        assert category_direction(Category.CRITICAL).angle_degrees == pytest.approx(180.0)
        assert nearest_basis_index(category_direction(Category.INTUITIVE)) == 1

    def test_project_onto_basis(self):
        coefficients = project_onto_basis(REFERENCE)
        assert len(coefficients) == 8
        assert coefficients[1] == pytest.approx(1.0)
        assert coefficients[5] == pytest.approx(-1.0)


class TestGrounding:
    """Projection onto the reference line and derived figures."""

    def test_projection_of_x_axis(self):
        p = project_to_reference(Vector2(1.0, 0.0))
        assert p.x == pytest.approx(0.5)
        assert p.y == pytest.approx(-0.5)

    def test_projection_idempotent(self):
        grounded = REFERENCE.scale(0.7)
        again = project_to_reference(grounded)
        assert again.x == pytest.approx(grounded.x)
        assert again.y == pytest.approx(grounded.y)

    def test_on_ray_includes_both_directions(self):
        assert is_on_reference_ray(REFERENCE.scale(2.0))
        assert is_on_reference_ray(REFERENCE.scale(-1.0))
        assert not is_on_reference_ray(Vector2(1.0, 1.0))

    def test_alignment_scale(self):
        assert reference_alignment(REFERENCE) == pytest.approx(1.0)
        assert reference_alignment(REFERENCE.scale(-1.0)) == pytest.approx(0.0)
        assert reference_alignment(Vector2(1.0, 1.0)) == pytest.approx(0.5)
        assert reference_alignment(Vector2(0.0, 0.0)) == 0.0

    def test_relative_phase(self):
        assert relative_phase(REFERENCE) == pytest.approx(0.0)
        assert relative_phase(Vector2(1.0, 1.0)) == pytest.approx(-math.pi / 2)

    def test_energy(self):
        assert energy(REFERENCE) == pytest.approx(0.0, abs=1e-12)
        assert radial_energy(Vector2(2.0, 0.0)) == pytest.approx(1.0)
        # zero vector: radial 1, angle 0 is 135 degrees off
        assert energy(Vector2(0.0, 0.0)) == pytest.approx(1.5)
