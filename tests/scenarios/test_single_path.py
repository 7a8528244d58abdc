"""Scenario: a superposition with one path.

Pass criteria:
- coherence = 1
- collapse always selects index 0 with probability 1
"""
import pytest

from groundloop.geometry import Category, Vector2
from groundloop.measure import collapse
from groundloop.quantum import build_superposition, create_path


class TestSinglePathScenario:
    """Degenerate but valid superposition."""

    @pytest.fixture
    def sup(self):
        return build_superposition([create_path("only", Category.HYBRID, Vector2(0.3, -2.0), confidence=0.6)])

    def test_coherence_one(self, sup):
        assert sup.coherence == 1.0

    @pytest.mark.parametrize("draw", [0.0, 0.25, 0.5, 0.999999])
    @pytest.mark.parametrize("weight", [0.0, 0.5, 5.0])
    def test_always_index_zero(self, sup, draw, weight):
        event = collapse(sup, weight, draw)
        assert event.selected_index == 0
        assert event.probability == pytest.approx(1.0)
