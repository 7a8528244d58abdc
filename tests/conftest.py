"""Test configuration and fixtures for groundloop.

Fixtures build the standard path sets used across unit and scenario tests,
and give access to the receipts a test emitted.
"""
import json
import math

import pytest

from groundloop.geometry import Category, Vector2
from groundloop.learning import LearningLayer, Outcome
from groundloop.quantum import create_aligned_path, create_path


def parse_receipts(text: str) -> list[dict]:
    """Parse the JSON receipt lines out of captured stdout."""
    receipts = []
    for line in text.splitlines():
        line = line.strip()
        if line.startswith("{"):
            receipts.append(json.loads(line))
    return receipts


@pytest.fixture
def receipts(capsys):
    """Callable returning receipts emitted so far in the test."""
    def _read() -> list[dict]:
        return parse_receipts(capsys.readouterr().out)
    return _read


@pytest.fixture
def compass_paths() -> list:
    """Four unit paths at 0, 90, 180 and 270 degrees, confidence 0.8."""
    categories = [Category.INTEGRATIVE, Category.NEURAL, Category.CRITICAL, Category.ANALYTICAL]
    return [
        create_path(f"p{i}", category, Vector2.from_polar(1.0, math.radians(90 * i)), confidence=0.8)
        for i, category in enumerate(categories)
    ]


@pytest.fixture
def reference_path():
    """A unit path lying exactly on the reference direction."""
    return create_aligned_path("ref", Category.INTUITIVE, 1.0)


@pytest.fixture
def opposite_path():
    """A unit path pointing away from the reference (315 degrees)."""
    return create_aligned_path("opp", Category.SYMBOLIC, 1.0)


@pytest.fixture
def split_layer(reference_path, opposite_path) -> LearningLayer:
    """Layer holding 10 aligned successes followed by 10 non-aligned failures."""
    layer = LearningLayer()
    for _ in range(10):
        layer.record_experience(reference_path, 1.0, 0.5, Outcome(True, 0.5, 0.9))
    for _ in range(10):
        layer.record_experience(opposite_path, 1.0, 0.5, Outcome(False, 0.5, 0.1))
    return layer
