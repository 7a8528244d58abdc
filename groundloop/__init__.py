"""
groundloop - Grounded Selection and Learning Loop

Candidate paths are held as a weighted superposition, pulled toward a fixed
reference direction by a selection demon, collapsed one per cycle, and the
outcomes fed back to adapt how hard the demon pulls.

The Three Laws:
    LAW_1 = "Every selection pays its entropy cost"
    LAW_2 = "Every collapse is grounded on the reference"
    LAW_3 = "Every outcome is a lesson"
"""

__version__ = "0.1.0"

from groundloop.core.receipt import StopRule, dual_hash, emit_receipt
from groundloop.core.schemas import RECEIPT_SCHEMAS, validate_receipt
from groundloop.geometry import REFERENCE, Category, Vector2
from groundloop.quantum import (
    DemonState,
    Path,
    Superposition,
    build_superposition,
    create_aligned_path,
    create_demon,
    create_path,
    create_superposition,
    normalize,
    reweight,
    reweight_toward_reference,
)
from groundloop.measure import MeasurementConfig, MeasurementEvent, MeasurementHistory, collapse, measure
from groundloop.learning import Experience, LearningLayer, LearningResult, Outcome
from groundloop.cycle import CycleResult, CycleState, run_cycle

__all__ = [
    "StopRule",
    "dual_hash",
    "emit_receipt",
    "RECEIPT_SCHEMAS",
    "validate_receipt",
    "REFERENCE",
    "Category",
    "Vector2",
    "DemonState",
    "Path",
    "Superposition",
    "build_superposition",
    "create_aligned_path",
    "create_demon",
    "create_path",
    "create_superposition",
    "normalize",
    "reweight",
    "reweight_toward_reference",
    "MeasurementConfig",
    "MeasurementEvent",
    "MeasurementHistory",
    "collapse",
    "measure",
    "Experience",
    "LearningLayer",
    "LearningResult",
    "Outcome",
    "CycleResult",
    "CycleState",
    "run_cycle",
    "__version__",
]
