"""Superposition engine and selection demon."""
from .superposition import (
    DEFAULT_BORN_CONFIG,
    BornRuleConfig,
    InterferenceResult,
    Path,
    Superposition,
    born_probabilities,
    build_superposition,
    confidence_weighted_probabilities,
    create_aligned_path,
    create_path,
    create_superposition,
    grounded_born_probabilities,
    interfere,
    interference_pattern,
    normalize,
    shannon_entropy,
    soft_collapse,
)
from .demon import (
    DemonMeasurement,
    DemonState,
    create_demon,
    demon_at_measurement,
    information_cost,
    reasoning_step,
    reweight,
    reweight_toward_reference,
)
from .validate import (
    Constraint,
    ValidationResult,
    alignment_constraint,
    confidence_constraint,
    validate,
)

__all__ = [
    "DEFAULT_BORN_CONFIG",
    "BornRuleConfig",
    "InterferenceResult",
    "Path",
    "Superposition",
    "born_probabilities",
    "build_superposition",
    "confidence_weighted_probabilities",
    "create_aligned_path",
    "create_path",
    "create_superposition",
    "grounded_born_probabilities",
    "interfere",
    "interference_pattern",
    "normalize",
    "shannon_entropy",
    "soft_collapse",
    "DemonMeasurement",
    "DemonState",
    "create_demon",
    "demon_at_measurement",
    "information_cost",
    "reasoning_step",
    "reweight",
    "reweight_toward_reference",
    "Constraint",
    "ValidationResult",
    "alignment_constraint",
    "confidence_constraint",
    "validate",
]
