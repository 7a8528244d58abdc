"""Measurement: collapse, grounding, verification, uncertainty."""
from .collapse import (
    DEFAULT_MEASUREMENT_CONFIG,
    MeasurementConfig,
    MeasurementEvent,
    collapse,
    grounding_cost,
    measure,
    select_index,
)
from .history import MeasurementHistory
from .uncertainty import UncertaintyQuantification, quantify_uncertainty
from .verify import VerificationResult, verify

__all__ = [
    "DEFAULT_MEASUREMENT_CONFIG",
    "MeasurementConfig",
    "MeasurementEvent",
    "collapse",
    "grounding_cost",
    "measure",
    "select_index",
    "MeasurementHistory",
    "UncertaintyQuantification",
    "quantify_uncertainty",
    "VerificationResult",
    "verify",
]
