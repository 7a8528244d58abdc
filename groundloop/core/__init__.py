"""Core primitives: receipts, schemas, constants."""
from .receipt import StopRule, dual_hash, emit_anomaly, emit_receipt, stoprule_contract
from .schemas import RECEIPT_SCHEMAS, REQUIRED_FIELDS, validate_receipt

__all__ = [
    "StopRule",
    "dual_hash",
    "emit_receipt",
    "emit_anomaly",
    "stoprule_contract",
    "RECEIPT_SCHEMAS",
    "REQUIRED_FIELDS",
    "validate_receipt",
]
