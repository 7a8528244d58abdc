"""Receipt schema definitions and validation.

Constants:
    RECEIPT_SCHEMAS: Schema dicts keyed by receipt_type
    REQUIRED_FIELDS: Fields required in all receipts

Functions:
    validate_receipt: Validate receipt against schema
"""
from .receipt import StopRule


# Required fields for all receipt types
REQUIRED_FIELDS = ["receipt_type", "ts", "tenant_id", "payload_hash"]

_NUMBER = (int, float)

RECEIPT_SCHEMAS = {
    "demon_selection": {
        "bias_strength": _NUMBER,
        "entropy_before": _NUMBER,
        "entropy_after": _NUMBER,
        "entropy_reduced": _NUMBER,
        "information_cost": _NUMBER,
        "selections_made": int,
        "n_paths": int,
    },
    "measurement": {
        "selected_index": int,
        "category": str,
        "probability": _NUMBER,
        "grounding_cost": _NUMBER,
        "verified": bool,
        "verification_score": _NUMBER,
        "uncertainty": _NUMBER,
        "confidence": _NUMBER,
        "reference_weight": _NUMBER,
        "born_rule": str,
        "projected": bool,
        "probabilities_hash": str,
    },
    "experience": {
        "experience_id": str,
        "category": str,
        "computed_value": _NUMBER,
        "successful": bool,
        "buffer_size": int,
    },
    "learning": {
        "status": str,
        "updated": bool,
        "average_error": _NUMBER,
        "new_bias": _NUMBER,
        "batch_size": int,
    },
    "bias_adaptation": {
        "old_bias": _NUMBER,
        "new_bias": _NUMBER,
        "optimal_bias": _NUMBER,
        "mu_success_rate": _NUMBER,
        "non_mu_success_rate": _NUMBER,
        "aligned_count": int,
        "non_aligned_count": int,
    },
    "learning_event": {
        "event_type": str,
    },
    "cycle": {
        "cycle": int,
        "selected_index": int,
        "verified": bool,
        "learned": bool,
        "bias": _NUMBER,
    },
    "anomaly": {
        "metric": str,
        "baseline": _NUMBER,
        "delta": _NUMBER,
        "classification": str,
        "action": str,
    },
}


def validate_receipt(receipt: dict) -> bool:
    """Validate receipt has required fields and matches schema.

    Args:
        receipt: Receipt dict to validate

    Returns:
        True if valid

    Raises:
        StopRule: If validation fails (missing field, unknown receipt_type,
            or a schema field with the wrong type)
    """
    if not isinstance(receipt, dict):
        raise StopRule("Receipt must be a dict")

    for field in REQUIRED_FIELDS:
        if field not in receipt:
            raise StopRule(f"Missing required field: {field}")

    receipt_type = receipt["receipt_type"]
    if receipt_type not in RECEIPT_SCHEMAS:
        raise StopRule(f"Unknown receipt_type: {receipt_type}")

    for field, expected in RECEIPT_SCHEMAS[receipt_type].items():
        if field not in receipt:
            raise StopRule(f"{receipt_type} receipt missing field: {field}")
        value = receipt[field]
        # bool is an int subclass; keep numeric fields honest
        if expected is not bool and isinstance(value, bool):
            raise StopRule(f"{receipt_type}.{field} must not be bool")
        if not isinstance(value, expected):
            raise StopRule(f"{receipt_type}.{field} has wrong type: {type(value).__name__}")

    return True
