"""Receipts: one JSON line on stdout per state change.

Functions:
    dual_hash: 'sha256hex:blake3hex' digest of bytes, str or dict
    emit_receipt: Stamp ts, tenant_id and payload_hash onto a payload and print it
    emit_anomaly: Receipt for degraded numerics or rejected input
    stoprule_contract: emit_anomaly, then raise StopRule
"""
import hashlib
import json
from datetime import datetime, timezone

import blake3


class StopRule(Exception):
    """Raised when a caller breaks a contract. Never catch silently."""


def _canonical(data) -> bytes:
    if isinstance(data, dict):
        data = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    if isinstance(data, str):
        data = data.encode("utf-8")
    return data


def dual_hash(data: bytes | str | dict) -> str:
    """Hash data with SHA256 and BLAKE3.

    Dicts are serialized with sorted keys first, so key order never matters.

    Returns:
        'sha256hex:blake3hex', both 64 hex chars
    """
    raw = _canonical(data)
    return f"{hashlib.sha256(raw).hexdigest()}:{blake3.blake3(raw).hexdigest()}"


def emit_receipt(receipt_type: str, data: dict, tenant_id: str = "default") -> dict:
    """Print a receipt and return it.

    Args:
        receipt_type: One of the types in RECEIPT_SCHEMAS
        data: Payload; a tenant_id key here overrides the argument
        tenant_id: Tenant identifier

    Returns:
        The receipt dict: receipt_type, ts, tenant_id, payload_hash plus data
    """
    receipt = {
        "receipt_type": receipt_type,
        "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "tenant_id": data.get("tenant_id", tenant_id),
        "payload_hash": dual_hash(json.dumps(data, sort_keys=True, default=str)),
        **data
    }
    print(json.dumps(receipt, sort_keys=True, default=str), flush=True)
    return receipt


def emit_anomaly(
    metric: str,
    classification: str,
    action: str,
    baseline: float = 0.0,
    delta: float = 0.0,
    tenant_id: str = "default",
    **extra,
) -> dict:
    """Emit an anomaly receipt.

    classification: violation | degenerate | degradation
    action: what the code did about it (reject, passthrough, zero_step)
    """
    return emit_receipt("anomaly", {
        "metric": metric,
        "baseline": baseline,
        "delta": delta,
        "classification": classification,
        "action": action,
        **extra,
    }, tenant_id=tenant_id)


def stoprule_contract(metric: str, message: str, tenant_id: str = "default"):
    """Reject a contract violation: anomaly receipt, then StopRule."""
    emit_anomaly(metric, "violation", "reject", tenant_id=tenant_id, message=message)
    raise StopRule(message)
