"""Tests for receipt emission, hashing and schema validation."""
import json

import pytest

from groundloop.core.receipt import StopRule, dual_hash, emit_anomaly, emit_receipt, stoprule_contract
from groundloop.core.schemas import RECEIPT_SCHEMAS, REQUIRED_FIELDS, validate_receipt


class TestDualHash:
    """sha256:blake3 format."""

    def test_format(self):
        h = dual_hash("groundloop")
        sha, b3 = h.split(":")
        assert len(sha) == 64
        assert len(b3) == 64
        assert sha != b3

    def test_dict_key_order_irrelevant(self):
        assert dual_hash({"a": 1, "b": 2}) == dual_hash({"b": 2, "a": 1})

    def test_bytes_and_str_agree(self):
        assert dual_hash("x") == dual_hash(b"x")


class TestEmitReceipt:
    """One JSON line per receipt."""

    def test_prints_json_line(self, capsys):
        receipt = emit_receipt("learning_event", {"event_type": "bias_adapted"}, tenant_id="t1")
        line = capsys.readouterr().out.strip()
        assert json.loads(line) == receipt
        assert receipt["tenant_id"] == "t1"
        for field in REQUIRED_FIELDS:
            assert field in receipt

    def test_payload_hash_covers_data(self):
        a = emit_receipt("learning_event", {"event_type": "a"})
        b = emit_receipt("learning_event", {"event_type": "b"})
        assert a["payload_hash"] != b["payload_hash"]

    def test_anomaly_carries_extra_fields(self):
        receipt = emit_anomaly("m", "degradation", "zero_step", baseline=0.5, experience_id="exp_1")
        assert receipt["receipt_type"] == "anomaly"
        assert receipt["experience_id"] == "exp_1"
        assert receipt["baseline"] == 0.5
        assert validate_receipt(receipt)

    def test_stoprule_contract_emits_then_raises(self, receipts):
        with pytest.raises(StopRule, match="boom"):
            stoprule_contract("test_metric", "boom")
        anomaly = receipts()[-1]
        assert anomaly["receipt_type"] == "anomaly"
        assert anomaly["classification"] == "violation"
        assert validate_receipt(anomaly)


class TestValidateReceipt:
    """Schema enforcement."""

    def _receipt(self, **overrides):
        receipt = {
            "receipt_type": "cycle",
            "ts": "2026-01-01T00:00:00Z",
            "tenant_id": "default",
            "payload_hash": "x:y",
            "cycle": 1,
            "selected_index": 0,
            "verified": True,
            "learned": False,
            "bias": 1.0,
        }
        receipt.update(overrides)
        return receipt

    def test_valid(self):
        assert validate_receipt(self._receipt())

    def test_missing_required(self):
        receipt = self._receipt()
        del receipt["ts"]
        with pytest.raises(StopRule):
            validate_receipt(receipt)

    def test_unknown_type(self):
        with pytest.raises(StopRule):
            validate_receipt(self._receipt(receipt_type="mystery"))

    def test_bool_not_a_number(self):
        with pytest.raises(StopRule):
            validate_receipt(self._receipt(bias=True))

    def test_wrong_type(self):
        with pytest.raises(StopRule):
            validate_receipt(self._receipt(cycle="one"))

    def test_not_a_dict(self):
        with pytest.raises(StopRule):
            validate_receipt(["cycle"])

    def test_every_schema_has_fields(self):
        assert all(RECEIPT_SCHEMAS[t] for t in RECEIPT_SCHEMAS)
