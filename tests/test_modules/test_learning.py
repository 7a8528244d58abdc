"""Tests for experiences, credit, value function, bias and the learning layer."""
import dataclasses
import math

import pytest

from groundloop.core.schemas import validate_receipt
from groundloop.geometry import Category
from groundloop.learning import (
    LearningLayer,
    Outcome,
    ValueFunction,
    adapt_bias,
    apply_credit,
    assign_credit,
    compute_category_stats,
    compute_learning_metrics,
    compute_prediction_error,
    compute_value,
    create_bias_adaptation,
    create_experience,
    detect_learning_events,
    find_best_category,
    predict_value,
    update_value_function,
)
from groundloop.quantum import create_demon


def _experiences(path, n, outcome):
    return [create_experience(path, 1.0, 0.5, outcome) for _ in range(n)]


class TestValue:
    """Fixed reward formula."""

    def test_best_outcome(self):
        assert compute_value(Outcome(True, 1.0, 1.0, 1.0, 0.0)) == pytest.approx(0.9)

    def test_entropy_paid_subtracts(self):
        assert compute_value(Outcome(False, 0.0, 0.0, 0.0, 1.0)) == pytest.approx(-0.1)

    def test_experience_fields(self, reference_path):
        exp = create_experience(reference_path, 1.2, 0.4, Outcome(True, 0.5, 0.9, broadcast=True))
        assert exp.id.startswith("exp_")
        assert exp.path_category == Category.INTUITIVE
        assert exp.bias_at_selection == 1.2
        assert exp.broadcast_occurred
        assert exp.credit_assigned == 0.0


class TestCredit:
    """Backward-decaying credit."""

    def test_eligibility_decays_backwards(self, reference_path):
        exps = _experiences(reference_path, 3, Outcome(True, 0.5, 0.5))
        assignments = assign_credit(exps, 1.0)
        assert [a.experience_id for a in assignments] == [e.id for e in exps]
        assert [a.eligibility_trace for a in assignments] == pytest.approx([0.81, 0.9, 1.0])

    def test_apply_writes_in_place(self, reference_path):
        exps = _experiences(reference_path, 2, Outcome(True, 0.5, 0.5))
        apply_credit(exps, assign_credit(exps, 0.5, decay=0.5))
        assert exps[0].credit_assigned == pytest.approx(0.25)
        assert exps[1].credit_assigned == pytest.approx(0.5)

    def test_empty(self):
        assert assign_credit([], 1.0) == []


class TestValueFunction:
    """Linear predictor and online update."""

    def test_prediction_for_reference_path(self, reference_path):
        # (0.15 + 0.15 + 0.1 + 0.2 + 0.1) / 1.1 blended 80/20 with bias 0.5
        assert predict_value(reference_path, ValueFunction()) == pytest.approx(0.7 / 1.1 * 0.8 + 0.1)

    def test_prediction_bounded(self, opposite_path):
        vf = ValueFunction(bias=1.0, saliency_weight=1.0)
        assert 0.0 <= predict_value(opposite_path, vf) <= 1.0

    def test_error_sign(self, reference_path):
        high = create_experience(reference_path, 1.0, 0.5, Outcome(True, 1.0, 1.0, 1.0))
        low = create_experience(reference_path, 1.0, 0.5, Outcome(False, 0.0, 0.0))
        assert compute_prediction_error(high, ValueFunction()).sign == "positive"
        assert compute_prediction_error(low, ValueFunction()).sign == "negative"

    def test_update_moves_weights_with_error(self, reference_path):
        vf = ValueFunction()
        exp = create_experience(reference_path, 1.0, 0.5, Outcome(True, 1.0, 1.0, 1.0))
        error = compute_prediction_error(exp, vf)
        updated = update_value_function(vf, exp, error, 0.1)

        assert updated.saliency_weight == pytest.approx(vf.saliency_weight + 0.1 * error.error * 0.5)
        assert updated.category_weights[Category.INTUITIVE] == pytest.approx(0.5 + 0.1 * error.error * 0.2)
        assert updated.category_weights[Category.SYMBOLIC] == 0.5
        assert updated.bias == pytest.approx(0.5 + 0.1 * error.error * 0.1)
        assert updated.update_count == 1
        assert updated.average_error == pytest.approx(error.absolute_error)
        assert vf.update_count == 0

    def test_nan_step_is_zero(self, reference_path):
        vf = ValueFunction()
        exp = create_experience(reference_path, 1.0, 0.5, Outcome(True, 0.5, 0.5))
        exp.computed_value = math.nan
        updated = update_value_function(vf, exp, compute_prediction_error(exp, vf))
        assert updated.saliency_weight == vf.saliency_weight
        assert updated.bias == vf.bias
        assert updated.average_error == 0.0


class TestBiasAdaptation:
    """Bias follows the aligned/non-aligned value gap."""

    def test_below_minimum_unchanged(self, reference_path):
        adaptation = create_bias_adaptation()
        exps = _experiences(reference_path, 5, Outcome(True, 0.5, 0.9))
        assert adapt_bias(adaptation, exps) is adaptation

    def test_initial_bias_clamped(self):
        assert create_bias_adaptation(5.0).current_bias == 2.0
        assert create_bias_adaptation(0.0).current_bias == 0.1

    def test_upper_bound_holds(self, reference_path, opposite_path):
        exps = (_experiences(reference_path, 10, Outcome(True, 1.0, 1.0, 1.0))
                + _experiences(opposite_path, 10, Outcome(False, 0.0, 0.0, 0.0, 1.0)))
        adaptation = create_bias_adaptation(2.0)
        for _ in range(150):
            adaptation = adapt_bias(adaptation, exps)
        assert adaptation.current_bias == 2.0
        assert len(adaptation.history) == 100

    def test_lower_bound_holds(self, reference_path, opposite_path):
        exps = (_experiences(reference_path, 10, Outcome(False, 0.0, 0.8, 0.0, 1.0))
                + _experiences(opposite_path, 10, Outcome(True, 1.0, 0.0, 1.0)))
        adaptation = create_bias_adaptation(0.2)
        for _ in range(200):
            adaptation = adapt_bias(adaptation, exps)
        assert 0.1 <= adaptation.current_bias < 0.2

    def test_missing_group_keeps_rate(self, reference_path):
        exps = _experiences(reference_path, 10, Outcome(True, 0.5, 0.9))
        adaptation = adapt_bias(create_bias_adaptation(), exps)
        assert adaptation.mu_success_rate == 1.0
        assert adaptation.non_mu_success_rate == 0.5


class TestLearningLayer:
    """record_experience / learn and queries."""

    def test_insufficient_data(self, reference_path, receipts):
        layer = LearningLayer()
        layer.record_experience(reference_path, 1.0, 0.5, Outcome(True, 0.5, 0.9))
        result = layer.learn()
        assert not result.updated
        assert result.reason == "insufficient_data"
        assert result.new_bias == 1.0
        last = receipts()[-1]
        assert last["receipt_type"] == "learning"
        assert last["status"] == "insufficient_data"
        assert validate_receipt(last)

    def test_buffer_evicts_oldest(self, reference_path):
        layer = LearningLayer(capacity=5)
        first = layer.record_experience(reference_path, 1.0, 0.5, Outcome(True, 0.5, 0.9))
        for _ in range(6):
            layer.record_experience(reference_path, 1.0, 0.5, Outcome(True, 0.5, 0.9))
        assert len(layer.experiences) == 5
        assert first.id not in {e.id for e in layer.experiences}

    def test_learn_updates_everything(self, split_layer, receipts):
        receipts()
        result = split_layer.learn(20)
        assert result.updated
        assert result.bias_updated
        assert result.new_bias > 1.0
        assert result.average_error > 0
        assert split_layer.value_function.update_count == 20
        assert len(split_layer.prediction_errors) == 20
        # newest experience carries full eligibility
        newest = split_layer.experiences[-1]
        assert newest.credit_assigned == pytest.approx(newest.computed_value)

        emitted = receipts()
        types = [r["receipt_type"] for r in emitted]
        assert types[-2:] == ["bias_adaptation", "learning"]
        for receipt in emitted:
            assert validate_receipt(receipt)

    def test_small_batch_adapts_from_whole_buffer(self, reference_path, opposite_path, receipts):
        layer = LearningLayer()
        for _ in range(15):
            layer.record_experience(reference_path, 1.0, 0.5, Outcome(True, 0.5, 0.9))
        for _ in range(15):
            layer.record_experience(opposite_path, 1.0, 0.5, Outcome(False, 0.5, 0.1))
        receipts()

        result = layer.learn(5)
        assert result.bias_updated
        assert layer.demon_bias > 1.0
        assert layer.bias_adaptation.mu_success_rate == 1.0
        assert layer.bias_adaptation.non_mu_success_rate == 0.0
        assert layer.value_function.update_count == 5

        adaptation = [r for r in receipts() if r["receipt_type"] == "bias_adaptation"]
        assert len(adaptation) == 1
        assert adaptation[0]["aligned_count"] == 15
        assert adaptation[0]["non_aligned_count"] == 15

    def test_bias_pinned_at_bound_is_not_an_update(self, reference_path, opposite_path, receipts):
        layer = LearningLayer(initial_bias=2.0)
        for _ in range(10):
            layer.record_experience(reference_path, 2.0, 0.5, Outcome(True, 0.5, 0.9))
        for _ in range(10):
            layer.record_experience(opposite_path, 2.0, 0.5, Outcome(False, 0.5, 0.1))
        receipts()

        result = layer.learn(20)
        assert result.updated
        assert not result.bias_updated
        assert result.new_bias == 2.0
        types = [r["receipt_type"] for r in receipts()]
        assert "bias_adaptation" not in types
        assert types[-1] == "learning"

    def test_nan_value_is_reported_and_skipped(self, split_layer, receipts):
        split_layer.experiences[0].computed_value = math.nan
        receipts()
        result = split_layer.learn(20)
        assert result.updated
        assert math.isfinite(result.average_error)
        assert math.isfinite(split_layer.demon_bias)
        anomalies = [r for r in receipts() if r["receipt_type"] == "anomaly"]
        assert len(anomalies) == 1
        assert anomalies[0]["metric"] == "prediction_error"

    def test_demon_follows_bias(self, split_layer):
        split_layer.learn(20)
        demon = split_layer.adapted_demon(create_demon())
        assert demon.bias_strength == split_layer.demon_bias
        assert split_layer.bias_history[-1] == split_layer.demon_bias

    def test_should_attend(self, reference_path):
        layer = LearningLayer()
        assert layer.should_attend(reference_path)
        assert not layer.should_attend(reference_path, threshold=0.9)

    def test_reset_keeps_weights(self, split_layer):
        split_layer.learn(20)
        vf = split_layer.value_function
        bias = split_layer.demon_bias
        split_layer.reset()
        assert split_layer.experiences == []
        assert split_layer.value_function is vf
        assert split_layer.demon_bias == bias

    def test_full_reset(self, split_layer):
        split_layer.learn(20)
        split_layer.full_reset()
        assert split_layer.experiences == []
        assert split_layer.demon_bias == 1.0
        assert split_layer.value_function.update_count == 0
        assert split_layer.learn_count == 0

    def test_snapshot(self, split_layer):
        snapshot = split_layer.snapshot()
        assert snapshot["total_experiences"] == 20
        assert snapshot["success_rate"] == pytest.approx(0.5)
        assert snapshot["best_category"] == "intuitive"


class TestStats:
    """Category statistics, metrics, events."""

    def test_category_stats_cover_every_category(self, split_layer):
        stats = compute_category_stats(split_layer.experiences)
        assert set(stats) == set(Category)
        assert stats[Category.INTUITIVE].success_rate == 1.0
        assert stats[Category.SYMBOLIC].success_rate == 0.0
        assert stats[Category.HYBRID].total_experiences == 0

    def test_best_category_needs_samples(self, reference_path):
        exps = _experiences(reference_path, 4, Outcome(True, 0.5, 0.9))
        assert find_best_category(compute_category_stats(exps)) is None
        assert find_best_category(compute_category_stats(exps), min_experiences=4) == Category.INTUITIVE

    def test_metrics(self, split_layer):
        split_layer.learn(20)
        metrics = compute_learning_metrics(split_layer)
        assert metrics.total_experiences == 20
        assert metrics.reference_advantage == pytest.approx(1.0)
        assert metrics.best_category == Category.INTUITIVE
        assert metrics.category_concentration == pytest.approx(1 - math.log(2) / math.log(8))
        assert 0.0 <= metrics.value_convergence <= 1.0

    def test_no_events_without_previous(self, split_layer):
        events, _ = detect_learning_events(split_layer, None)
        assert events == []

    def test_events_after_learning(self, split_layer, receipts):
        previous = compute_learning_metrics(split_layer)
        split_layer.learn(20)
        receipts()
        events, _ = detect_learning_events(split_layer, previous)
        types = {e["event_type"] for e in events}
        assert "reference_advantage_discovered" in types
        assert "prediction_error_spike" in types
        assert "bias_adapted" not in types

        emitted = receipts()
        assert len(emitted) == len(events)
        for receipt in emitted:
            assert receipt["receipt_type"] == "learning_event"
            assert validate_receipt(receipt)

    def test_bias_and_category_events(self, split_layer):
        current = compute_learning_metrics(split_layer)
        previous = dataclasses.replace(current, current_bias=0.5, best_category=None)
        events, _ = detect_learning_events(split_layer, previous)
        types = {e["event_type"] for e in events}
        assert {"bias_adapted", "category_discovered"} <= types
