"""Scenario: 10 aligned successes and 10 non-aligned failures.

Pass criteria:
- mu_success_rate = 1.0
- non_mu_success_rate = 0.0
- current_bias strictly increases
"""
import pytest


class TestLearningSplitScenario:
    """Bias adapts toward the reference when alignment pays."""

    def test_rates_and_bias(self, split_layer):
        initial = split_layer.demon_bias
        result = split_layer.learn(20)
        adaptation = split_layer.bias_adaptation

        assert result.updated
        assert adaptation.mu_success_rate == pytest.approx(1.0)
        assert adaptation.non_mu_success_rate == pytest.approx(0.0)
        assert adaptation.current_bias > initial
        assert result.new_bias == adaptation.current_bias

    def test_bias_keeps_rising_toward_optimal(self, split_layer):
        biases = []
        for _ in range(5):
            split_layer.learn(20)
            biases.append(split_layer.demon_bias)
        assert biases == sorted(biases)
        assert biases[-1] <= 2.0
