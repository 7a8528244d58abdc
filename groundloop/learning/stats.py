"""Learning statistics, metrics, and event detection."""
import math
from dataclasses import dataclass

from groundloop.core.constants import (
    BASIS_SIZE,
    BEST_CATEGORY_MIN_EXPERIENCES,
    EVENT_ADVANTAGE_THRESHOLD,
    EVENT_BIAS_DELTA,
    EVENT_CONVERGENCE_THRESHOLD,
    EVENT_ERROR_SPIKE_RATIO,
    METRICS_BIAS_WINDOW,
    METRICS_RECENT_ERRORS,
    METRICS_TREND_WINDOW,
)
from groundloop.core.receipt import emit_receipt
from groundloop.geometry import Category

from .experience import Experience


@dataclass(frozen=True)
class CategoryStats:
    category: Category
    total_experiences: int = 0
    success_count: int = 0
    total_value: float = 0.0

    @property
    def average_value(self) -> float:
        return self.total_value / self.total_experiences if self.total_experiences else 0.0

    @property
    def success_rate(self) -> float:
        return self.success_count / self.total_experiences if self.total_experiences else 0.0


def compute_category_stats(experiences) -> dict[Category, CategoryStats]:
    """Per-category counts, successes and value. Every category is present."""
    totals = {c: [0, 0, 0.0] for c in Category}
    for exp in experiences:
        bucket = totals[exp.path_category]
        bucket[0] += 1
        bucket[1] += 1 if exp.successful else 0
        bucket[2] += exp.computed_value
    return {
        c: CategoryStats(category=c, total_experiences=n, success_count=s, total_value=v)
        for c, (n, s, v) in totals.items()
    }


def find_best_category(
    stats: dict[Category, CategoryStats],
    min_experiences: int = BEST_CATEGORY_MIN_EXPERIENCES,
) -> Category | None:
    """Category with the highest average value among those with enough samples."""
    best = None
    best_value = -math.inf
    for category, stat in stats.items():
        if stat.total_experiences >= min_experiences and stat.average_value > best_value:
            best_value = stat.average_value
            best = category
    return best


@dataclass(frozen=True)
class LearningMetrics:
    total_experiences: int
    success_rate: float
    average_value: float
    average_prediction_error: float
    prediction_error_trend: float      # positive = getting worse
    value_convergence: float
    current_bias: float
    bias_stability: float
    reference_advantage: float         # aligned minus non-aligned success rate
    best_category: Category | None
    category_concentration: float


def _mean(values) -> float:
    values = list(values)
    return sum(values) / len(values) if values else 0.0


def average_recent_error(prediction_errors) -> float:
    recent = list(prediction_errors)[-METRICS_RECENT_ERRORS:]
    valid = [e.absolute_error for e in recent if math.isfinite(e.absolute_error)]
    return _mean(valid)


def compute_learning_metrics(layer) -> LearningMetrics:
    """Summarize a LearningLayer's performance."""
    experiences: list[Experience] = layer.experiences
    errors = list(layer.prediction_errors)
    adaptation = layer.bias_adaptation

    success_rate = _mean(1.0 if e.successful else 0.0 for e in experiences)
    average_value = _mean(e.computed_value for e in experiences)

    trend = 0.0
    if len(errors) >= 2 * METRICS_TREND_WINDOW:
        recent = errors[-METRICS_TREND_WINDOW:]
        older = errors[-2 * METRICS_TREND_WINDOW:-METRICS_TREND_WINDOW]
        trend = _mean(e.absolute_error for e in recent) - _mean(e.absolute_error for e in older)

    convergence = 1.0 - min(1.0, layer.value_function.average_error)

    stability = 1.0
    if len(adaptation.history) >= METRICS_BIAS_WINDOW:
        window = adaptation.history[-METRICS_BIAS_WINDOW:]
        mean = _mean(window)
        stability = math.exp(-_mean((b - mean) ** 2 for b in window))

    stats = compute_category_stats(experiences)
    concentration = 0.0
    total = sum(s.total_experiences for s in stats.values())
    if total > 0:
        probs = [s.total_experiences / total for s in stats.values()]
        entropy = -sum(p * math.log(p) for p in probs if p > 0)
        concentration = 1.0 - entropy / math.log(BASIS_SIZE)

    return LearningMetrics(
        total_experiences=len(experiences),
        success_rate=success_rate,
        average_value=average_value,
        average_prediction_error=average_recent_error(errors),
        prediction_error_trend=trend,
        value_convergence=convergence,
        current_bias=adaptation.current_bias,
        bias_stability=stability,
        reference_advantage=adaptation.mu_success_rate - adaptation.non_mu_success_rate,
        best_category=find_best_category(stats),
        category_concentration=concentration,
    )


def detect_learning_events(
    layer,
    previous: LearningMetrics | None,
    tenant_id: str = "default",
) -> tuple[list[dict], LearningMetrics]:
    """Compare current metrics against a previous snapshot.

    Each detected event is also emitted as a learning_event receipt.

    Returns:
        (events, current metrics). No events without a previous snapshot.
    """
    metrics = compute_learning_metrics(layer)
    events = []
    if previous is None:
        return events, metrics

    if abs(metrics.current_bias - previous.current_bias) > EVENT_BIAS_DELTA:
        events.append({
            "event_type": "bias_adapted",
            "old_bias": previous.current_bias,
            "new_bias": metrics.current_bias,
        })

    if metrics.average_prediction_error > previous.average_prediction_error * EVENT_ERROR_SPIKE_RATIO:
        events.append({
            "event_type": "prediction_error_spike",
            "error": metrics.average_prediction_error,
        })

    if metrics.value_convergence > EVENT_CONVERGENCE_THRESHOLD >= previous.value_convergence:
        events.append({
            "event_type": "learning_converged",
            "convergence": metrics.value_convergence,
        })

    if metrics.reference_advantage > EVENT_ADVANTAGE_THRESHOLD >= previous.reference_advantage:
        events.append({
            "event_type": "reference_advantage_discovered",
            "advantage": metrics.reference_advantage,
        })

    if metrics.best_category is not None and metrics.best_category != previous.best_category:
        stat = compute_category_stats(layer.experiences)[metrics.best_category]
        events.append({
            "event_type": "category_discovered",
            "category": metrics.best_category.value,
            "value": stat.average_value,
        })

    for event in events:
        emit_receipt("learning_event", event, tenant_id=tenant_id)

    return events, metrics
