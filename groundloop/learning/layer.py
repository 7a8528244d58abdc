"""Learning Layer - experience buffer plus periodic replay.

Two externally triggered operations:
    record_experience: always succeeds, oldest experience evicted on overflow
    learn: no-op below the minimum experience count, else one training pass

Single-threaded. If callers share a layer across threads, each
record_experience / learn call must be serialized by the caller.
"""
import math
from collections import deque
from dataclasses import dataclass, replace

from groundloop.core.constants import (
    DEFAULT_BATCH_SIZE,
    DEMON_DEFAULT_BIAS,
    EXPERIENCE_BUFFER_SIZE,
    LEARNING_RATE,
    MIN_EXPERIENCES_FOR_LEARNING,
    PREDICTION_ERROR_HISTORY,
    VALUE_NEUTRAL,
)
from groundloop.core.receipt import emit_anomaly, emit_receipt
from groundloop.geometry import Category
from groundloop.quantum import DemonState, Path

from .bias import BiasAdaptation, adapt_bias, create_bias_adaptation, is_aligned
from .credit import apply_credit, assign_credit
from .experience import Experience, Outcome, create_experience
from .stats import (
    CategoryStats,
    compute_category_stats,
    compute_learning_metrics,
    find_best_category,
)
from .value import (
    PredictionError,
    ValueFunction,
    compute_prediction_error,
    predict_value,
    update_value_function,
)


@dataclass(frozen=True)
class LearningResult:
    updated: bool
    bias_updated: bool
    average_error: float
    new_bias: float
    reason: str = ""


class LearningLayer:
    """Owns the experience buffer, the value function and the bias state."""

    def __init__(
        self,
        initial_bias: float = DEMON_DEFAULT_BIAS,
        capacity: int = EXPERIENCE_BUFFER_SIZE,
        min_experiences: int = MIN_EXPERIENCES_FOR_LEARNING,
        learning_rate: float = LEARNING_RATE,
        tenant_id: str = "default",
    ):
        self.initial_bias = initial_bias
        self.capacity = capacity
        self.min_experiences = min_experiences
        self.learning_rate = learning_rate
        self.tenant_id = tenant_id

        self._experiences: deque[Experience] = deque(maxlen=capacity)
        self._prediction_errors: deque[PredictionError] = deque(maxlen=PREDICTION_ERROR_HISTORY)
        self.value_function = ValueFunction()
        self.bias_adaptation: BiasAdaptation = create_bias_adaptation(initial_bias)
        self.learn_count = 0

    # --- recording ---

    def record_experience(
        self,
        path: Path,
        bias: float,
        selection_entropy: float,
        outcome: Outcome,
    ) -> Experience:
        """Package an outcome as an Experience and append it to the buffer."""
        experience = create_experience(path, bias, selection_entropy, outcome)
        self._experiences.append(experience)

        emit_receipt("experience", {
            "experience_id": experience.id,
            "path_id": experience.path_id,
            "category": experience.path_category.value,
            "computed_value": experience.computed_value,
            "successful": experience.successful,
            "buffer_size": len(self._experiences),
        }, tenant_id=self.tenant_id)

        return experience

    # --- training ---

    def learn(self, batch_size: int = DEFAULT_BATCH_SIZE) -> LearningResult:
        """Replay the most recent batch_size experiences.

        Credit is assigned backwards from the newest experience, the value
        function takes one step per experience, and the bias is adapted from
        the whole buffer.

        Args:
            batch_size: Number of most recent experiences to replay

        Returns:
            LearningResult. updated is False when there are fewer than
            min_experiences recorded.
        """
        current_bias = self.bias_adaptation.current_bias
        if len(self._experiences) < self.min_experiences:
            result = LearningResult(
                updated=False,
                bias_updated=False,
                average_error=0.0,
                new_bias=current_bias,
                reason="insufficient_data",
            )
            self._emit_learning("insufficient_data", result, 0)
            return result

        batch = list(self._experiences)[-batch_size:] if batch_size > 0 else []
        if batch:
            assignments = assign_credit(batch, batch[-1].computed_value)
            apply_credit(batch, assignments)

        total_error = 0.0
        for experience in batch:
            error = compute_prediction_error(experience, self.value_function)
            if not math.isfinite(error.error):
                emit_anomaly("prediction_error", "degradation", "zero_step",
                             baseline=VALUE_NEUTRAL, tenant_id=self.tenant_id,
                             experience_id=experience.id)
            else:
                total_error += error.absolute_error
            self._prediction_errors.append(error)
            self.value_function = update_value_function(
                self.value_function, experience, error, self.learning_rate
            )

        buffered = list(self._experiences)
        old = self.bias_adaptation
        new = adapt_bias(old, buffered, self.min_experiences)
        self.bias_adaptation = new
        bias_updated = new.current_bias != old.current_bias
        if bias_updated:
            emit_receipt("bias_adaptation", {
                "old_bias": old.current_bias,
                "new_bias": new.current_bias,
                "optimal_bias": new.optimal_bias,
                "mu_success_rate": new.mu_success_rate,
                "non_mu_success_rate": new.non_mu_success_rate,
                "aligned_count": sum(1 for e in buffered if is_aligned(e)),
                "non_aligned_count": sum(1 for e in buffered if not is_aligned(e)),
            }, tenant_id=self.tenant_id)

        self.learn_count += 1
        result = LearningResult(
            updated=True,
            bias_updated=bias_updated,
            average_error=total_error / len(batch) if batch else 0.0,
            new_bias=new.current_bias,
        )
        self._emit_learning("updated", result, len(batch))
        return result

    def _emit_learning(self, status: str, result: LearningResult, batch_size: int) -> None:
        emit_receipt("learning", {
            "status": status,
            "updated": result.updated,
            "bias_updated": result.bias_updated,
            "average_error": result.average_error,
            "new_bias": result.new_bias,
            "batch_size": batch_size,
        }, tenant_id=self.tenant_id)

    # --- queries ---

    def predict_value(self, path: Path) -> float:
        return predict_value(path, self.value_function)

    def should_attend(self, path: Path, threshold: float = VALUE_NEUTRAL) -> bool:
        return self.predict_value(path) > threshold

    @property
    def demon_bias(self) -> float:
        return self.bias_adaptation.current_bias

    def adapted_demon(self, state: DemonState) -> DemonState:
        """Copy of state carrying the learned bias strength."""
        return replace(state, bias_strength=self.demon_bias)

    @property
    def experiences(self) -> list[Experience]:
        return list(self._experiences)

    @property
    def prediction_errors(self) -> list[PredictionError]:
        return list(self._prediction_errors)

    @property
    def bias_history(self) -> tuple[float, ...]:
        return self.bias_adaptation.history

    def category_stats(self) -> dict[Category, CategoryStats]:
        return compute_category_stats(self._experiences)

    def best_category(self) -> Category | None:
        return find_best_category(self.category_stats())

    def snapshot(self) -> dict:
        """Plain-dict summary suitable for printing or a receipt payload."""
        metrics = compute_learning_metrics(self)
        return {
            "total_experiences": metrics.total_experiences,
            "learn_count": self.learn_count,
            "success_rate": metrics.success_rate,
            "average_value": metrics.average_value,
            "average_prediction_error": metrics.average_prediction_error,
            "value_convergence": metrics.value_convergence,
            "current_bias": metrics.current_bias,
            "bias_stability": metrics.bias_stability,
            "reference_advantage": metrics.reference_advantage,
            "best_category": metrics.best_category.value if metrics.best_category else None,
            "category_concentration": metrics.category_concentration,
        }

    # --- reset ---

    def reset(self) -> None:
        """Forget experiences and errors. Learned weights and bias are kept."""
        self._experiences.clear()
        self._prediction_errors.clear()

    def full_reset(self) -> None:
        """Back to the freshly constructed state."""
        self.reset()
        self.value_function = ValueFunction()
        self.bias_adaptation = create_bias_adaptation(self.initial_bias)
        self.learn_count = 0
