"""Learning loop: experiences, credit, value function, bias adaptation."""
from .experience import Experience, Outcome, compute_value, create_experience
from .credit import CreditAssignment, apply_credit, assign_credit
from .value import (
    PredictionError,
    ValueFeatures,
    ValueFunction,
    compute_prediction_error,
    extract_features,
    predict_value,
    reference_proximity,
    update_value_function,
)
from .bias import BiasAdaptation, adapt_bias, create_bias_adaptation, is_aligned
from .stats import (
    CategoryStats,
    LearningMetrics,
    compute_category_stats,
    compute_learning_metrics,
    detect_learning_events,
    find_best_category,
)
from .layer import LearningLayer, LearningResult

__all__ = [
    "Experience",
    "Outcome",
    "compute_value",
    "create_experience",
    "CreditAssignment",
    "apply_credit",
    "assign_credit",
    "PredictionError",
    "ValueFeatures",
    "ValueFunction",
    "compute_prediction_error",
    "extract_features",
    "predict_value",
    "reference_proximity",
    "update_value_function",
    "BiasAdaptation",
    "adapt_bias",
    "create_bias_adaptation",
    "is_aligned",
    "CategoryStats",
    "LearningMetrics",
    "compute_category_stats",
    "compute_learning_metrics",
    "detect_learning_events",
    "find_best_category",
    "LearningLayer",
    "LearningResult",
]
