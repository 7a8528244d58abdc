"""Value Function - linear predictor of what a selection will be worth.

Features: saliency, relevance, per-category weight, proximity to the
reference line, magnitude (capped at 1). Prediction is the weighted sum
normalized by the sum of weights, blended 80/20 with the bias term and
clamped to [0, 1].

Updates are online gradient-style steps, w <- clamp(w + lr * error * feature).
A NaN anywhere in a step makes that step zero.
"""
import math
from dataclasses import dataclass, field, replace

from groundloop.core.constants import (
    LEARNING_RATE,
    PREDICTION_ERROR_SIGN_BAND,
    VALUE_BIAS_BLEND,
    VALUE_BIAS_GRADIENT,
    VALUE_CATEGORY_TERM_WEIGHT,
    VALUE_INITIAL_BIAS,
    VALUE_INITIAL_CATEGORY_WEIGHT,
    VALUE_INITIAL_WEIGHTS,
    VALUE_NEUTRAL,
)
from groundloop.geometry import Category, Vector2, project_to_reference

from .experience import Experience


def _initial_category_weights() -> dict[Category, float]:
    return {category: VALUE_INITIAL_CATEGORY_WEIGHT for category in Category}


@dataclass(frozen=True)
class ValueFunction:
    saliency_weight: float = VALUE_INITIAL_WEIGHTS["saliency"]
    relevance_weight: float = VALUE_INITIAL_WEIGHTS["relevance"]
    alignment_weight: float = VALUE_INITIAL_WEIGHTS["alignment"]
    magnitude_weight: float = VALUE_INITIAL_WEIGHTS["magnitude"]
    category_weights: dict[Category, float] = field(default_factory=_initial_category_weights)
    bias: float = VALUE_INITIAL_BIAS
    update_count: int = 0
    average_error: float = 0.0


@dataclass(frozen=True)
class ValueFeatures:
    saliency: float
    relevance: float
    category: Category
    alignment: float
    magnitude: float


@dataclass(frozen=True)
class PredictionError:
    experience_id: str
    expected: float
    actual: float
    error: float                 # actual - expected
    absolute_error: float
    sign: str                    # positive | negative | zero


def clamp(x: float, low: float, high: float) -> float:
    return max(low, min(high, x))


def reference_proximity(z: Vector2) -> float:
    """exp(-distance from the reference line); 0.5 when undefined."""
    if not z.is_finite():
        return VALUE_NEUTRAL
    distance = z.distance(project_to_reference(z))
    if not math.isfinite(distance):
        return VALUE_NEUTRAL
    return math.exp(-distance)


def extract_features(item) -> ValueFeatures:
    """Features of a candidate Path or a recorded Experience."""
    if isinstance(item, Experience):
        content = item.attended_content
        category = item.path_category
    else:
        content = item.amplitude
        category = item.category
    magnitude = content.magnitude
    return ValueFeatures(
        saliency=item.saliency,
        relevance=item.relevance,
        category=category,
        alignment=reference_proximity(content),
        magnitude=min(1.0, magnitude) if math.isfinite(magnitude) else 0.0,
    )


def predict_value(item, value_function: ValueFunction) -> float:
    """Predicted value in [0, 1] for a Path or Experience."""
    f = extract_features(item)
    vf = value_function
    category_value = vf.category_weights.get(f.category, VALUE_INITIAL_CATEGORY_WEIGHT)

    weight_sum = (
        vf.saliency_weight + vf.relevance_weight
        + vf.alignment_weight + vf.magnitude_weight
        + VALUE_CATEGORY_TERM_WEIGHT
    )
    raw = (
        vf.saliency_weight * f.saliency
        + vf.relevance_weight * f.relevance
        + VALUE_CATEGORY_TERM_WEIGHT * category_value
        + vf.alignment_weight * f.alignment
        + vf.magnitude_weight * f.magnitude
    )

    normalized = raw / weight_sum if weight_sum > 0 else VALUE_NEUTRAL
    value = normalized * (1 - VALUE_BIAS_BLEND) + vf.bias * VALUE_BIAS_BLEND
    if not math.isfinite(value):
        return VALUE_NEUTRAL
    return clamp(value, 0.0, 1.0)


def compute_prediction_error(experience: Experience, value_function: ValueFunction) -> PredictionError:
    expected = predict_value(experience, value_function)
    actual = experience.computed_value
    error = actual - expected
    if error > PREDICTION_ERROR_SIGN_BAND:
        sign = "positive"
    elif error < -PREDICTION_ERROR_SIGN_BAND:
        sign = "negative"
    else:
        sign = "zero"
    return PredictionError(
        experience_id=experience.id,
        expected=expected,
        actual=actual,
        error=error,
        absolute_error=abs(error),
        sign=sign,
    )


def _step(learning_rate: float, error: float, feature: float) -> float:
    delta = learning_rate * error * feature
    return delta if math.isfinite(delta) else 0.0


def update_value_function(
    value_function: ValueFunction,
    experience: Experience,
    prediction_error: PredictionError,
    learning_rate: float = LEARNING_RATE,
) -> ValueFunction:
    """One online update from one experience. Returns a new ValueFunction."""
    vf = value_function
    f = extract_features(experience)
    error = prediction_error.error

    category_weights = dict(vf.category_weights)
    current = category_weights.get(f.category, VALUE_INITIAL_CATEGORY_WEIGHT)
    category_weights[f.category] = clamp(
        current + _step(learning_rate, error, VALUE_CATEGORY_TERM_WEIGHT), 0.0, 1.0
    )

    abs_error = abs(error) if math.isfinite(error) else 0.0
    average_error = (vf.average_error * vf.update_count + abs_error) / (vf.update_count + 1)

    return replace(
        vf,
        saliency_weight=clamp(vf.saliency_weight + _step(learning_rate, error, f.saliency), 0.0, 1.0),
        relevance_weight=clamp(vf.relevance_weight + _step(learning_rate, error, f.relevance), 0.0, 1.0),
        alignment_weight=clamp(vf.alignment_weight + _step(learning_rate, error, f.alignment), 0.0, 1.0),
        magnitude_weight=clamp(vf.magnitude_weight + _step(learning_rate, error, f.magnitude), 0.0, 1.0),
        category_weights=category_weights,
        bias=clamp(vf.bias + _step(learning_rate, error, VALUE_BIAS_GRADIENT), 0.0, 1.0),
        update_count=vf.update_count + 1,
        average_error=average_error,
    )
