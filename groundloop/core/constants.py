"""groundloop constants and thresholds.

All magic numbers live here. No exceptions.
"""
import math

# Reference direction (135 degrees, unit magnitude)
REFERENCE_ANGLE = 3 * math.pi / 4
REFERENCE_MAGNITUDE = 1.0
BASIS_SIZE = 8

# Numerical tolerances
NORMALIZED_TOLERANCE = 1e-10
ON_RAY_TOLERANCE = 1e-10
DEMON_DISTANCE_EPSILON = 0.01

# Interference classification
CONSTRUCTIVE_RATIO = 0.9   # |combined| > 0.9 * (|a| + |b|)
DESTRUCTIVE_RATIO = 1.1    # |combined| < 1.1 * ||a| - |b||

# Demon: cost always exceeds the entropy it removes
DEMON_COST_FACTOR = 1.1
DEMON_DEFAULT_BIAS = 1.0

# Verification
VERIFY_ALIGNMENT_THRESHOLD = 0.8
VERIFY_CONFIDENCE_THRESHOLD = 0.5
VERIFY_LOW_ENERGY_THRESHOLD = 0.5
VERIFY_WEIGHTS = {
    "on_ray": 0.3,
    "alignment": 0.3,
    "energy": 0.2,
    "confidence": 0.2,
}

# Measurement tick defaults
MEASURE_ALIGNMENT_THRESHOLD = 0.7
MEASURE_CONFIDENCE_THRESHOLD = 0.5
MEASURE_REFERENCE_WEIGHT = 0.5
MEASURE_PROJECT_TO_REFERENCE = True
MEASUREMENT_HISTORY_SIZE = 1000

# Grounded Born rule: |a|^2 * exp(-w d) * (1 + cw (conf - 0.5)) * exp(-E / T)
BORN_REFERENCE_WEIGHT = 0.5
BORN_CONFIDENCE_WEIGHT = 0.5
BORN_TEMPERATURE = 1.0
BORN_NEUTRAL_CONFIDENCE = 0.5

# Uncertainty decomposition
UNCERTAINTY_WEIGHTS = {
    "angular": 0.4,
    "quantum": 0.4,
    "epistemic": 0.2,
}
UNCERTAINTY_BANDS = [
    (0.2, "High confidence - near ground"),
    (0.4, "Moderate confidence - some drift"),
    (0.6, "Uncertain - significant deviation"),
]
UNCERTAINTY_FALLBACK_BAND = "High uncertainty - far from ground"

# Constraint validation
ALIGNMENT_CONSTRAINT_WEIGHT = 0.3
CONFIDENCE_CONSTRAINT_WEIGHT = 0.4
SOFT_COLLAPSE_STRENGTH = 0.5
REASONING_SOFT_STRENGTH = 0.1

# Reward signal (design constants, never learned)
VALUE_WEIGHTS = {
    "success": 0.3,
    "coherence": 0.2,
    "alignment": 0.2,
    "identity_growth": 0.2,
    "entropy_paid": 0.1,
}

# Learning loop
LEARNING_RATE = 0.1
CREDIT_DECAY = 0.9
EXPERIENCE_BUFFER_SIZE = 500
MIN_EXPERIENCES_FOR_LEARNING = 10
DEFAULT_BATCH_SIZE = 10
PREDICTION_ERROR_HISTORY = 1000
PREDICTION_ERROR_SIGN_BAND = 0.01

# Value function
VALUE_INITIAL_WEIGHTS = {
    "saliency": 0.3,
    "relevance": 0.3,
    "alignment": 0.2,
    "magnitude": 0.1,
}
VALUE_INITIAL_CATEGORY_WEIGHT = 0.5
VALUE_INITIAL_BIAS = 0.5
VALUE_CATEGORY_TERM_WEIGHT = 0.2
VALUE_BIAS_BLEND = 0.2          # final = 0.8 * normalized + 0.2 * bias
VALUE_BIAS_GRADIENT = 0.1
VALUE_NEUTRAL = 0.5

# Bias adaptation
BIAS_MIN = 0.1
BIAS_MAX = 2.0
BIAS_HISTORY_SIZE = 100
ALIGNED_THRESHOLD = 0.7

# Learning metrics and events
METRICS_RECENT_ERRORS = 50
METRICS_TREND_WINDOW = 10
METRICS_BIAS_WINDOW = 10
BEST_CATEGORY_MIN_EXPERIENCES = 5
EVENT_BIAS_DELTA = 0.05
EVENT_ERROR_SPIKE_RATIO = 1.5
EVENT_CONVERGENCE_THRESHOLD = 0.9
EVENT_ADVANTAGE_THRESHOLD = 0.2

# Cycle
LEARN_INTERVAL_CYCLES = 10
