"""Experience Module - one recorded outcome used as a training sample.

value = 0.3 * success + 0.2 * coherence + 0.2 * alignment
        + 0.2 * identity_growth - 0.1 * entropy_paid

These weights are the ground-truth reward signal. They are never learned.
"""
import time
import uuid
from dataclasses import dataclass

from groundloop.core.constants import VALUE_WEIGHTS
from groundloop.geometry import Category, Vector2
from groundloop.quantum import Path


@dataclass(frozen=True)
class Outcome:
    """What happened after a selection. Supplied by the caller."""
    successful: bool
    coherence: float
    mu_alignment: float
    identity_growth: float = 0.0
    entropy_paid: float = 0.0
    broadcast: bool = False


@dataclass
class Experience:
    """A learning sample. Only credit_assigned changes after creation."""
    id: str
    timestamp: float
    path_id: str
    path_category: Category
    attended_content: Vector2
    saliency: float
    relevance: float
    bias_at_selection: float
    selection_entropy: float
    successful: bool
    coherence_achieved: float
    mu_alignment: float
    identity_growth: float
    entropy_paid: float
    computed_value: float
    broadcast_occurred: bool = False
    credit_assigned: float = 0.0


def compute_value(outcome: Outcome) -> float:
    """Fixed-weight reward for an outcome."""
    return (
        (VALUE_WEIGHTS["success"] if outcome.successful else 0.0)
        + VALUE_WEIGHTS["coherence"] * outcome.coherence
        + VALUE_WEIGHTS["alignment"] * outcome.mu_alignment
        + VALUE_WEIGHTS["identity_growth"] * outcome.identity_growth
        - VALUE_WEIGHTS["entropy_paid"] * outcome.entropy_paid
    )


def create_experience(
    path: Path,
    bias: float,
    selection_entropy: float,
    outcome: Outcome,
) -> Experience:
    """Package a selected path and its outcome as an Experience."""
    return Experience(
        id=f"exp_{uuid.uuid4().hex[:12]}",
        timestamp=time.time(),
        path_id=path.id,
        path_category=path.category,
        attended_content=path.amplitude,
        saliency=path.saliency,
        relevance=path.relevance,
        bias_at_selection=bias,
        selection_entropy=selection_entropy,
        successful=outcome.successful,
        coherence_achieved=outcome.coherence,
        mu_alignment=outcome.mu_alignment,
        identity_growth=outcome.identity_growth,
        entropy_paid=outcome.entropy_paid,
        computed_value=compute_value(outcome),
        broadcast_occurred=outcome.broadcast,
    )
