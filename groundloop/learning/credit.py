"""Credit assignment - backward-decaying attribution of an outcome.

Walking back from the most recent experience, eligibility starts at 1.0 and
is multiplied by the decay for each earlier step:

    decayed_credit_i = final_value * eligibility_i

A plain exponential trace, not TD(lambda).
"""
from dataclasses import dataclass

from groundloop.core.constants import CREDIT_DECAY

from .experience import Experience


@dataclass(frozen=True)
class CreditAssignment:
    experience_id: str
    credit: float                # the experience's own value
    eligibility_trace: float
    decayed_credit: float


def assign_credit(
    experiences: list[Experience],
    final_value: float,
    decay: float = CREDIT_DECAY,
) -> list[CreditAssignment]:
    """Assign credit to experiences given in chronological order.

    Returns:
        Assignments in the same chronological order
    """
    assignments = []
    eligibility = 1.0
    for exp in reversed(experiences):
        assignments.append(CreditAssignment(
            experience_id=exp.id,
            credit=exp.computed_value,
            eligibility_trace=eligibility,
            decayed_credit=final_value * eligibility,
        ))
        eligibility *= decay
    assignments.reverse()
    return assignments


def apply_credit(experiences, assignments: list[CreditAssignment]) -> None:
    """Write decayed credit onto the matching experiences in place."""
    credit_by_id = {a.experience_id: a.decayed_credit for a in assignments}
    for exp in experiences:
        if exp.id in credit_by_id:
            exp.credit_assigned = credit_by_id[exp.id]
