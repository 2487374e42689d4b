import statistics
from typing import Sequence

from .models import Number, SummaryStats


def compute_summary(amounts: Sequence[Number], kitty: Number) -> SummaryStats:
    """
    Aggregate statistics over the final amounts.

    agents_at_min / agents_at_max count agents sitting at the observed
    extremes of this allocation, not at the configured bounds.
    """
    total = sum(amounts)
    lo = min(amounts)
    hi = max(amounts)
    return SummaryStats(
        total_allocated=total,
        remaining_kitty=kitty - total,
        mean=total / len(amounts),
        median=statistics.median(amounts),
        min=lo,
        max=hi,
        agents_at_min=sum(1 for a in amounts if a == lo),
        agents_at_max=sum(1 for a in amounts if a == hi),
    )
