"""
Proportional distribution of the kitty.

Each agent's raw share is kitty * score / total_score (or an equal split
when the scores sum to zero). Shares are clamped to the per-agent bounds,
rounded half-up, and whatever the rounding and clamping left over is
added to the first agent so the amounts always sum to the kitty.
"""

import logging
import math
from typing import List, Sequence, Tuple

from .errors import AllocationError
from .models import Bounds, Number

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def raw_shares(kitty: Number, scores: Sequence[float]) -> List[float]:
    total_score = sum(scores)
    if total_score == 0:
        # Equal split, computed before clamping
        logger.debug("Total score is zero, splitting kitty equally (agents=%d)", len(scores))
        return [kitty / len(scores) for _ in scores]
    shares = [kitty * s / total_score for s in scores]
    if not math.isfinite(total_score) or not all(math.isfinite(share) for share in shares):
        raise AllocationError("Scores are too large to distribute the kitty")
    return shares


def reconcile(amounts: List[Number], kitty: Number) -> Tuple[List[Number], Number]:
    """Add the whole rounding residual to the agent at position 0.

    Agent 0 may end up outside the configured bounds.
    """
    diff = kitty - sum(amounts)
    if diff != 0:
        amounts = list(amounts)
        amounts[0] += diff
    return amounts, diff


def distribute(kitty: Number, scores: Sequence[float], bounds: Bounds) -> List[Number]:
    shares = raw_shares(kitty, scores)
    amounts: List[Number] = [round_half_up(bounds.clamp(share)) for share in shares]
    amounts, diff = reconcile(amounts, kitty)
    if diff != 0:
        logger.debug("Reconciled rounding residual onto first agent (diff=%s)", diff)
    return amounts
