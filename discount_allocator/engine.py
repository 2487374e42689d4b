"""
Allocation pipeline entry point.

    validate -> normalize -> score -> distribute -> {justify, summarize}

allocate() is a pure function of its arguments: it keeps no state
between calls and performs no I/O beyond debug logging.
"""

import logging
from typing import Any, Mapping, Optional

from .allocator import distribute
from .config import resolve_bounds, resolve_weights
from .justify import build_justification
from .models import AllocationEntry, AllocationResult
from .normalize import normalize_metrics
from .schema import validate_agents, validate_input
from .scoring import as_scorer
from .summary import compute_summary

logger = logging.getLogger(__name__)


def allocate(
    data: Mapping[str, Any],
    config: Optional[Mapping[str, Any]] = None,
    scorer: Optional[object] = None,
) -> AllocationResult:
    """
    Distribute data["siteKitty"] across data["salesAgents"].

    Args:
        data: {"siteKitty": number, "salesAgents": [{"id": ..., <attr>: number}]}
        config: {"weights": {...}, "minPerAgent"?: number, "maxPerAgent"?: number}
        scorer: a Scorer, a scoring function, or None for the weighted sum

    Raises:
        ValidationError: input or config is structurally invalid
        StrategyFault: the scoring strategy failed or returned bad scores
    """
    config = config or {}
    validate_input(data, config)

    weights = resolve_weights(config)
    bounds = resolve_bounds(config)
    agents = list(data["salesAgents"])
    kitty = data["siteKitty"]
    validate_agents(agents, weights)

    normalized = normalize_metrics(agents, weights.keys())
    active = as_scorer(scorer)
    scores = active.score(agents, weights, normalized)
    amounts = distribute(kitty, scores, bounds)

    attributes = list(weights.keys())
    entries = [
        AllocationEntry(
            id=str(agent["id"]),
            assigned_amount=amounts[i],
            justification=build_justification(normalized, i, attributes),
        )
        for i, agent in enumerate(agents)
    ]
    logger.debug(
        "Allocation computed (agents=%d, kitty=%s, scorer=%s)",
        len(agents),
        kitty,
        getattr(active, "name", type(active).__name__),
    )
    return AllocationResult(
        allocations=entries,
        summary=compute_summary(amounts, kitty),
    )
