from typing import Iterable, List, Sequence

from .models import AgentRecord, NormalizedMetrics


def normalize_values(values: Sequence[float]) -> List[float]:
    """Min-max scale values into [0, 1]. A constant column maps to all 1.0."""
    lo = min(values)
    hi = max(values)
    if hi == lo:
        return [1.0 for _ in values]
    span = hi - lo
    return [(v - lo) / span for v in values]


def normalize_metrics(agents: Sequence[AgentRecord], attributes: Iterable[str]) -> NormalizedMetrics:
    return {attr: normalize_values([agent[attr] for agent in agents]) for attr in attributes}
