"""
Scoring strategies.

A scorer turns the normalized attribute columns into one raw score per
agent. Scores are unitless; only their relative size matters to the
allocator, so they may be negative or exceed 1.

Two implementations satisfy the Scorer protocol:
- WeightedSumScorer: sum of weight * normalized value per attribute
- StrategyScorer: wraps any function with the signature
  (agents, weights, normalized) -> sequence of numbers

Strategies are picked by name from STRATEGIES at call time.
"""

import math
import numbers
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from .errors import ConfigError, StrategyFault
from .models import AgentRecord, NormalizedMetrics

ScoringFunction = Callable[[List[AgentRecord], Dict[str, float], NormalizedMetrics], Sequence[float]]


class Scorer(Protocol):
    """Protocol that all scorers must satisfy."""

    name: str

    def score(
        self,
        agents: List[AgentRecord],
        weights: Dict[str, float],
        normalized: NormalizedMetrics,
    ) -> List[float]:  # pragma: no cover - interface only
        ...


class WeightedSumScorer:
    name = "weighted"

    def score(
        self,
        agents: List[AgentRecord],
        weights: Dict[str, float],
        normalized: NormalizedMetrics,
    ) -> List[float]:
        return [
            sum(weight * normalized[attr][i] for attr, weight in weights.items())
            for i in range(len(agents))
        ]


class StrategyScorer:
    """
    Adapter for a caller-supplied scoring function.

    The function's own exceptions, a non-sequence result, a result of the
    wrong length, or an entry that is not a finite number all surface as
    StrategyFault so that agents and scores are never silently misaligned.
    """

    def __init__(self, func: ScoringFunction, name: Optional[str] = None):
        self.func = func
        self.name = name or getattr(func, "__name__", "custom")

    def score(
        self,
        agents: List[AgentRecord],
        weights: Dict[str, float],
        normalized: NormalizedMetrics,
    ) -> List[float]:
        try:
            raw = self.func(agents, dict(weights), normalized)
        except Exception as e:
            raise StrategyFault(f"Scoring strategy '{self.name}' failed: {e}") from e

        try:
            scores = list(raw)
        except TypeError as e:
            raise StrategyFault(
                f"Scoring strategy '{self.name}' must return a sequence, got {type(raw).__name__}"
            ) from e

        if len(scores) != len(agents):
            raise StrategyFault(
                f"Scoring strategy '{self.name}' returned {len(scores)} scores for {len(agents)} agents"
            )
        for i, s in enumerate(scores):
            if not isinstance(s, numbers.Real) or isinstance(s, bool) or math.isnan(s):
                raise StrategyFault(
                    f"Scoring strategy '{self.name}' returned a non-numeric score at position {i}: {s!r}"
                )
            if math.isinf(s):
                raise StrategyFault(
                    f"Scoring strategy '{self.name}' returned a non-finite score at position {i}: {s!r}"
                )
        return [float(s) for s in scores]


def seniority_boost(
    agents: List[AgentRecord],
    weights: Dict[str, float],
    normalized: NormalizedMetrics,
) -> List[float]:
    """
    Example strategy for the default sales attributes.

    - performanceScore counts double for agents with 12+ months seniority
    - +0.1 for handling more activeClients than the team average
    - -0.1 for targetAchievedPercent below 50
    """
    avg_clients = sum(a["activeClients"] for a in agents) / len(agents)

    scores = []
    for i, agent in enumerate(agents):
        perf = weights["performanceScore"] * normalized["performanceScore"][i]
        score = 2 * perf if agent["seniorityMonths"] >= 12 else perf
        score += weights["seniorityMonths"] * normalized["seniorityMonths"][i]
        score += weights["targetAchievedPercent"] * normalized["targetAchievedPercent"][i]
        score += weights["activeClients"] * normalized["activeClients"][i]
        if agent["activeClients"] > avg_clients:
            score += 0.1
        if agent["targetAchievedPercent"] < 50:
            score -= 0.1
        scores.append(score)
    return scores


STRATEGIES: Dict[str, Callable[[], Scorer]] = {
    "weighted": WeightedSumScorer,
    "seniority-boost": lambda: StrategyScorer(seniority_boost, name="seniority-boost"),
}


def get_scorer(name: Optional[str] = None) -> Scorer:
    """Look up a scorer by registry name. None selects the native weighted sum."""
    if name is None:
        return WeightedSumScorer()
    try:
        factory = STRATEGIES[name]
    except KeyError:
        known = ", ".join(sorted(STRATEGIES))
        raise ConfigError(f"Unknown scoring strategy: {name} (available: {known})")
    return factory()


def as_scorer(scorer: Optional[object]) -> Scorer:
    """Accept a Scorer, a bare scoring function, or None."""
    if scorer is None:
        return WeightedSumScorer()
    if hasattr(scorer, "score"):
        return scorer  # type: ignore[return-value]
    if callable(scorer):
        return StrategyScorer(scorer)
    raise TypeError(f"Expected a Scorer or scoring function, got {type(scorer).__name__}")
