"""
Result types produced by the allocation pipeline.

Inputs stay in their JSON shape (plain dicts) so that scoring strategies
see agents exactly as the caller supplied them; only the derived values
get their own types.
"""

import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Union

Number = Union[int, float]

# An agent record: {"id": "A1", "performanceScore": 87, ...}
AgentRecord = Dict[str, Any]

# attribute name -> values in [0, 1], index-aligned with the agent list
NormalizedMetrics = Dict[str, List[float]]


def _json_number(value: Optional[Number]) -> Optional[Number]:
    # JSON has no infinity; an unbounded max serializes as null
    if value is None or (isinstance(value, float) and math.isinf(value)):
        return None
    return value


@dataclass(frozen=True)
class Bounds:
    min_per_agent: Number = 0
    max_per_agent: Number = math.inf

    def clamp(self, value: float) -> float:
        return max(self.min_per_agent, min(self.max_per_agent, value))

    def to_dict(self) -> Dict[str, Optional[Number]]:
        return {
            "minPerAgent": _json_number(self.min_per_agent),
            "maxPerAgent": _json_number(self.max_per_agent),
        }


@dataclass
class AllocationEntry:
    id: str
    assigned_amount: Number
    justification: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "assignedAmount": self.assigned_amount,
            "justification": self.justification,
        }


@dataclass
class SummaryStats:
    total_allocated: Number
    remaining_kitty: Number
    mean: float
    median: float
    min: Number
    max: Number
    agents_at_min: int
    agents_at_max: int

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        return {
            "totalAllocated": d["total_allocated"],
            "remainingKitty": d["remaining_kitty"],
            "mean": d["mean"],
            "median": d["median"],
            "min": d["min"],
            "max": d["max"],
            "agentsAtMin": d["agents_at_min"],
            "agentsAtMax": d["agents_at_max"],
        }


@dataclass
class AllocationResult:
    allocations: List[AllocationEntry]
    summary: SummaryStats

    @property
    def amounts(self) -> List[Number]:
        return [entry.assigned_amount for entry in self.allocations]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "allocations": [entry.to_dict() for entry in self.allocations],
            "summary": self.summary.to_dict(),
        }
