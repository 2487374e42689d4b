import math
import numbers
from typing import Any, Dict, List, Mapping, Optional

from .errors import ValidationError

BOUND_FIELDS = ["minPerAgent", "maxPerAgent"]


def _is_number(v: Any) -> bool:
    return isinstance(v, numbers.Real) and not isinstance(v, bool) and not math.isnan(v)


def _is_finite(v: Any) -> bool:
    return _is_number(v) and math.isfinite(v)


def collect_input_errors(data: Any, config: Optional[Mapping[str, Any]] = None) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    Order matches the order the checks run in: kitty, agent list, bounds.
    """
    errors: List[str] = []
    config = config or {}

    if not isinstance(data, Mapping):
        return ["Input data missing"]

    # Kitty
    if "siteKitty" not in data:
        errors.append("siteKitty field missing")
    elif not _is_number(data["siteKitty"]):
        errors.append("siteKitty must be a number")
    elif math.isinf(data["siteKitty"]):
        errors.append("siteKitty must be finite")
    elif data["siteKitty"] < 0:
        errors.append("siteKitty must not be negative")

    # Agent list
    agents = data.get("salesAgents")
    if not isinstance(agents, (list, tuple)):
        errors.append("salesAgents field missing or not a list")
    elif len(agents) == 0:
        errors.append("No agents present")

    # Bounds: each must be numeric if given, and min may not exceed max
    for f in BOUND_FIELDS:
        v = config.get(f)
        if v is not None and not _is_number(v):
            errors.append(f"{f} must be a number if provided")
    lo = config.get("minPerAgent")
    hi = config.get("maxPerAgent")
    if lo is not None and _is_number(lo) and math.isinf(lo):
        errors.append("minPerAgent must be finite")
    if _is_number(hi) and hi == -math.inf:
        errors.append("maxPerAgent cannot be negative infinity")
    if _is_number(lo) and _is_number(hi) and lo > hi:
        errors.append("minPerAgent cannot exceed maxPerAgent")

    weights = config.get("weights")
    if weights is not None:
        if not isinstance(weights, Mapping):
            errors.append("weights must be an object")
        else:
            for name, w in weights.items():
                if not _is_number(w):
                    errors.append(f"Weight for '{name}' must be a number")
                elif not _is_finite(w):
                    errors.append(f"Weight for '{name}' must be finite")

    return errors


def collect_agent_errors(agents: List[Any], attributes: List[str]) -> List[str]:
    """Check each agent has an id and a numeric value for every weighted attribute."""
    errors: List[str] = []
    seen = set()
    for idx, agent in enumerate(agents):
        if not isinstance(agent, Mapping):
            errors.append(f"Agent at position {idx} must be an object")
            continue
        agent_id = agent.get("id")
        if agent_id is None or str(agent_id).strip() == "":
            errors.append(f"Agent at position {idx} is missing an id")
        elif str(agent_id) in seen:
            errors.append(f"Duplicate agent id: {agent_id}")
        else:
            seen.add(str(agent_id))
        label = agent_id if agent_id is not None else f"#{idx}"
        for attr in attributes:
            if attr not in agent:
                errors.append(f"Agent {label} is missing attribute '{attr}'")
            elif not _is_number(agent[attr]):
                errors.append(f"Agent {label} attribute '{attr}' must be a number")
            elif not _is_finite(agent[attr]):
                errors.append(f"Agent {label} attribute '{attr}' must be finite")
    return errors


def validate_input(data: Any, config: Optional[Mapping[str, Any]] = None) -> None:
    """Raise ValidationError naming the first violated condition."""
    errors = collect_input_errors(data, config)
    if errors:
        raise ValidationError(errors[0])


def validate_agents(agents: List[Any], weights: Dict[str, float]) -> None:
    errors = collect_agent_errors(agents, list(weights.keys()))
    if errors:
        raise ValidationError(errors[0])
