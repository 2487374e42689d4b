"""
Allocation config: defaults, JSON config files and environment overrides.

Config shape:
    {"weights": {<attr>: number}, "minPerAgent": number, "maxPerAgent": number}

Environment overrides (applied after the file):
    MIN_PER_AGENT   number
    MAX_PER_AGENT   number ("inf" for unbounded)
    WEIGHTS         JSON object merged into the weights
"""

import copy
import json
import math
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .errors import ConfigError
from .models import Bounds

DEFAULT_WEIGHTS: Dict[str, float] = {
    "performanceScore": 0.4,
    "seniorityMonths": 0.2,
    "targetAchievedPercent": 0.3,
    "activeClients": 0.1,
}

DEFAULT_CONFIG: Dict[str, Any] = {
    "weights": DEFAULT_WEIGHTS,
    "minPerAgent": 0,
    "maxPerAgent": math.inf,
}

DEFAULT_AUDIT_DIR = "logs"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000


def default_config() -> Dict[str, Any]:
    return copy.deepcopy(DEFAULT_CONFIG)


def _parse_number(name: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")
    if math.isnan(value):
        raise ConfigError(f"{name} must be a number, got {raw!r}")
    return int(value) if value.is_integer() else value


def read_config_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file {path} is not valid JSON: {e}")
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return data


def apply_env_overrides(config: Dict[str, Any], environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    environ = os.environ if environ is None else environ

    if environ.get("MIN_PER_AGENT"):
        config["minPerAgent"] = _parse_number("MIN_PER_AGENT", environ["MIN_PER_AGENT"])
    if environ.get("MAX_PER_AGENT"):
        config["maxPerAgent"] = _parse_number("MAX_PER_AGENT", environ["MAX_PER_AGENT"])
    if environ.get("WEIGHTS"):
        try:
            overrides = json.loads(environ["WEIGHTS"])
        except json.JSONDecodeError as e:
            raise ConfigError(f"WEIGHTS must be a JSON object: {e}")
        if not isinstance(overrides, dict):
            raise ConfigError("WEIGHTS must be a JSON object")
        weights = dict(config.get("weights") or {})
        weights.update(overrides)
        config["weights"] = weights
    return config


def load_config(path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """
    Build the effective config.

    The file is merged over the defaults key by key, so a file that sets
    "weights" replaces the default weights entirely.
    """
    config = default_config()
    if path is not None:
        config.update(read_config_file(Path(path)))
    return apply_env_overrides(config, environ)


def resolve_weights(config: Optional[Mapping[str, Any]]) -> Dict[str, float]:
    weights = (config or {}).get("weights")
    if weights is None:
        return dict(DEFAULT_WEIGHTS)
    return dict(weights)


def resolve_bounds(config: Optional[Mapping[str, Any]]) -> Bounds:
    config = config or {}
    lo = config.get("minPerAgent")
    hi = config.get("maxPerAgent")
    return Bounds(
        min_per_agent=DEFAULT_CONFIG["minPerAgent"] if lo is None else lo,
        max_per_agent=DEFAULT_CONFIG["maxPerAgent"] if hi is None else hi,
    )


def config_to_json(config: Mapping[str, Any]) -> Dict[str, Any]:
    """Copy of config safe for json.dump (an unbounded max becomes null)."""
    out = dict(config)
    out.update(resolve_bounds(config).to_dict())
    out["weights"] = resolve_weights(config)
    return out


def audit_dir_from_env(environ: Optional[Mapping[str, str]] = None) -> Path:
    environ = os.environ if environ is None else environ
    return Path(environ.get("ALLOCATOR_AUDIT_DIR") or DEFAULT_AUDIT_DIR)
