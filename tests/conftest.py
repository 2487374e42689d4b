"""
Pytest configuration and shared fixtures.
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict

import pytest

from discount_allocator.config import default_config
from discount_allocator.logger import get_logger, reset_logger

ENV_OVERRIDES = [
    "MIN_PER_AGENT", "MAX_PER_AGENT", "WEIGHTS",
    "ALLOCATOR_AUDIT_DIR", "ALLOCATOR_LOG_LEVEL", "ALLOCATOR_HOST", "ALLOCATOR_PORT",
]


@pytest.fixture(autouse=True)
def quiet_logger(tmp_path, monkeypatch):
    """Route the global logger to a temp dir and keep env overrides out of tests."""
    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    reset_logger()
    logger = get_logger(log_dir=tmp_path / "logs", enable_console=False)
    yield logger
    reset_logger()


def _agent(agent_id: str, perf, seniority, target, clients) -> Dict[str, Any]:
    return {
        "id": agent_id,
        "performanceScore": perf,
        "seniorityMonths": seniority,
        "targetAchievedPercent": target,
        "activeClients": clients,
    }


@pytest.fixture
def default_cfg() -> Dict[str, Any]:
    """Default weights, no bounds."""
    return default_config()


@pytest.fixture
def normal_input() -> Dict[str, Any]:
    """Four agents with varied attributes."""
    return {
        "siteKitty": 10000,
        "salesAgents": [
            _agent("A1", 90, 18, 85, 12),
            _agent("A2", 70, 6, 60, 8),
            _agent("A3", 80, 24, 95, 15),
            _agent("A4", 55, 3, 40, 5),
        ],
    }


@pytest.fixture
def all_same_input() -> Dict[str, Any]:
    """Two agents with identical attributes across the board."""
    return {
        "siteKitty": 1000,
        "salesAgents": [
            _agent("A1", 80, 12, 75, 10),
            _agent("A2", 80, 12, 75, 10),
        ],
    }


@pytest.fixture
def rounding_input() -> Dict[str, Any]:
    """Three identical agents: 100 / 3 leaves a rounding residual."""
    return {
        "siteKitty": 100,
        "salesAgents": [
            _agent("A1", 60, 10, 70, 9),
            _agent("A2", 60, 10, 70, 9),
            _agent("A3", 60, 10, 70, 9),
        ],
    }


@pytest.fixture
def input_file(tmp_path, normal_input) -> Path:
    """Write the normal input to a temp JSON file."""
    path = tmp_path / "input.json"
    path.write_text(json.dumps(normal_input))
    return path


@pytest.fixture
def scenario_dir(tmp_path, normal_input, rounding_input) -> Path:
    """Folder with two good scenarios, one broken JSON file and one invalid input."""
    folder = tmp_path / "scenarios"
    folder.mkdir()
    (folder / "a_normal.json").write_text(json.dumps(normal_input))
    (folder / "b_broken.json").write_text("{not json")
    bad = copy.deepcopy(rounding_input)
    bad["siteKitty"] = -5
    (folder / "c_negative.json").write_text(json.dumps(bad))
    (folder / "d_rounding.json").write_text(json.dumps(rounding_input))
    (folder / "notes.txt").write_text("ignored")
    return folder
