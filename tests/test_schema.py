"""
Tests for input validation.
"""

import math

import pytest

from discount_allocator.errors import ValidationError
from discount_allocator.schema import (
    collect_agent_errors,
    collect_input_errors,
    validate_agents,
    validate_input,
)


class TestCollectInputErrors:
    """Test the list-returning validator."""

    def test_valid_input(self, normal_input, default_cfg):
        """Valid input should have no errors."""
        assert collect_input_errors(normal_input, default_cfg) == []

    def test_input_missing(self):
        assert collect_input_errors(None) == ["Input data missing"]

    def test_missing_kitty(self, normal_input):
        del normal_input["siteKitty"]
        errors = collect_input_errors(normal_input)
        assert errors == ["siteKitty field missing"]

    def test_non_numeric_kitty(self, normal_input):
        for bad in ["100", True, None, float("nan")]:
            normal_input["siteKitty"] = bad
            errors = collect_input_errors(normal_input)
            assert any("siteKitty must be a number" in e for e in errors), bad

    def test_negative_kitty(self, normal_input):
        normal_input["siteKitty"] = -1
        assert collect_input_errors(normal_input) == ["siteKitty must not be negative"]

    def test_zero_kitty_is_valid(self, normal_input):
        normal_input["siteKitty"] = 0
        assert collect_input_errors(normal_input) == []

    def test_agents_not_a_list(self, normal_input):
        normal_input["salesAgents"] = {"id": "A1"}
        errors = collect_input_errors(normal_input)
        assert errors == ["salesAgents field missing or not a list"]

    def test_empty_agents(self, normal_input):
        normal_input["salesAgents"] = []
        assert collect_input_errors(normal_input) == ["No agents present"]

    def test_min_exceeds_max(self, normal_input):
        errors = collect_input_errors(normal_input, {"minPerAgent": 50, "maxPerAgent": 10})
        assert errors == ["minPerAgent cannot exceed maxPerAgent"]

    def test_only_one_bound_given(self, normal_input):
        assert collect_input_errors(normal_input, {"minPerAgent": 50}) == []
        assert collect_input_errors(normal_input, {"maxPerAgent": 10}) == []

    def test_unbounded_max(self, normal_input):
        assert collect_input_errors(normal_input, {"minPerAgent": 5, "maxPerAgent": math.inf}) == []

    def test_non_numeric_weight(self, normal_input):
        errors = collect_input_errors(normal_input, {"weights": {"performanceScore": "high"}})
        assert any("performanceScore" in e for e in errors)

    def test_errors_in_check_order(self):
        """Kitty problems are reported before agent-list problems."""
        errors = collect_input_errors({"siteKitty": -1, "salesAgents": []})
        assert errors == ["siteKitty must not be negative", "No agents present"]


class TestValidateInput:
    """Test the raising validator."""

    def test_valid_input_passes(self, normal_input, default_cfg):
        validate_input(normal_input, default_cfg)

    def test_raises_first_error(self):
        with pytest.raises(ValidationError, match="siteKitty field missing"):
            validate_input({"salesAgents": []})


class TestAgentErrors:
    """Test per-agent attribute checks."""

    def test_missing_attribute(self, normal_input):
        del normal_input["salesAgents"][1]["activeClients"]
        errors = collect_agent_errors(normal_input["salesAgents"], ["activeClients"])
        assert errors == ["Agent A2 is missing attribute 'activeClients'"]

    def test_non_numeric_attribute(self, normal_input):
        normal_input["salesAgents"][0]["performanceScore"] = "great"
        with pytest.raises(ValidationError, match="performanceScore"):
            validate_agents(normal_input["salesAgents"], {"performanceScore": 1.0})

    def test_missing_id(self):
        errors = collect_agent_errors([{"x": 1}], ["x"])
        assert errors == ["Agent at position 0 is missing an id"]

    def test_duplicate_id(self):
        errors = collect_agent_errors([{"id": "A", "x": 1}, {"id": "A", "x": 2}], ["x"])
        assert errors == ["Duplicate agent id: A"]

    def test_only_weighted_attributes_checked(self):
        assert collect_agent_errors([{"id": "A", "x": 1, "note": "text"}], ["x"]) == []

    def test_infinite_attribute(self, normal_input):
        normal_input["salesAgents"][1]["performanceScore"] = math.inf
        errors = collect_agent_errors(normal_input["salesAgents"], ["performanceScore"])
        assert errors == ["Agent A2 attribute 'performanceScore' must be finite"]


class TestNonFiniteConfig:
    """Infinite weights and a negative-infinite maximum are rejected."""

    def test_infinite_weight(self, normal_input):
        for bad in [math.inf, -math.inf]:
            errors = collect_input_errors(normal_input, {"weights": {"activeClients": bad}})
            assert errors == ["Weight for 'activeClients' must be finite"]

    def test_nan_weight_is_not_a_number(self, normal_input):
        errors = collect_input_errors(normal_input, {"weights": {"activeClients": math.nan}})
        assert errors == ["Weight for 'activeClients' must be a number"]

    def test_negative_infinite_max(self, normal_input):
        errors = collect_input_errors(normal_input, {"maxPerAgent": -math.inf})
        assert errors == ["maxPerAgent cannot be negative infinity"]
