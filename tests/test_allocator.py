"""
Tests for proportional distribution, clamping and reconciliation.
"""

import math

import pytest

from discount_allocator.allocator import distribute, raw_shares, reconcile, round_half_up
from discount_allocator.errors import AllocationError
from discount_allocator.models import Bounds


UNBOUNDED = Bounds()


class TestRoundHalfUp:

    def test_half_rounds_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4

    def test_below_half_rounds_down(self):
        assert round_half_up(33.333) == 33

    def test_negative_half_rounds_toward_positive(self):
        assert round_half_up(-2.5) == -2


class TestRawShares:

    def test_proportional(self):
        assert raw_shares(100, [3, 1]) == pytest.approx([75.0, 25.0])

    def test_zero_total_splits_equally(self):
        assert raw_shares(90, [0, 0, 0]) == [30.0, 30.0, 30.0]

    def test_scores_cancelling_to_zero_split_equally(self):
        assert raw_shares(100, [1, -1]) == [50.0, 50.0]

    def test_all_negative_scores(self):
        # Only relative size matters
        assert raw_shares(100, [-1, -3]) == pytest.approx([25.0, 75.0])

    def test_overflowing_total_raises(self):
        with pytest.raises(AllocationError, match="too large"):
            raw_shares(100, [1e308, 1e308])

    def test_overflowing_share_raises(self):
        with pytest.raises(AllocationError, match="too large"):
            raw_shares(1e300, [1e10, 1.0])


class TestReconcile:

    def test_residual_goes_to_first_agent(self):
        amounts, diff = reconcile([33, 33, 33], 100)
        assert amounts == [34, 33, 33]
        assert diff == 1

    def test_negative_residual(self):
        amounts, diff = reconcile([60, 35, 20], 100)
        assert amounts == [45, 35, 20]
        assert diff == -15

    def test_no_residual_leaves_amounts(self):
        original = [50, 50]
        amounts, diff = reconcile(original, 100)
        assert amounts == [50, 50]
        assert diff == 0


class TestDistribute:

    def test_total_always_equals_kitty(self):
        for kitty, scores in [(100, [1, 1, 1]), (7, [0.2, 0.3, 0.5]), (1001, [5, 3, 2, 1]), (0, [1, 2])]:
            assert sum(distribute(kitty, scores, UNBOUNDED)) == kitty

    def test_clamp_before_round(self):
        # raw shares 66.67 / 33.33 / 0; min 20 lifts the last to 20
        amounts = distribute(100, [1.0, 0.5, 0.0], Bounds(20, 80))
        assert amounts[1:] == [33, 20]
        assert amounts[0] == 100 - 33 - 20

    def test_max_bound(self):
        amounts = distribute(100, [8, 1, 1], Bounds(0, 50))
        # 80 clamps to 50, others 10 each, residual 30 returns to agent 0
        assert amounts == [80, 10, 10]

    def test_first_agent_may_leave_bounds(self):
        amounts = distribute(100, [1, 1, 1], Bounds(0, 20))
        assert amounts[1:] == [20, 20]
        assert amounts[0] == 60

    def test_equal_split_is_clamped(self):
        amounts = distribute(100, [0, 0, 0, 0], Bounds(30, math.inf))
        assert amounts[1:] == [30, 30, 30]
        assert amounts[0] == 10

    def test_non_integer_kitty(self):
        amounts = distribute(10.5, [1, 1], UNBOUNDED)
        assert sum(amounts) == pytest.approx(10.5)
        assert amounts[1] == 5
