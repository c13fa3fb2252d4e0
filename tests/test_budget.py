"""Tests for max-unavailable budget resolution."""

from __future__ import annotations

import pytest

from asg_rollout.budget import resolve_max_unavailable
from asg_rollout.models import UpdateStrategy


class TestPercentageBudget:
    def test_exact_percentage(self) -> None:
        strategy = UpdateStrategy(max_unavailable="75%")
        assert resolve_max_unavailable(strategy, 200) == 150

    def test_truncates_instead_of_rounding(self) -> None:
        strategy = UpdateStrategy(max_unavailable="67%")
        assert resolve_max_unavailable(strategy, 3) == 2

    def test_non_integer_result_is_floored(self) -> None:
        strategy = UpdateStrategy(max_unavailable="37%")
        assert resolve_max_unavailable(strategy, 50) == 18

    def test_single_instance_never_gets_zero(self) -> None:
        strategy = UpdateStrategy(max_unavailable="67%")
        assert resolve_max_unavailable(strategy, 1) == 1

    def test_small_percentage_of_large_group_is_at_least_one(self) -> None:
        assert resolve_max_unavailable("1%", 10) == 1

    def test_empty_group_gives_zero(self) -> None:
        assert resolve_max_unavailable("50%", 0) == 0

    def test_full_percentage(self) -> None:
        assert resolve_max_unavailable("100%", 7) == 7

    @pytest.mark.parametrize("total", [1, 3, 10, 99, 250])
    @pytest.mark.parametrize("percent", [1, 37, 67, 100])
    def test_within_bounds(self, total: int, percent: int) -> None:
        budget = resolve_max_unavailable(f"{percent}%", total)
        truncated = total * percent // 100
        if truncated == 0:
            assert budget == 1
        else:
            assert budget == truncated
        assert 1 <= budget <= total


class TestAbsoluteBudget:
    def test_digit_string_is_absolute(self) -> None:
        strategy = UpdateStrategy(max_unavailable="75")
        assert resolve_max_unavailable(strategy, 200) == 75

    def test_int_value(self) -> None:
        strategy = UpdateStrategy(max_unavailable=3)
        assert resolve_max_unavailable(strategy, 10) == 3

    @pytest.mark.parametrize("total", [0, 1, 5, 1000])
    def test_ignores_total(self, total: int) -> None:
        assert resolve_max_unavailable(4, total) == 4

    def test_not_clamped_to_total(self) -> None:
        assert resolve_max_unavailable(10, 2) == 10

    def test_default_strategy_is_one(self) -> None:
        assert resolve_max_unavailable(UpdateStrategy(), 50) == 1


class TestMalformedValues:
    def test_malformed_percentage_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid maxUnavailable"):
            resolve_max_unavailable("abc%", 10)
