"""Validation helpers for rollout policy values."""

from __future__ import annotations

import re

# Percentage form of maxUnavailable, e.g. "25%"
_PERCENT_RE = re.compile(r"^(\d{1,3})%$")
_ABSOLUTE_RE = re.compile(r"^\d+$")

# AWS ASG names: 1-255 chars, no colons (colons would collide with ARNs)
_ASG_NAME_RE = re.compile(r"^[^:\s][^:]{0,254}$")

_VALID_STRATEGY_TYPES = {"randomUpdate", "uniformAcrossAzUpdate"}


def parse_max_unavailable(value: int | str) -> tuple[int, bool]:
    """Split a maxUnavailable value into ``(amount, is_percent)``.

    Integers and digit-only strings are absolute counts. Strings ending in
    ``%`` are percentages in the range 0-100.

    Raises:
        ValueError: If the value is negative, a bool, or not a recognisable
            count or percentage.
    """
    if isinstance(value, bool):
        msg = f"Invalid maxUnavailable: {value!r}. Must be an integer or a percentage string."
        raise ValueError(msg)

    if isinstance(value, int):
        if value < 0:
            msg = f"Invalid maxUnavailable: {value!r}. Must not be negative."
            raise ValueError(msg)
        return value, False

    if isinstance(value, str):
        text = value.strip()
        if _ABSOLUTE_RE.match(text):
            return int(text), False
        match = _PERCENT_RE.match(text)
        if match:
            percent = int(match.group(1))
            if percent > 100:
                msg = f"Invalid maxUnavailable: {value!r}. Percentage must be between 0% and 100%."
                raise ValueError(msg)
            return percent, True

    msg = f"Invalid maxUnavailable: {value!r}. Must be an integer or a percentage string."
    raise ValueError(msg)


def validate_max_unavailable(value: int | str) -> None:
    """Validate a maxUnavailable value without resolving it."""
    parse_max_unavailable(value)


def validate_strategy_type(strategy_type: str) -> None:
    """Validate the rollout strategy type."""
    if strategy_type not in _VALID_STRATEGY_TYPES:
        valid = ", ".join(sorted(_VALID_STRATEGY_TYPES))
        msg = f"Invalid strategy type: {strategy_type!r}. Must be one of: {valid}"
        raise ValueError(msg)


def validate_asg_name(asg_name: str | None) -> None:
    """Validate an autoscaling group name."""
    if asg_name is None:
        return
    if not _ASG_NAME_RE.match(asg_name):
        msg = f"Invalid ASG name: {asg_name!r}. Must be 1-255 characters without colons."
        raise ValueError(msg)
