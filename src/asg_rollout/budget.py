"""Max-unavailable budget math for rolling upgrades."""

from __future__ import annotations

from asg_rollout.models import UpdateStrategy
from asg_rollout.validation import parse_max_unavailable


def resolve_max_unavailable(strategy: UpdateStrategy | int | str, total: int) -> int:
    """Resolve a strategy's maxUnavailable against ``total`` instances.

    Absolute values are returned as-is, without clamping to ``total``.
    Percentages are truncated (never rounded); a percentage that truncates to
    zero still yields 1 when there is at least one instance, so a rollout can
    always make progress.

    Args:
        strategy: An UpdateStrategy, or a bare maxUnavailable value.
        total: Number of instances the budget applies to.

    Returns:
        The number of instances that may be unavailable at once.
    """
    value = strategy.max_unavailable if isinstance(strategy, UpdateStrategy) else strategy
    amount, is_percent = parse_max_unavailable(value)
    if not is_percent:
        return amount

    # Note 1: Integer truncation, not rounding: 67% of 3 is 2.
    budget = total * amount // 100
    # Note 2: A percentage never yields a zero-sized batch while instances remain.
    if budget == 0 and total >= 1:
        return 1
    return budget
