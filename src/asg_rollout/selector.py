"""Next-batch selection for rolling upgrades, backed by ClusterState claims."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from asg_rollout.budget import resolve_max_unavailable
from asg_rollout.cluster_state import ClusterState
from asg_rollout.models import Batch, Instance, StrategyType, UpdateStrategy

log = structlog.get_logger()


def get_next_available_instances(
    asg_name: str,
    count: int,
    instances: Sequence[Instance],
    state: ClusterState,
) -> list[Instance]:
    """Claim up to ``count`` instances from anywhere in the ASG."""
    selected = state.claim_next(asg_name, instances, count)
    log.debug("next_instances_selected", asg=asg_name, requested=count, selected=len(selected))
    return selected


def get_next_set_of_available_instances_in_az(
    asg_name: str,
    zone: str,
    count: int,
    instances: Sequence[Instance],
    state: ClusterState,
) -> list[Instance]:
    """Claim up to ``count`` instances from a single availability zone."""
    selected = state.claim_next_in_zone(asg_name, zone, instances, count)
    log.debug("next_instances_selected", asg=asg_name, zone=zone, requested=count, selected=len(selected))
    return selected


def _zones_in_order(instances: Sequence[Instance]) -> list[str]:
    return list(dict.fromkeys(i.availability_zone for i in instances))


def select_next_batch(
    state: ClusterState,
    asg_name: str,
    instances: Sequence[Instance],
    strategy: UpdateStrategy,
) -> Batch:
    """Pick and claim the next batch of instances to rotate.

    The batch size is bounded by the strategy's maxUnavailable, resolved
    against the size of the snapshot. A random strategy draws from the whole
    ASG; a uniform-across-AZ strategy walks zones in the order they first
    appear in the snapshot and returns the first zone that still has
    unclaimed instances.

    Args:
        state: Registry the ASG was initialized in.
        asg_name: Name of the autoscaling group.
        instances: Current snapshot of the ASG's members.
        strategy: Strategy configured for the ASG.

    Returns:
        A Batch; its instance list is empty once nothing is left to claim.
    """
    budget = resolve_max_unavailable(strategy, len(instances))

    if strategy.type == StrategyType.UNIFORM_ACROSS_AZ:
        for zone in _zones_in_order(instances):
            selected = get_next_set_of_available_instances_in_az(asg_name, zone, budget, instances, state)
            if selected:
                log.info("batch_selected", asg=asg_name, zone=zone, budget=budget, size=len(selected))
                return Batch(asg_name=asg_name, zone=zone, budget=budget, instances=selected)
        log.info("batch_empty", asg=asg_name, budget=budget, strategy=strategy.type.value)
        return Batch(asg_name=asg_name, budget=budget)

    selected = get_next_available_instances(asg_name, budget, instances, state)
    if selected:
        log.info("batch_selected", asg=asg_name, budget=budget, size=len(selected))
    else:
        log.info("batch_empty", asg=asg_name, budget=budget, strategy=strategy.type.value)
    return Batch(asg_name=asg_name, budget=budget, instances=selected)
