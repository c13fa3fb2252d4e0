"""Decision core for rolling upgrades of autoscaling groups."""

from asg_rollout.budget import resolve_max_unavailable
from asg_rollout.cluster_state import ClusterState
from asg_rollout.lifecycle import count_in_service, in_service_ids
from asg_rollout.models import (
    Batch,
    Instance,
    LifecycleState,
    Node,
    NodeCondition,
    ReadinessGate,
    RolloutPolicy,
    StrategyType,
    UpdateStrategy,
)
from asg_rollout.readiness import is_node_ready, passes_readiness_gates
from asg_rollout.selector import (
    get_next_available_instances,
    get_next_set_of_available_instances_in_az,
    select_next_batch,
)

__all__ = [
    "Batch",
    "ClusterState",
    "Instance",
    "LifecycleState",
    "Node",
    "NodeCondition",
    "ReadinessGate",
    "RolloutPolicy",
    "StrategyType",
    "UpdateStrategy",
    "count_in_service",
    "get_next_available_instances",
    "get_next_set_of_available_instances_in_az",
    "in_service_ids",
    "is_node_ready",
    "passes_readiness_gates",
    "resolve_max_unavailable",
    "select_next_batch",
]
