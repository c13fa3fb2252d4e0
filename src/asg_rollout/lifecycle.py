"""Lifecycle classification of ASG instances."""

from __future__ import annotations

from collections.abc import Iterable

from asg_rollout.models import Instance, LifecycleState


def is_in_service(instance: Instance) -> bool:
    return instance.lifecycle_state == LifecycleState.IN_SERVICE


def count_in_service(instances: Iterable[Instance]) -> int:
    """Count instances currently serving traffic."""
    return sum(1 for i in instances if is_in_service(i))


def in_service_ids(instances: Iterable[Instance]) -> list[str]:
    """Return IDs of in-service instances, preserving input order."""
    return [i.instance_id for i in instances if is_in_service(i)]
