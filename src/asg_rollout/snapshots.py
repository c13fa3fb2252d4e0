"""Conversion of raw AWS and Kubernetes API objects into snapshot models."""

from __future__ import annotations

from typing import Any

import structlog
from kubernetes import client as k8s_client

from asg_rollout.models import Instance, Node, NodeCondition

log = structlog.get_logger()


def instances_from_asg_description(group: dict[str, Any]) -> list[Instance]:
    """Build Instance snapshots from one DescribeAutoScalingGroups group entry.

    Keeps the order the API returned. Entries without an InstanceId are skipped.
    """
    asg_name = group.get("AutoScalingGroupName")
    results: list[Instance] = []
    for raw in group.get("Instances") or []:
        instance_id = raw.get("InstanceId")
        if not instance_id:
            log.warning("instance_missing_id", asg=asg_name)
            continue
        fields: dict[str, Any] = {
            "instance_id": instance_id,
            "availability_zone": raw.get("AvailabilityZone") or "",
        }
        # A missing state falls back to the Instance default (InService)
        if raw.get("LifecycleState"):
            fields["lifecycle_state"] = raw["LifecycleState"]
        results.append(Instance(**fields))
    return results


def node_from_k8s(node: k8s_client.V1Node) -> Node:
    """Flatten a kubernetes V1Node into the fields readiness checks need."""
    metadata = node.metadata
    status = node.status
    conditions = [
        NodeCondition(type=c.type, status=c.status)
        for c in ((status.conditions if status else None) or [])
    ]
    return Node(
        name=(metadata.name if metadata else None) or "",
        conditions=conditions,
        labels=(metadata.labels if metadata else None) or {},
    )
