"""Tests for building snapshots from AWS and Kubernetes API objects."""

from __future__ import annotations

from unittest.mock import patch

from kubernetes import client as k8s_client

from asg_rollout.lifecycle import in_service_ids
from asg_rollout.models import LifecycleState, ReadinessGate
from asg_rollout.readiness import is_node_ready, passes_readiness_gates
from asg_rollout.snapshots import instances_from_asg_description, node_from_k8s


class TestInstancesFromAsgDescription:
    def test_converts_instances_in_order(self) -> None:
        group = {
            "AutoScalingGroupName": "workers",
            "Instances": [
                {"InstanceId": "i-2", "AvailabilityZone": "us-west-2b", "LifecycleState": "InService"},
                {"InstanceId": "i-1", "AvailabilityZone": "us-west-2a", "LifecycleState": "Terminating:Wait"},
            ],
        }

        instances = instances_from_asg_description(group)

        assert [i.instance_id for i in instances] == ["i-2", "i-1"]
        assert instances[0].availability_zone == "us-west-2b"
        assert instances[1].lifecycle_state == "Terminating:Wait"
        assert in_service_ids(instances) == ["i-2"]

    def test_skips_entries_without_id(self) -> None:
        group = {"Instances": [{"AvailabilityZone": "us-west-2a"}, {"InstanceId": "i-1"}]}
        instances = instances_from_asg_description(group)
        assert [i.instance_id for i in instances] == ["i-1"]
        assert instances[0].availability_zone == ""

    def test_missing_instances_key(self) -> None:
        assert instances_from_asg_description({"AutoScalingGroupName": "empty"}) == []


class TestNodeFromK8s:
    def test_ready_node_with_labels(self) -> None:
        v1_node = k8s_client.V1Node(
            metadata=k8s_client.V1ObjectMeta(name="node-1", labels={"healthy": "true"}),
            status=k8s_client.V1NodeStatus(
                conditions=[k8s_client.V1NodeCondition(type="Ready", status="True")],
            ),
        )

        node = node_from_k8s(v1_node)

        assert node.name == "node-1"
        assert is_node_ready(node)
        assert passes_readiness_gates(node, [ReadinessGate(match_labels={"healthy": "true"})])

    def test_not_ready_node(self) -> None:
        v1_node = k8s_client.V1Node(
            metadata=k8s_client.V1ObjectMeta(name="node-2"),
            status=k8s_client.V1NodeStatus(
                conditions=[k8s_client.V1NodeCondition(type="Ready", status="False")],
            ),
        )
        node = node_from_k8s(v1_node)
        assert not is_node_ready(node)
        assert node.labels == {}

    def test_node_without_status(self) -> None:
        node = node_from_k8s(k8s_client.V1Node(metadata=k8s_client.V1ObjectMeta(name="node-3")))
        assert node.conditions == []
        assert not is_node_ready(node)


class TestMissingLifecycleState:
    def test_missing_state_uses_instance_default(self) -> None:
        with patch("asg_rollout.models.log") as mock_log:
            instances = instances_from_asg_description({"Instances": [{"InstanceId": "i-1"}]})
        assert instances[0].lifecycle_state == LifecycleState.IN_SERVICE
        mock_log.warning.assert_not_called()
