"""Node readiness checks: the Ready condition and label-based readiness gates."""

from __future__ import annotations

from collections.abc import Sequence

from asg_rollout.models import Node, ReadinessGate

NODE_READY = "Ready"
CONDITION_TRUE = "True"


def is_node_ready(node: Node) -> bool:
    """Return True if the node reports a Ready condition with status True."""
    return any(c.type == NODE_READY and c.status == CONDITION_TRUE for c in node.conditions)


def gate_matches(labels: dict[str, str], gate: ReadinessGate) -> bool:
    """Check that every label in the gate is present on the node with the same value."""
    return all(labels.get(key) == value for key, value in gate.match_labels.items())


def passes_readiness_gates(node: Node, gates: Sequence[ReadinessGate]) -> bool:
    """Return True if the node satisfies every readiness gate.

    An empty gate list always passes.
    """
    if not gates:
        return True
    return all(gate_matches(node.labels, gate) for gate in gates)
