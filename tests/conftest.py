"""Shared test fixtures."""

from __future__ import annotations

import pytest

from asg_rollout.cluster_state import ClusterState


@pytest.fixture
def cluster_state() -> ClusterState:
    """A fresh registry per test so claims never leak between tests."""
    return ClusterState()
