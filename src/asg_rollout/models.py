"""Pydantic v2 models for instance and node snapshots, strategies, and batches."""

from __future__ import annotations

from enum import StrEnum

import structlog
from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

from asg_rollout.validation import validate_asg_name, validate_max_unavailable

log = structlog.get_logger()


class LifecycleState(StrEnum):
    """Lifecycle states an autoscaling group reports for its instances."""

    IN_SERVICE = "InService"
    PENDING = "Pending"
    PENDING_WAIT = "Pending:Wait"
    PENDING_PROCEED = "Pending:Proceed"
    QUARANTINED = "Quarantined"
    STANDBY = "Standby"
    ENTERING_STANDBY = "EnteringStandby"
    TERMINATING = "Terminating"
    TERMINATING_WAIT = "Terminating:Wait"
    TERMINATING_PROCEED = "Terminating:Proceed"
    TERMINATED = "Terminated"
    DETACHING = "Detaching"
    DETACHED = "Detached"


_KNOWN_LIFECYCLE_STATES = {state.value for state in LifecycleState}


class StrategyType(StrEnum):
    """How the next batch is drawn from an ASG."""

    RANDOM = "randomUpdate"
    UNIFORM_ACROSS_AZ = "uniformAcrossAzUpdate"


# --- Instance snapshot ---


class Instance(BaseModel):
    """A single ASG member as reported by the cloud provider."""

    model_config = ConfigDict(frozen=True)

    instance_id: str
    availability_zone: str = ""
    # Kept as a plain string: states outside LifecycleState are accepted and
    # simply never count as in service.
    lifecycle_state: str = LifecycleState.IN_SERVICE.value

    @field_validator("lifecycle_state")
    @classmethod
    def record_unknown_state(cls, value: str) -> str:
        if value not in _KNOWN_LIFECYCLE_STATES:
            log.warning("unrecognized_lifecycle_state", lifecycle_state=value)
        return value


# --- Node snapshot ---


class NodeCondition(BaseModel):
    """A Kubernetes node condition (type/status pair)."""

    type: str
    status: str


class Node(BaseModel):
    """The parts of a Kubernetes node that readiness checks look at."""

    name: str = ""
    conditions: list[NodeCondition] = Field(default_factory=list)
    labels: dict[str, str] = Field(default_factory=dict)


class ReadinessGate(BaseModel):
    """Label constraints a node must carry before a rollout moves past it."""

    match_labels: dict[str, str] = Field(default_factory=dict)


# --- Strategy and policy ---


class UpdateStrategy(BaseModel):
    """Rollout strategy for one autoscaling group."""

    type: StrategyType = StrategyType.RANDOM
    # Absolute count (75 or "75") or percentage ("25%")
    max_unavailable: StrictInt | str = 1
    # Seconds; -1 leaves the drain unbounded
    drain_timeout: int = Field(default=-1, ge=-1)

    @field_validator("max_unavailable")
    @classmethod
    def check_max_unavailable(cls, value: int | str) -> int | str:
        validate_max_unavailable(value)
        return value


class RolloutPolicy(BaseModel):
    """Strategy and readiness gates configured for a named ASG."""

    asg_name: str
    strategy: UpdateStrategy = Field(default_factory=UpdateStrategy)
    readiness_gates: list[ReadinessGate] = Field(default_factory=list)

    @field_validator("asg_name")
    @classmethod
    def check_asg_name(cls, value: str) -> str:
        validate_asg_name(value)
        return value


# --- Selection result ---


class Batch(BaseModel):
    """Instances claimed for the next rotation step."""

    asg_name: str
    # Set only when the batch was drawn from a single availability zone
    zone: str | None = None
    budget: int
    instances: list[Instance] = Field(default_factory=list)

    @property
    def instance_ids(self) -> list[str]:
        return [i.instance_id for i in self.instances]
