"""Rollout policy configuration, defaults, and environment variable overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from asg_rollout.models import ReadinessGate, RolloutPolicy, UpdateStrategy
from asg_rollout.validation import parse_max_unavailable, validate_strategy_type


def _max_unavailable_from_env() -> int | str:
    raw = os.environ.get("ROLLOUT_DEFAULT_MAX_UNAVAILABLE", "1")
    return int(raw) if raw.strip().isdigit() else raw.strip()


@dataclass(frozen=True)
class RolloutDefaults:
    """Strategy defaults applied to policies that omit a field."""

    max_unavailable: int | str = field(default_factory=_max_unavailable_from_env)
    strategy_type: str = field(default_factory=lambda: os.environ.get("ROLLOUT_DEFAULT_STRATEGY", "randomUpdate"))
    drain_timeout: int = field(default_factory=lambda: int(os.environ.get("ROLLOUT_DEFAULT_DRAIN_TIMEOUT", "-1")))


def get_defaults() -> RolloutDefaults:
    """Return strategy defaults with environment variable overrides applied."""
    return RolloutDefaults()


def _build_policy(asg_name: str, entry: dict[str, Any], defaults: RolloutDefaults) -> RolloutPolicy:
    strategy_raw = entry.get("strategy") or {}
    if not isinstance(strategy_raw, dict):
        msg = f"Policy '{asg_name}' has a non-mapping 'strategy' section."
        raise ValueError(msg)

    gates_raw = entry.get("readinessGates") or []
    if not isinstance(gates_raw, list):
        msg = f"Policy '{asg_name}' has a non-list 'readinessGates' section."
        raise ValueError(msg)

    strategy_type = str(strategy_raw.get("type", defaults.strategy_type))
    validate_strategy_type(strategy_type)

    gates: list[ReadinessGate] = []
    for gate in gates_raw:
        labels = gate.get("matchLabels") if isinstance(gate, dict) else None
        if not isinstance(labels, dict):
            msg = f"Policy '{asg_name}' has a readiness gate without a 'matchLabels' mapping."
            raise ValueError(msg)
        gates.append(ReadinessGate(match_labels={str(k): str(v) for k, v in labels.items()}))

    try:
        return RolloutPolicy(
            asg_name=asg_name,
            strategy=UpdateStrategy(
                type=strategy_type,
                max_unavailable=strategy_raw.get("maxUnavailable", defaults.max_unavailable),
                drain_timeout=strategy_raw.get("drainTimeout", defaults.drain_timeout),
            ),
            readiness_gates=gates,
        )
    except ValidationError as e:
        msg = f"Policy '{asg_name}' is invalid: {e}"
        raise ValueError(msg) from e


def load_policies(path: Path, defaults: RolloutDefaults | None = None) -> dict[str, RolloutPolicy]:
    """Parse a YAML policy file into a mapping of ASG name to RolloutPolicy.

    Args:
        path: Path to the YAML policy file.
        defaults: Strategy defaults; read from the environment when omitted.

    Returns:
        A dict mapping ASG names to their policies.

    Raises:
        FileNotFoundError: If the policy file does not exist.
        ValueError: If the file is malformed or a policy fails validation.
    """
    if not path.exists():
        msg = (
            f"Rollout policy file not found: {path}. "
            "Create one or set ROLLOUT_POLICIES to point to your policy file."
        )
        raise FileNotFoundError(msg)

    raw = yaml.safe_load(path.read_text())

    if not isinstance(raw, dict) or "policies" not in raw:
        msg = f"Policy file {path} must contain a top-level 'policies' key."
        raise ValueError(msg)

    policies_raw: Any = raw["policies"]
    if not isinstance(policies_raw, dict) or len(policies_raw) == 0:
        msg = f"Policy file {path} has an empty or invalid 'policies' section."
        raise ValueError(msg)

    defaults = defaults or get_defaults()
    policies: dict[str, RolloutPolicy] = {}
    for asg_name, entry in policies_raw.items():
        if not isinstance(entry, dict):
            msg = f"Policy '{asg_name}' must be a mapping, got {type(entry).__name__}."
            raise ValueError(msg)
        policies[str(asg_name)] = _build_policy(str(asg_name), entry, defaults)

    return policies


POLICY_MAP: dict[str, RolloutPolicy] = {}


def load_policy_map() -> dict[str, RolloutPolicy]:
    """Load policies from ``ROLLOUT_POLICIES`` (default ``rollout-policies.yaml``) into POLICY_MAP."""
    path = Path(os.environ.get("ROLLOUT_POLICIES", "rollout-policies.yaml"))
    loaded = load_policies(path)
    POLICY_MAP.clear()
    POLICY_MAP.update(loaded)
    return POLICY_MAP


def resolve_policy(asg_name: str) -> RolloutPolicy:
    """Look up the policy configured for an ASG.

    Raises:
        ValueError: If no policy is configured for ``asg_name``.
    """
    if asg_name not in POLICY_MAP:
        valid = ", ".join(sorted(POLICY_MAP.keys()))
        msg = f"No rollout policy for ASG '{asg_name}'. Configured ASGs: {valid}"
        raise ValueError(msg)
    return POLICY_MAP[asg_name]


def validate_policies() -> None:
    """Check loaded policies for settings that would stall a rollout.

    Raises RuntimeError listing every problem found.
    """
    errors: list[str] = []
    for asg_name, policy in POLICY_MAP.items():
        amount, is_percent = parse_max_unavailable(policy.strategy.max_unavailable)
        if amount == 0 and not is_percent:
            errors.append(f"{asg_name}: maxUnavailable is 0, no instance could ever be rotated")
        for index, gate in enumerate(policy.readiness_gates):
            if any(not key for key in gate.match_labels):
                errors.append(f"{asg_name}: readiness gate {index} has an empty label key")

    if errors:
        detail = "; ".join(errors)
        msg = f"Rollout policy errors: {detail}. Fix before starting a rollout."
        raise RuntimeError(msg)
