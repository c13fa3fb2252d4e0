"""Per-ASG registry of instances still available for selection."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Sequence
from contextlib import ExitStack

import structlog

from asg_rollout.models import Instance

log = structlog.get_logger()


class ClusterState:
    """Tracks, per ASG, which instances have not yet been claimed by a batch.

    Claiming removes an instance ID from its ASG's availability set, so two
    callers can never be handed the same instance until the ASG is deleted or
    re-initialized. An instance ID belongs to at most one ASG at a time:
    initializing an ASG with an ID another ASG tracks moves the ID over.

    Claims on one ASG never wait on another. Initialize and delete change
    membership and are serialized with each other.
    """

    def __init__(self) -> None:
        # Insertion-ordered dicts used as ordered sets of instance IDs
        self._available: dict[str, dict[str, None]] = {}
        # Membership bookkeeping: instance ID -> owning ASG, ASG -> seeded IDs.
        # Only changed while holding _membership_lock.
        self._owner: dict[str, str] = {}
        self._members: dict[str, set[str]] = {}
        self._membership_lock = threading.Lock()
        # Note 1: One lock per ASG name. Locks are never dropped, even on delete,
        # so a name always maps to the same lock for the lifetime of the registry.
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, asg_name: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(asg_name)
            if lock is None:
                lock = threading.Lock()
                self._locks[asg_name] = lock
            return lock

    def initialize_asg(self, asg_name: str, instances: Iterable[Instance]) -> None:
        """Start (or restart) tracking an ASG with the given instances all available.

        IDs currently tracked under a different ASG are removed from that ASG.
        """
        ids = dict.fromkeys(i.instance_id for i in instances)
        with self._membership_lock:
            previous_owners = sorted({self._owner[i] for i in ids if i in self._owner} - {asg_name})
            with ExitStack() as stack:
                # Note 2: Per-name locks are taken in sorted order while holding
                # _membership_lock; claims only ever hold a single per-name lock.
                for name in sorted({asg_name, *previous_owners}):
                    stack.enter_context(self._lock_for(name))

                for name in previous_owners:
                    available = self._available.get(name, {})
                    members = self._members.get(name, set())
                    for instance_id in ids:
                        if self._owner.get(instance_id) == name:
                            available.pop(instance_id, None)
                            members.discard(instance_id)

                for instance_id in self._members.get(asg_name, set()) - set(ids):
                    self._owner.pop(instance_id, None)
                for instance_id in ids:
                    self._owner[instance_id] = asg_name
                self._members[asg_name] = set(ids)

                replaced = asg_name in self._available
                self._available[asg_name] = ids

        if previous_owners:
            log.warning("instances_moved_between_asgs", asg=asg_name, from_asgs=previous_owners)
        log.info("asg_initialized", asg=asg_name, instances=len(ids), replaced=replaced)

    def claim_next(self, asg_name: str, instances: Sequence[Instance], limit: int) -> list[Instance]:
        """Claim up to ``limit`` available instances from the snapshot.

        Candidates are taken in snapshot order. An unknown ASG or an exhausted
        availability set yields an empty list.
        """
        return self._claim(asg_name, instances, limit, zone=None)

    def claim_next_in_zone(
        self,
        asg_name: str,
        zone: str,
        instances: Sequence[Instance],
        limit: int,
    ) -> list[Instance]:
        """Like claim_next, restricted to instances in one availability zone."""
        return self._claim(asg_name, instances, limit, zone=zone)

    def _claim(
        self,
        asg_name: str,
        instances: Sequence[Instance],
        limit: int,
        zone: str | None,
    ) -> list[Instance]:
        if limit <= 0:
            return []

        claimed: list[Instance] = []
        with self._lock_for(asg_name):
            available = self._available.get(asg_name)
            if not available:
                return []
            for instance in instances:
                if len(claimed) >= limit:
                    break
                if zone is not None and instance.availability_zone != zone:
                    continue
                if instance.instance_id not in available:
                    continue
                # Note 3: Removal is the claim. Once deleted here, no later caller
                # can see this ID until the ASG is re-initialized.
                del available[instance.instance_id]
                claimed.append(instance)

        if claimed:
            log.debug(
                "instances_claimed",
                asg=asg_name,
                zone=zone,
                claimed=[i.instance_id for i in claimed],
            )
        return claimed

    def delete_all_instances_in_asg(self, asg_name: str) -> bool:
        """Stop tracking an ASG. Always succeeds, even if it was never tracked."""
        with self._membership_lock, self._lock_for(asg_name):
            removed = self._available.pop(asg_name, None)
            for instance_id in self._members.pop(asg_name, set()):
                self._owner.pop(instance_id, None)
        log.info("asg_deleted", asg=asg_name, existed=removed is not None)
        return True

    def available_ids(self, asg_name: str) -> list[str]:
        """Return the IDs still available in an ASG, in tracking order."""
        with self._lock_for(asg_name):
            return list(self._available.get(asg_name, {}))

    def tracked_asgs(self) -> list[str]:
        with self._registry_lock:
            names = list(self._locks)
        return sorted(name for name in names if name in self._available)

    def owner_of(self, instance_id: str) -> str | None:
        """Return the ASG currently tracking an instance ID, if any."""
        with self._membership_lock:
            return self._owner.get(instance_id)
