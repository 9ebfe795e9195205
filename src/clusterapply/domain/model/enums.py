"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ActionKind(StrEnum):
    """Classification observers use to correlate task results."""

    APPLY = "apply"
    PRUNE = "prune"
    DELETE = "delete"
    WAIT = "wait"
    INVENTORY = "inventory"


class ObjectStatus(StrEnum):
    """Latest known status of a member resource within one run."""

    PENDING = "pending"
    APPLIED = "applied"
    APPLY_FAILED = "apply_failed"
    PRUNED = "pruned"
    PRUNE_FAILED = "prune_failed"
    DELETED = "deleted"
    DELETE_FAILED = "delete_failed"
    SKIPPED = "skipped"
    RECONCILED = "reconciled"
