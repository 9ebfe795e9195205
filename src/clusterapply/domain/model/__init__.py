"""Public domain model surface."""

from __future__ import annotations

from clusterapply.domain.model.enums import ActionKind, ObjectStatus
from clusterapply.domain.model.inventory_set import (
    InventorySet,
    difference,
    set_equals,
    union,
)
from clusterapply.domain.model.objects import StoredObject
from clusterapply.domain.model.references import GroupKind, ObjectReference

__all__ = [
    "ActionKind",
    "GroupKind",
    "InventorySet",
    "ObjectReference",
    "ObjectStatus",
    "StoredObject",
    "difference",
    "set_equals",
    "union",
]
