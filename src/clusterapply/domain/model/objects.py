"""Store-level view of cluster objects."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING

from .references import GroupKind, ObjectReference

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime


def _freeze(values: Mapping[str, str] | None) -> Mapping[str, str]:
    return MappingProxyType(dict(values or {}))


@dataclass(frozen=True, slots=True, kw_only=True)
class StoredObject:
    """An object as the remote store returns it.

    ``data`` is the opaque payload; for an anchor object it holds the encoded
    inventory. ``annotations`` are carried through unchanged so a replace does
    not strip them. ``uid`` and ``resource_version`` are assigned by the store.
    """

    group_kind: GroupKind
    namespace: str
    name: str
    labels: Mapping[str, str] = field(default_factory=dict[str, str])
    annotations: Mapping[str, str] = field(default_factory=dict[str, str])
    data: Mapping[str, str] = field(default_factory=dict[str, str])
    uid: str | None = None
    resource_version: str | None = None
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "labels", _freeze(self.labels))
        object.__setattr__(self, "annotations", _freeze(self.annotations))
        object.__setattr__(self, "data", _freeze(self.data))

    @property
    def reference(self) -> ObjectReference:
        return ObjectReference(group_kind=self.group_kind, namespace=self.namespace, name=self.name)

    def with_data(self, data: Mapping[str, str]) -> StoredObject:
        return replace(self, data=data)

    def sort_key(self) -> tuple[str, str]:
        return (self.namespace, self.name)
