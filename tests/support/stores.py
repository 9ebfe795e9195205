"""Reusable fakes and helpers for inventory tests."""

from __future__ import annotations

import threading
from collections import Counter
from dataclasses import replace
from typing import TYPE_CHECKING

from clusterapply.domain.errors import ObjectAlreadyExistsError, ObjectNotFoundError
from clusterapply.domain.inventory import InventoryInfo, decode_inventory, encode_inventory
from clusterapply.domain.model import GroupKind, InventorySet, ObjectReference, StoredObject

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

DEPLOYMENT = GroupKind(group="apps", kind="Deployment")
SERVICE = GroupKind(group="", kind="Service")

type Identity = tuple[GroupKind, str, str]


def deployment(name: str, namespace: str = "test") -> ObjectReference:
    return ObjectReference(group_kind=DEPLOYMENT, namespace=namespace, name=name)


def service(name: str, namespace: str = "test") -> ObjectReference:
    return ObjectReference(group_kind=SERVICE, namespace=namespace, name=name)


def make_info(
    inventory_id: str = "inv-1234",
    *,
    name: str = "inventory-obj",
    namespace: str = "test",
) -> InventoryInfo:
    return InventoryInfo(namespace=namespace, name=name, inventory_id=inventory_id)


def make_anchor(
    name: str,
    objects: Iterable[ObjectReference] = (),
    *,
    inventory_id: str = "inv-1234",
    namespace: str = "test",
) -> StoredObject:
    info = make_info(inventory_id, name=name, namespace=namespace)
    return info.to_anchor(encode_inventory(objects))


class InMemoryObjectStore:
    """Thread-safe in-memory :class:`RemoteStore` that counts every call.

    ``failures`` maps an operation name (``find``, ``create``, ``replace``,
    ``delete``) to the exception that operation should raise.
    """

    def __init__(self, objects: Iterable[StoredObject] = ()) -> None:
        self._lock = threading.Lock()
        self._objects: dict[Identity, StoredObject] = {}
        self._next_version = 1
        self.calls: Counter[str] = Counter()
        self.operations: list[tuple[str, str]] = []
        self.failures: dict[str, Exception] = {}
        for obj in objects:
            self._put(obj)

    @property
    def write_count(self) -> int:
        return self.calls["create"] + self.calls["replace"] + self.calls["delete"]

    def objects(self) -> list[StoredObject]:
        with self._lock:
            return sorted(self._objects.values(), key=StoredObject.sort_key)

    def get(self, namespace: str, name: str) -> StoredObject | None:
        with self._lock:
            for obj in self._objects.values():
                if obj.namespace == namespace and obj.name == name:
                    return obj
        return None

    def find(
        self,
        group_kind: GroupKind,
        namespace: str,
        label_selector: Mapping[str, str],
    ) -> list[StoredObject]:
        self._record("find", namespace)
        with self._lock:
            return [
                obj
                for obj in self._objects.values()
                if obj.group_kind == group_kind
                and obj.namespace == namespace
                and all(obj.labels.get(key) == value for key, value in label_selector.items())
            ]

    def create(self, obj: StoredObject) -> StoredObject:
        self._record("create", obj.name)
        with self._lock:
            if _identity(obj) in self._objects:
                raise ObjectAlreadyExistsError(f"{obj.name} already exists", status_code=409)
            return self._put(obj)

    def replace(self, obj: StoredObject) -> StoredObject:
        self._record("replace", obj.name)
        with self._lock:
            if _identity(obj) not in self._objects:
                raise ObjectNotFoundError(f"{obj.name} not found", status_code=404)
            return self._put(obj)

    def delete(self, obj: StoredObject) -> None:
        self._record("delete", obj.name)
        with self._lock:
            if self._objects.pop(_identity(obj), None) is None:
                raise ObjectNotFoundError(f"{obj.name} not found", status_code=404)

    def inventory_of(self, namespace: str, name: str) -> InventorySet | None:
        obj = self.get(namespace, name)
        return None if obj is None else decode_inventory(obj.data)

    def _record(self, operation: str, target: str) -> None:
        with self._lock:
            self.calls[operation] += 1
            self.operations.append((operation, target))
        failure = self.failures.get(operation)
        if failure is not None:
            raise failure

    def _put(self, obj: StoredObject) -> StoredObject:
        stored = replace(obj, resource_version=str(self._next_version))
        self._next_version += 1
        self._objects[_identity(stored)] = stored
        return stored


def _identity(obj: StoredObject) -> Identity:
    return (obj.group_kind, obj.namespace, obj.name)
