"""Local inventory descriptor: which anchor object an apply run uses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from clusterapply.domain.errors import InvalidInventoryError
from clusterapply.domain.model import GroupKind, StoredObject

if TYPE_CHECKING:
    from collections.abc import Mapping

    from clusterapply.domain.model import ObjectReference

DEFAULT_INVENTORY_LABEL: Final[str] = "cli-utils.sigs.k8s.io/inventory-id"
CONFIG_MAP: Final[GroupKind] = GroupKind(group="", kind="ConfigMap")


@dataclass(frozen=True, slots=True, kw_only=True)
class InventoryInfo:
    """Identity of the anchor object plus the inventory id it is labelled with.

    The namespace, name and group/kind come from the caller's local manifest;
    the cluster copy is found by label, not by name.
    """

    namespace: str
    name: str
    inventory_id: str
    group_kind: GroupKind = field(default=CONFIG_MAP)
    inventory_label: str = DEFAULT_INVENTORY_LABEL

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise InvalidInventoryError("Inventory object requires a name")
        if not self.inventory_id.strip():
            raise InvalidInventoryError(
                f"Inventory object {self.namespace}/{self.name} has no inventory id"
            )

    @classmethod
    def from_object(
        cls, obj: StoredObject, *, inventory_label: str = DEFAULT_INVENTORY_LABEL
    ) -> InventoryInfo:
        """Build a descriptor from a local manifest carrying the inventory label."""

        inventory_id = obj.labels.get(inventory_label)
        if inventory_id is None:
            raise InvalidInventoryError(
                f"Inventory object {obj.namespace}/{obj.name} is missing label {inventory_label}"
            )
        return cls(
            namespace=obj.namespace,
            name=obj.name,
            inventory_id=inventory_id,
            group_kind=obj.group_kind,
            inventory_label=inventory_label,
        )

    @property
    def reference(self) -> ObjectReference:
        return self.to_anchor().reference

    def label_selector(self) -> dict[str, str]:
        return {self.inventory_label: self.inventory_id}

    def to_anchor(self, data: Mapping[str, str] | None = None) -> StoredObject:
        return StoredObject(
            group_kind=self.group_kind,
            namespace=self.namespace,
            name=self.name,
            labels=self.label_selector(),
            data=data or {},
        )
