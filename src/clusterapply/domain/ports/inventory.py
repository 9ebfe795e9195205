"""Port for reading and writing the tracked inventory."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from clusterapply.domain.inventory.info import InventoryInfo
    from clusterapply.domain.model import InventorySet, ObjectReference


@runtime_checkable
class InventoryClient(Protocol):
    """Contract of the inventory client consumed by tasks and callers."""

    @property
    def dry_run(self) -> bool: ...

    def get_cluster_objects(self, info: InventoryInfo | None) -> InventorySet: ...

    def merge(
        self, info: InventoryInfo | None, objects: Iterable[ObjectReference]
    ) -> InventorySet: ...

    def replace(self, info: InventoryInfo | None, objects: Iterable[ObjectReference]) -> None: ...

    def delete_inventory_object(self, info: InventoryInfo | None) -> None: ...

    def set_dry_run(self, dry_run: bool) -> None: ...  # noqa: FBT001
