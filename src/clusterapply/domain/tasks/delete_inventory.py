"""Task that removes the inventory anchor object."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from clusterapply.domain.model import ActionKind, InventorySet

from .context import run_in_background

if TYPE_CHECKING:
    from clusterapply.domain.inventory.info import InventoryInfo
    from clusterapply.domain.ports.inventory import InventoryClient

    from .context import TaskContext

log = getLogger(__name__)


@dataclass(slots=True)
class DeleteInventoryTask:
    """Delete the anchor object from the cluster.

    Schedule it after every other delete/prune task has finished: the anchor is
    the only record of what was applied, so it goes last.
    """

    name: str
    inventory_client: InventoryClient
    inventory_info: InventoryInfo

    @property
    def action(self) -> ActionKind:
        return ActionKind.INVENTORY

    def identifiers(self) -> InventorySet:
        return InventorySet.empty()

    def start(self, context: TaskContext) -> None:
        info = self.inventory_info

        def delete() -> None:
            log.debug("delete inventory object (%s/%s)", info.namespace, info.name)
            self.inventory_client.delete_inventory_object(info)

        run_in_background(context, self, delete)

    def clear_timeout(self) -> None:
        """No timeout is ever armed for this task."""
