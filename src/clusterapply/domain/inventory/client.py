"""Reconciliation of the tracked inventory against the cluster anchor object.

The anchor object is an ordinary store object carrying the inventory label; its
payload is the only durable record of what a previous apply created. Every
public call resolves the anchor once, heals duplicate anchors as a side effect,
and then reads or rewrites the payload.

Dry-run changes nothing on the read side: every value returned is the same as
in a live run, only the mutating store calls are skipped.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from clusterapply.domain.errors import InvalidInventoryError
from clusterapply.domain.model import InventorySet, StoredObject

from .codec import InventoryRecordCodec

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from clusterapply.domain.model import ObjectReference
    from clusterapply.domain.ports.store import RemoteStore

    from .info import InventoryInfo

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MergeResult:
    """Outcome of one merge.

    ``inventory`` is the set the anchor holds after the merge (or would hold,
    in dry-run). ``written`` tells whether a store write was due.
    """

    prune_candidates: InventorySet
    inventory: InventorySet
    written: bool


def _require_info(info: InventoryInfo | None, *, action: str = "retrieve") -> InventoryInfo:
    if info is None:
        raise InvalidInventoryError(f"attempting to {action} a nil inventory object")
    return info


class ClusterInventoryClient:
    """Inventory client backed by a :class:`RemoteStore`.

    Not safe for concurrent writes against the same inventory; callers run at
    most one update per inventory at a time.
    """

    def __init__(
        self,
        store: RemoteStore,
        *,
        dry_run: bool = False,
        codec: InventoryRecordCodec | None = None,
    ) -> None:
        self._store = store
        self._dry_run = dry_run
        self._codec = codec or InventoryRecordCodec()

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    def set_dry_run(self, dry_run: bool) -> None:  # noqa: FBT001
        """Toggle dry-run. Call before the client is shared between threads."""
        self._dry_run = dry_run

    def get_cluster_objects(self, info: InventoryInfo | None) -> InventorySet:
        """Return the set stored in the cluster anchor, or empty on first apply."""

        cluster_inv = self._get_cluster_inventory(_require_info(info))
        if cluster_inv is None:
            return InventorySet.empty()
        return self._codec.decode(cluster_inv.data)

    def merge(
        self, info: InventoryInfo | None, objects: Iterable[ObjectReference]
    ) -> InventorySet:
        """Store the union of ``objects`` and the cluster set; return what to prune."""

        return self.merge_inventory(info, objects).prune_candidates

    def merge_inventory(
        self, info: InventoryInfo | None, objects: Iterable[ObjectReference]
    ) -> MergeResult:
        info = _require_info(info)
        desired = InventorySet(objects)
        cluster_inv = self._get_cluster_inventory(info)
        if cluster_inv is None:
            log.debug("creating initial inventory object with %d objects", len(desired))
            self._create_inventory_object(info.to_anchor(self._codec.encode(desired)))
            return MergeResult(
                prune_candidates=InventorySet.empty(), inventory=desired, written=True
            )

        cluster_objs = self._codec.decode(cluster_inv.data)
        if desired.equals(cluster_objs):
            log.debug("applied objects same as cluster inventory: do nothing")
            return MergeResult(
                prune_candidates=InventorySet.empty(), inventory=cluster_objs, written=False
            )

        # Prune candidates stay tracked until a later call confirms their deletion.
        prune_ids = cluster_objs.difference(desired)
        union_objs = cluster_objs.union(desired)
        log.debug("num objects to prune: %d", len(prune_ids))
        log.debug("num merged objects to store in inventory: %d", len(union_objs))
        self._apply_inventory_object(cluster_inv.with_data(self._codec.encode(union_objs)))
        return MergeResult(prune_candidates=prune_ids, inventory=union_objs, written=True)

    def replace(self, info: InventoryInfo | None, objects: Iterable[ObjectReference]) -> None:
        """Overwrite the stored set with exactly ``objects``."""

        info = _require_info(info)
        desired = InventorySet(objects)
        cluster_inv = self._get_cluster_inventory(info)
        cluster_objs = (
            InventorySet.empty() if cluster_inv is None else self._codec.decode(cluster_inv.data)
        )
        if desired.equals(cluster_objs):
            log.debug("applied objects same as cluster inventory: do nothing")
            return

        payload = self._codec.encode(desired)
        if cluster_inv is None:
            log.debug("no cluster inventory to replace; creating %s/%s", info.namespace, info.name)
            self._create_inventory_object(info.to_anchor(payload))
            return
        log.debug(
            "replace cluster inventory %s/%s with %d objects",
            cluster_inv.namespace,
            cluster_inv.name,
            len(desired),
        )
        self._apply_inventory_object(cluster_inv.with_data(payload))

    def delete_inventory_object(self, info: InventoryInfo | None) -> None:
        """Delete the anchor object named by ``info``."""

        info = _require_info(info, action="delete")
        self._delete_inventory_object(info.to_anchor())

    def _get_cluster_inventory(self, info: InventoryInfo) -> StoredObject | None:
        """Find the cluster anchor for ``info`` by its inventory label.

        Several anchors with the same label are merged into one first; this
        should be very rare.
        """

        selector = info.label_selector()
        log.debug(
            "inventory object fetch: %s/%s/%s=%s",
            info.group_kind,
            info.namespace,
            info.inventory_label,
            info.inventory_id,
        )
        candidates = self._store.find(info.group_kind, info.namespace, selector)
        if not candidates:
            return None
        if len(candidates) == 1:
            return candidates[0]
        return self._merge_cluster_inventory(candidates)

    def _merge_cluster_inventory(self, candidates: Sequence[StoredObject]) -> StoredObject:
        """Fold duplicate anchors into the first one and delete the rest."""

        log.warning("merging %d inventory objects", len(candidates))
        retained, *duplicates = sorted(candidates, key=StoredObject.sort_key)
        retained_objs = self._codec.decode(retained.data)
        for duplicate in duplicates:
            retained_objs = retained_objs.union(self._codec.decode(duplicate.data))

        # The union has to be stored before any duplicate is deleted.
        merged = self._apply_inventory_object(
            retained.with_data(self._codec.encode(retained_objs))
        )
        for duplicate in duplicates:
            log.warning(
                "deleting duplicate inventory object %s/%s", duplicate.namespace, duplicate.name
            )
            self._delete_inventory_object(duplicate)
        return merged

    def _apply_inventory_object(self, obj: StoredObject) -> StoredObject:
        if self._dry_run:
            log.info("dry-run apply inventory object: not applied")
            return obj
        log.debug("replacing inventory object: %s/%s", obj.namespace, obj.name)
        return self._store.replace(obj)

    def _create_inventory_object(self, obj: StoredObject) -> StoredObject:
        if self._dry_run:
            log.info("dry-run create inventory object: not created")
            return obj
        log.debug("creating inventory object: %s/%s", obj.namespace, obj.name)
        return self._store.create(obj)

    def _delete_inventory_object(self, obj: StoredObject) -> None:
        if self._dry_run:
            log.info("dry-run delete inventory object: not deleted")
            return
        log.debug("deleting inventory object: %s/%s", obj.namespace, obj.name)
        self._store.delete(obj)
