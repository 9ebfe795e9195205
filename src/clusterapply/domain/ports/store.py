"""Port for the cluster object store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from clusterapply.domain.model import GroupKind, StoredObject


@runtime_checkable
class RemoteStore(Protocol):
    """CRUD plus exact-match label query over cluster objects.

    Implementations raise :class:`clusterapply.domain.errors.StoreError`
    subclasses (or their transport's own errors); callers propagate them as-is.
    """

    def find(
        self,
        group_kind: GroupKind,
        namespace: str,
        label_selector: Mapping[str, str],
    ) -> list[StoredObject]: ...

    def create(self, obj: StoredObject) -> StoredObject: ...

    def replace(self, obj: StoredObject) -> StoredObject: ...

    def delete(self, obj: StoredObject) -> None: ...
