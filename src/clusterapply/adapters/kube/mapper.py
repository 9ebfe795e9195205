"""Mapping of group/kinds onto REST resource paths."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from clusterapply.domain.errors import UnknownResourceError
from clusterapply.domain.model import GroupKind

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class ResourceMapping:
    group: str
    version: str
    resource: str
    namespaced: bool = True

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    def collection_path(self, namespace: str) -> str:
        base = f"/apis/{self.group}/{self.version}" if self.group else f"/api/{self.version}"
        if self.namespaced and namespace:
            return f"{base}/namespaces/{namespace}/{self.resource}"
        return f"{base}/{self.resource}"

    def object_path(self, namespace: str, name: str) -> str:
        return f"{self.collection_path(namespace)}/{name}"


DEFAULT_MAPPINGS: Final[dict[GroupKind, ResourceMapping]] = {
    GroupKind(group="", kind="ConfigMap"): ResourceMapping(
        group="", version="v1", resource="configmaps"
    ),
}


class ResourceMapper:
    """Resolve the REST mapping for a group/kind."""

    def __init__(self, mappings: Mapping[GroupKind, ResourceMapping] | None = None) -> None:
        self._mappings: dict[GroupKind, ResourceMapping] = dict(DEFAULT_MAPPINGS)
        if mappings:
            self._mappings.update(mappings)

    def register(self, group_kind: GroupKind, mapping: ResourceMapping) -> None:
        self._mappings[group_kind] = mapping

    def mapping_for(self, group_kind: GroupKind) -> ResourceMapping:
        try:
            return self._mappings[group_kind]
        except KeyError:
            raise UnknownResourceError(f"No resource mapping for {group_kind}") from None
