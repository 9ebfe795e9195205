"""Identity of managed cluster resources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

FIELD_SEPARATOR: Final[str] = "_"
# RBAC object names may contain colons; the stored key cannot.
COLON_TRANSCODED: Final[str] = "__"


@dataclass(frozen=True, order=True, slots=True)
class GroupKind:
    """API group plus kind. The core group is the empty string."""

    group: str
    kind: str

    def __str__(self) -> str:
        if not self.group:
            return self.kind
        return f"{self.kind}.{self.group}"


@dataclass(frozen=True, order=True, slots=True)
class ObjectReference:
    """Value identifying one resource: ``(group_kind, namespace, name)``.

    Two references denote the same resource iff all three fields match. The
    ordering (group, kind, namespace, name) is used wherever a deterministic
    tie-break is needed.
    """

    group_kind: GroupKind
    namespace: str
    name: str

    def __post_init__(self) -> None:
        if not self.group_kind.kind.strip():
            raise ValueError("Object reference requires a kind")
        if not self.name.strip():
            raise ValueError("Object reference requires a name")

    @classmethod
    def of(cls, group: str, kind: str, namespace: str, name: str) -> ObjectReference:
        return cls(group_kind=GroupKind(group=group, kind=kind), namespace=namespace, name=name)

    @property
    def group(self) -> str:
        return self.group_kind.group

    @property
    def kind(self) -> str:
        return self.group_kind.kind

    def __str__(self) -> str:
        name = self.name.replace(":", COLON_TRANSCODED)
        return FIELD_SEPARATOR.join((self.namespace, name, self.group, self.kind))

    @classmethod
    def parse(cls, text: str) -> ObjectReference:
        """Parse a ``<namespace>_<name>_<group>_<kind>`` key.

        Namespace and kind are the first and last fields; the group is the one
        before the kind. Whatever remains is the name, which may carry a
        transcoded colon but no further separators.
        """

        namespace, sep, rest = text.partition(FIELD_SEPARATOR)
        if not sep:
            raise ValueError(f"Unable to parse object reference: {text!r}")
        rest, sep, kind = rest.rpartition(FIELD_SEPARATOR)
        if not sep:
            raise ValueError(f"Unable to parse object reference: {text!r}")
        encoded_name, sep, group = rest.rpartition(FIELD_SEPARATOR)
        if not sep:
            raise ValueError(f"Unable to parse object reference: {text!r}")
        name = encoded_name.replace(COLON_TRANSCODED, ":")
        if FIELD_SEPARATOR in name:
            raise ValueError(f"Too many fields in object reference: {text!r}")
        return cls.of(group, kind, namespace, name)
