"""Immutable set algebra over object references."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from .references import ObjectReference


class InventorySet:
    """A set of :class:`ObjectReference` with no duplicates.

    Every operation returns a new set and leaves its operands untouched.
    Iteration is in sorted order so logs and encoded payloads are stable.
    """

    __slots__ = ("_refs",)

    def __init__(self, refs: Iterable[ObjectReference] = ()) -> None:
        self._refs: frozenset[ObjectReference] = frozenset(refs)

    @classmethod
    def of(cls, *refs: ObjectReference) -> InventorySet:
        return cls(refs)

    @classmethod
    def empty(cls) -> InventorySet:
        return cls()

    def union(self, other: Iterable[ObjectReference]) -> InventorySet:
        return InventorySet(self._refs.union(other))

    def difference(self, other: Iterable[ObjectReference]) -> InventorySet:
        """Elements of this set that are not in ``other``."""
        return InventorySet(self._refs.difference(other))

    def equals(self, other: Iterable[ObjectReference]) -> bool:
        return self._refs == frozenset(other)

    def sorted(self) -> list[ObjectReference]:
        return sorted(self._refs)

    def __or__(self, other: InventorySet) -> InventorySet:
        return self.union(other)

    def __sub__(self, other: InventorySet) -> InventorySet:
        return self.difference(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InventorySet):
            return NotImplemented
        return self._refs == other._refs

    def __hash__(self) -> int:
        return hash(self._refs)

    def __contains__(self, ref: object) -> bool:
        return ref in self._refs

    def __iter__(self) -> Iterator[ObjectReference]:
        return iter(self.sorted())

    def __len__(self) -> int:
        return len(self._refs)

    def __bool__(self) -> bool:
        return bool(self._refs)

    def __repr__(self) -> str:
        members = ", ".join(str(ref) for ref in self.sorted())
        return f"InventorySet({{{members}}})"


def union(a: Iterable[ObjectReference], b: Iterable[ObjectReference]) -> InventorySet:
    return InventorySet(a).union(b)


def difference(a: Iterable[ObjectReference], b: Iterable[ObjectReference]) -> InventorySet:
    return InventorySet(a).difference(b)


def set_equals(a: Iterable[ObjectReference], b: Iterable[ObjectReference]) -> bool:
    return InventorySet(a).equals(b)
