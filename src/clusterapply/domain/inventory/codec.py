"""Encoding of an inventory set into an anchor object's payload."""

from __future__ import annotations

from typing import TYPE_CHECKING

from clusterapply.domain.errors import InventoryDecodeError, InventoryEncodeError
from clusterapply.domain.model import InventorySet, ObjectReference

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


class InventoryRecordCodec:
    """Stores each member as one payload key with an empty value.

    The key is ``<namespace>_<name>_<group>_<kind>``; anchors written by other
    tools use the same layout, so decoding is strict: a key that does not
    parse fails the whole decode. Encoding refuses members whose key would not
    read back as the same reference (e.g. a name containing ``_``), so a
    payload that cannot be decoded is never written.
    """

    def encode(self, objects: Iterable[ObjectReference]) -> dict[str, str]:
        return {self._encode_key(ref): "" for ref in InventorySet(objects)}

    def decode(self, payload: Mapping[str, str] | None) -> InventorySet:
        refs: list[ObjectReference] = []
        for key in payload or {}:
            try:
                refs.append(ObjectReference.parse(key))
            except ValueError as exc:
                raise InventoryDecodeError(
                    f"Malformed inventory entry {key!r}: {exc}", key=key
                ) from exc
        return InventorySet(refs)

    def _encode_key(self, ref: ObjectReference) -> str:
        key = str(ref)
        try:
            parsed = ObjectReference.parse(key)
        except ValueError as exc:
            raise InventoryEncodeError(
                f"Cannot store {ref.kind} {ref.namespace}/{ref.name} in inventory: {exc}",
                key=key,
            ) from exc
        if parsed != ref:
            raise InventoryEncodeError(
                f"Cannot store {ref.kind} {ref.namespace}/{ref.name} in inventory: "
                f"key {key!r} reads back as {parsed.namespace}/{parsed.name}",
                key=key,
            )
        return key


_DEFAULT_CODEC = InventoryRecordCodec()


def encode_inventory(objects: Iterable[ObjectReference]) -> dict[str, str]:
    return _DEFAULT_CODEC.encode(objects)


def decode_inventory(payload: Mapping[str, str] | None) -> InventorySet:
    return _DEFAULT_CODEC.decode(payload)
