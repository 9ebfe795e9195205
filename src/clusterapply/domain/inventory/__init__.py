"""Inventory reconciliation: which objects a previous apply left in the cluster."""

from __future__ import annotations

from .client import ClusterInventoryClient, MergeResult
from .codec import InventoryRecordCodec, decode_inventory, encode_inventory
from .info import CONFIG_MAP, DEFAULT_INVENTORY_LABEL, InventoryInfo

__all__ = [
    "CONFIG_MAP",
    "DEFAULT_INVENTORY_LABEL",
    "ClusterInventoryClient",
    "InventoryInfo",
    "InventoryRecordCodec",
    "MergeResult",
    "decode_inventory",
    "encode_inventory",
]
