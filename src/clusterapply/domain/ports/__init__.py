"""Domain port definitions for adapters."""

from __future__ import annotations

from .inventory import InventoryClient
from .store import RemoteStore

__all__ = ["InventoryClient", "RemoteStore"]
