"""Inventory client configuration."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_flag


@dataclass(frozen=True, slots=True)
class InventoryConfig:
    """Settings fixed for the lifetime of one inventory client.

    ``dry_run`` must be decided before any concurrent use of the client.
    """

    dry_run: bool = False


def get_inventory_config() -> InventoryConfig:
    return InventoryConfig(dry_run=env_flag("CLUSTERAPPLY_DRY_RUN"))
