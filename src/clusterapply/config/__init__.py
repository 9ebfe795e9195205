"""Application configuration helpers."""

from __future__ import annotations

from .cluster import ClusterConfig, get_cluster_config
from .env import env_flag, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .inventory import InventoryConfig, get_inventory_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ClusterConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "InventoryConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "env_flag",
    "get_cluster_config",
    "get_database_config",
    "get_inventory_config",
    "get_storage_config",
    "require_env_vars",
]
