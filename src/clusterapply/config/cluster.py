"""Cluster API connection settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final

from .env import env_flag, require_env_vars

DEFAULT_NAMESPACE: Final[str] = "default"


@dataclass(frozen=True, slots=True)
class ClusterConfig:
    """Where the cluster API lives and how to authenticate against it."""

    server: str
    token: str | None = None
    verify_tls: bool = True
    default_namespace: str = DEFAULT_NAMESPACE

    def auth_headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}


def get_cluster_config() -> ClusterConfig:
    values = require_env_vars(("CLUSTERAPPLY_SERVER",))
    token = os.getenv("CLUSTERAPPLY_TOKEN") or None
    namespace = os.getenv("CLUSTERAPPLY_NAMESPACE") or DEFAULT_NAMESPACE
    return ClusterConfig(
        server=values["CLUSTERAPPLY_SERVER"].rstrip("/"),
        token=token,
        verify_tls=not env_flag("CLUSTERAPPLY_INSECURE"),
        default_namespace=namespace,
    )
