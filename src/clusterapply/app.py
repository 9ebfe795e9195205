"""Application composition entry points."""

from __future__ import annotations

import queue
from logging import getLogger
from typing import TYPE_CHECKING

from clusterapply.adapters.kube import KubeObjectStore
from clusterapply.adapters.sqlalchemy import create_object_store
from clusterapply.config import get_cluster_config, get_database_config, get_inventory_config
from clusterapply.domain.inventory import ClusterInventoryClient
from clusterapply.domain.tasks import DeleteInventoryTask, TaskContext, TaskResult

if TYPE_CHECKING:
    from clusterapply.config import ClusterConfig, DatabaseConfig, InventoryConfig
    from clusterapply.domain.inventory import InventoryInfo
    from clusterapply.domain.ports import InventoryClient


log = getLogger(__name__)


def build_kube_inventory_client(
    *,
    cluster: ClusterConfig | None = None,
    inventory: InventoryConfig | None = None,
) -> ClusterInventoryClient:
    """Inventory client talking to the cluster REST API."""

    cluster_config = cluster or get_cluster_config()
    inventory_config = inventory or get_inventory_config()
    log.info(
        "Using cluster inventory at %s (dry_run=%s)", cluster_config.server, inventory_config.dry_run
    )
    return ClusterInventoryClient(
        KubeObjectStore(cluster=cluster_config), dry_run=inventory_config.dry_run
    )


def build_sql_inventory_client(
    *,
    database: DatabaseConfig | None = None,
    inventory: InventoryConfig | None = None,
) -> ClusterInventoryClient:
    """Inventory client over the local SQL object store."""

    database_config = database or get_database_config()
    inventory_config = inventory or get_inventory_config()
    log.info("Using SQL inventory store (dry_run=%s)", inventory_config.dry_run)
    return ClusterInventoryClient(
        create_object_store(database_config.uri), dry_run=inventory_config.dry_run
    )


def delete_inventory(
    client: InventoryClient,
    info: InventoryInfo,
    *,
    timeout: float | None = None,
) -> TaskResult:
    """Run a single inventory deletion task and return its result.

    With a ``timeout``, waiting for the result and for the worker to finish are
    each bounded by it; an expired wait is reported as a ``TimeoutError``
    result while the remote call may still complete in the background.
    """

    task = DeleteInventoryTask(
        name=f"delete-inventory-{info.inventory_id}",
        inventory_client=client,
        inventory_info=info,
    )
    context = TaskContext()
    try:
        task.start(context)
        result = context.next_result(timeout=timeout)
    except queue.Empty:
        result = TaskResult(
            task_name=task.name,
            error=TimeoutError(f"{task.name} did not finish within {timeout}s"),
        )
    finally:
        context.close(timeout=timeout)
    if result.ok:
        log.info("Deleted inventory object %s/%s", info.namespace, info.name)
    else:
        log.warning(f"Deleting inventory object {info.namespace}/{info.name} failed: {result.error}")
    return result
