"""Task execution contract and the inventory deletion task."""

from __future__ import annotations

from .context import TaskContext, TaskContextClosedError, run_in_background
from .contracts import Task, TaskResult
from .delete_inventory import DeleteInventoryTask

__all__ = [
    "DeleteInventoryTask",
    "Task",
    "TaskContext",
    "TaskContextClosedError",
    "TaskResult",
    "run_in_background",
]
