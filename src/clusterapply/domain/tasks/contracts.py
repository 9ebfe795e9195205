"""Task contract shared by every mutating step of an apply run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from clusterapply.domain.model import ActionKind, InventorySet

    from .context import TaskContext


@dataclass(frozen=True, slots=True)
class TaskResult:
    """The single result a task delivers per ``start``."""

    task_name: str
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@runtime_checkable
class Task(Protocol):
    """Asynchronous unit of work driven by an external scheduler.

    ``start`` returns immediately and must eventually deliver exactly one
    :class:`TaskResult` to the context, failures included. It never raises.
    ``clear_timeout`` cancels a scheduler-armed timer only; it does not abort
    work already in flight.
    """

    @property
    def name(self) -> str: ...

    @property
    def action(self) -> ActionKind: ...

    def identifiers(self) -> InventorySet: ...

    def start(self, context: TaskContext) -> None: ...

    def clear_timeout(self) -> None: ...
