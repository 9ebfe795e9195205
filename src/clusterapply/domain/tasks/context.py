"""Coordination surface shared by all tasks of one apply run."""

from __future__ import annotations

import queue
import threading
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from .contracts import TaskResult

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from types import TracebackType

    from clusterapply.domain.model import ObjectReference, ObjectStatus

    from .contracts import Task

log = getLogger(__name__)


class TaskContextClosedError(RuntimeError):
    """Raised when work is spawned on a context that has been torn down."""


class TaskContext:
    """Result queue plus per-object status table for one run.

    The result queue has exactly one consumer; results from different tasks
    arrive in completion order. A result that lands after the scheduler already
    gave up on the task (timeout) is still queued; deciding which result is
    authoritative is the scheduler's job.
    """

    def __init__(self) -> None:
        self._results: queue.Queue[TaskResult] = queue.Queue()
        self._consumer: int | None = None
        self._consumer_lock = threading.Lock()
        self._statuses: dict[ObjectReference, ObjectStatus] = {}
        self._status_lock = threading.Lock()
        self._workers: list[threading.Thread] = []
        self._workers_lock = threading.Lock()
        self._closed = False

    def __enter__(self) -> TaskContext:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        self.close()
        return False

    @property
    def results_channel(self) -> queue.Queue[TaskResult]:
        return self._results

    @property
    def closed(self) -> bool:
        return self._closed

    def send_result(self, result: TaskResult) -> None:
        self._results.put(result)

    def next_result(self, timeout: float | None = None) -> TaskResult:
        """Block for the next result; raises ``queue.Empty`` on timeout."""

        self._claim_consumer()
        return self._results.get(timeout=timeout)

    def results(self, count: int, *, timeout: float | None = None) -> Iterator[TaskResult]:
        for _ in range(count):
            yield self.next_result(timeout=timeout)

    def set_status(self, ref: ObjectReference, status: ObjectStatus) -> None:
        with self._status_lock:
            self._statuses[ref] = status

    def status_of(self, ref: ObjectReference) -> ObjectStatus | None:
        with self._status_lock:
            return self._statuses.get(ref)

    def statuses(self) -> dict[ObjectReference, ObjectStatus]:
        with self._status_lock:
            return dict(self._statuses)

    def spawn(self, target: Callable[[], None], *, name: str) -> threading.Thread:
        """Run ``target`` on its own daemon thread."""

        with self._workers_lock:
            if self._closed:
                raise TaskContextClosedError(f"Cannot start {name}: task context is closed")
            worker = threading.Thread(target=target, name=name, daemon=True)
            self._workers.append(worker)
        worker.start()
        return worker

    def wait_for_workers(self, timeout: float | None = None) -> bool:
        """Join spawned workers; return whether all of them finished."""

        with self._workers_lock:
            workers = list(self._workers)
        for worker in workers:
            worker.join(timeout=timeout)
        return not any(worker.is_alive() for worker in workers)

    def close(self, timeout: float | None = None) -> None:
        with self._workers_lock:
            self._closed = True
        if not self.wait_for_workers(timeout=timeout):
            log.warning("task context closed with workers still running")

    def _claim_consumer(self) -> None:
        ident = threading.get_ident()
        with self._consumer_lock:
            if self._consumer is None:
                self._consumer = ident
            elif self._consumer != ident:
                raise RuntimeError("Task result queue already has a consumer")


def run_in_background(context: TaskContext, task: Task, work: Callable[[], None]) -> None:
    """Run ``work`` off-thread and deliver exactly one result for ``task``.

    Errors raised by ``work`` become the result's ``error``. If the context no
    longer accepts work, the failure is delivered the same way.
    """

    task_name = task.name

    def _run() -> None:
        error: BaseException | None = None
        try:
            work()
        except Exception as exc:  # noqa: BLE001
            log.debug("task %s failed: %s", task_name, exc)
            error = exc
        except BaseException as exc:
            error = exc
            raise
        finally:
            context.send_result(TaskResult(task_name=task_name, error=error))

    try:
        context.spawn(_run, name=f"task-{task_name}")
    except TaskContextClosedError as exc:
        context.send_result(TaskResult(task_name=task_name, error=exc))
