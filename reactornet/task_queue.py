"""The common interface of queues that run tasks on worker threads."""

from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import Future
from typing import Any, Callable

Task = Callable[[], Any]


class TaskQueue(ABC):
    """Runs tasks somewhere else; serial and concurrent queues implement it."""

    @abstractmethod
    def run_task_in_queue(self, task: Task) -> None:
        """Schedule ``task`` to run in the queue."""

    def name(self) -> str:
        return ""

    def sync_task_in_queue(self, task: Task) -> Any:
        """Run ``task`` in the queue and wait for it; return its result or raise its error."""
        future: Future = Future()

        def wrapper() -> None:
            try:
                result = task()
            except BaseException as exc:
                future.set_exception(exc)
            else:
                future.set_result(result)

        self.run_task_in_queue(wrapper)
        return future.result()