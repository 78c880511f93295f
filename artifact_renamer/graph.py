"""A directed graph of one-shot build tasks.

Tasks declare the names of the tasks they depend on. Running a task first
runs its dependencies, depth first and in declaration order, then the task
itself. Execution is strictly sequential: the ordering between an assembly
step and the step consuming its output comes from an explicit edge in the
graph.

Every task moves from `Pending` to either `Completed` or `Failed` exactly
once. There are no retries within a graph; a failed task fails everything
that depends on it.
"""

from collections.abc import Awaitable, Callable
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import StrEnum
import logging
from time import perf_counter
from typing import Any, Generator

from .exceptions import (
    DependencyFailedError,
    InputException,
    TaskFailedError,
    TaskNotFoundError,
)

__all__ = [
    "TaskStatus",
    "BuildTask",
    "TaskGraph",
]

_LOGGER = logging.getLogger(__name__)


class TaskStatus(StrEnum):
    """Processing status for a task."""

    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"


@dataclass
class BuildTask:
    """A named unit of work in the task graph."""

    name: str
    """Unique name of the task e.g. `renameReleaseApk`."""

    action: Callable[[], Awaitable[Any]]
    """Coroutine function invoked once when the task runs."""

    depends_on: list[str] = field(default_factory=list)
    """Names of tasks that must complete before this one runs."""

    description: str = ""

    status: TaskStatus = TaskStatus.PENDING
    error: str | None = None

    def __str__(self) -> str:
        """Return a string representation of the task status."""
        if self.error:
            return f"{self.name} ({self.status}: {self.error})"
        return f"{self.name} ({self.status})"


class TaskGraph:
    """Registry of build tasks that runs them in dependency order."""

    def __init__(self) -> None:
        """Initialize TaskGraph."""
        self._tasks: dict[str, BuildTask] = {}
        self._stack: list[str] = []

    def register(self, task: BuildTask) -> BuildTask:
        """Add a task to the graph."""
        if task.name in self._tasks:
            raise InputException(f"Task {task.name} is already registered")
        self._tasks[task.name] = task
        _LOGGER.debug("Registered task %s depends on %s", task.name, task.depends_on)
        return task

    def get(self, name: str) -> BuildTask:
        """Return the task with the specified name."""
        if (task := self._tasks.get(name)) is None:
            raise TaskNotFoundError(f"Task {name} is not registered")
        return task

    def tasks(self) -> list[BuildTask]:
        """Return all tasks in registration order."""
        return list(self._tasks.values())

    @contextmanager
    def _trace(self, name: str) -> Generator[None, None, None]:
        if name in self._stack:
            cycle = " > ".join(self._stack + [name])
            raise InputException(f"Task dependency cycle detected: {cycle}")
        self._stack.append(name)
        label = " > ".join(self._stack)
        t1 = perf_counter()
        _LOGGER.debug("[Task] > %s", label)
        try:
            yield
        finally:
            self._stack.pop()
            _LOGGER.debug("[Task] < %s (%0.2fs)", label, perf_counter() - t1)

    async def run(self, name: str) -> None:
        """Run the task and any of its dependencies that have not run yet."""
        task = self.get(name)
        if task.status == TaskStatus.COMPLETED:
            return
        if task.status == TaskStatus.FAILED:
            raise TaskFailedError(task.name, task.error)

        with self._trace(name):
            for dep_name in task.depends_on:
                dep = self.get(dep_name)
                if dep.status == TaskStatus.FAILED:
                    raise DependencyFailedError(task.name, dep.name, dep.error)
                await self.run(dep_name)

            try:
                await task.action()
            except Exception as err:
                task.status = TaskStatus.FAILED
                task.error = str(err)
                _LOGGER.debug("Task %s failed: %s", task.name, err)
                raise
            task.status = TaskStatus.COMPLETED
