"""Task stores with thread-safe locking.

:class:`FileTaskStore` keeps the list in a single YAML file (``tasks.yaml``
inside the project's ``.tasklist/`` directory).  All reads and writes go
through :meth:`transaction`, which holds a thread lock and an exclusive file
lock for its whole duration.  :class:`MemoryTaskStore` offers the same
semantics without touching disk.

Ids come from a monotonically increasing ``next_id`` counter persisted next to
the tasks, so an id is never handed out twice, even after deletion.
"""

from __future__ import annotations

import threading
from abc import abstractmethod
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import Any, ContextManager, Iterator, Optional

from loguru import logger

from ..constants import LOCK_FILENAME
from ..errors import NotFoundError, StoreError
from ..io_utils import FileLock, _atomic_write_yaml, _load_data_with_error
from .interfaces import TaskRepository
from .model import Task

STORE_VERSION = 1


class _TaskTx:
    """In-memory transaction over the task list.

    Mutations mark the transaction dirty; the owning store flushes it when the
    ``transaction`` context-manager exits without an exception.
    """

    def __init__(self, tasks: list[Task], next_id: int) -> None:
        self.tasks = tasks
        self.next_id = next_id
        self.dirty = False

    def _require(self, task_id: int) -> Task:
        for task in self.tasks:
            if task.id == task_id:
                return task
        raise NotFoundError(f"task {task_id} not found")

    def add(self, name: str) -> Task:
        task = Task(id=self.next_id, name=name, done=False)
        self.next_id += 1
        self.tasks.append(task)
        self.dirty = True
        return task

    def rename(self, task_id: int, name: str) -> None:
        self._require(task_id).name = name
        self.dirty = True

    def set_done(self, task_id: int, done: bool) -> None:
        self._require(task_id).done = done
        self.dirty = True

    def remove(self, task_id: int) -> None:
        task = self._require(task_id)
        self.tasks.remove(task)
        self.dirty = True


class _TransactionalStore(TaskRepository):
    """Implements the repository operations on top of :meth:`transaction`."""

    @abstractmethod
    def transaction(self) -> ContextManager[_TaskTx]:
        raise NotImplementedError

    def list_tasks(self) -> list[Task]:
        with self.transaction() as tx:
            return list(tx.tasks)

    def create_task(self, name: str) -> Task:
        with self.transaction() as tx:
            task = tx.add(name)
        logger.info("Created task {}: {}", task.id, name)
        return task

    def update_task_name(self, task_id: int, name: str) -> None:
        with self.transaction() as tx:
            tx.rename(task_id, name)

    def set_task_done(self, task_id: int, done: bool) -> None:
        with self.transaction() as tx:
            tx.set_done(task_id, done)

    def delete_task(self, task_id: int) -> None:
        with self.transaction() as tx:
            tx.remove(task_id)
        logger.info("Deleted task {}", task_id)


class FileTaskStore(_TransactionalStore):
    """Thread-safe, YAML-file-backed task store.

    Parameters
    ----------
    path:
        Location of the YAML file.  The lock file lives beside it.
    """

    def __init__(self, path: Path, lock_path: Optional[Path] = None) -> None:
        self._path = path
        self._lock = FileLock(lock_path or path.with_name(LOCK_FILENAME))
        self._thread_lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> tuple[list[Task], int]:
        raw, err = _load_data_with_error(self._path, {})
        if err:
            raise StoreError(f"cannot read task store: {err}")
        items = raw.get("tasks") or []
        if not isinstance(items, list):
            raise StoreError(f"cannot read task store: {self._path.name}: 'tasks' must be a list")
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                raise StoreError(
                    f"cannot read task store: {self._path.name}: entry {index} is "
                    f"{type(item).__name__}, expected mapping"
                )
        try:
            tasks = [Task.from_dict(item) for item in items]
        except (KeyError, TypeError, ValueError) as exc:
            raise StoreError(f"cannot read task store: {self._path.name}: {exc}") from exc
        highest = max((t.id for t in tasks), default=0)
        next_id = raw.get("next_id")
        if not isinstance(next_id, int) or next_id <= highest:
            next_id = highest + 1
        return tasks, next_id

    def _save(self, tasks: list[Task], next_id: int) -> None:
        payload: dict[str, Any] = {
            "version": STORE_VERSION,
            "next_id": next_id,
            "tasks": [t.to_dict() for t in tasks],
        }
        try:
            _atomic_write_yaml(self._path, payload)
        except OSError as exc:
            raise StoreError(f"cannot write task store: {self._path.name}: {exc}") from exc

    def _acquire(self) -> ExitStack:
        stack = ExitStack()
        try:
            stack.enter_context(self._lock)
        except OSError as exc:
            raise StoreError(f"cannot lock task store: {self._lock.lock_path}: {exc}") from exc
        return stack

    @contextmanager
    def transaction(self) -> Iterator[_TaskTx]:
        """Acquire both locks, load tasks, yield a transaction, and save on exit.

        Usage::

            with store.transaction() as tx:
                tx.set_done(3, True)
                # automatically saved on exit
        """
        with self._thread_lock:
            with self._acquire():
                tasks, next_id = self._load()
                tx = _TaskTx(tasks, next_id)
                yield tx
                if tx.dirty:
                    self._save(tx.tasks, tx.next_id)


class MemoryTaskStore(_TransactionalStore):
    """Process-local task store; contents are lost when the process exits."""

    def __init__(self, tasks: Optional[list[Task]] = None) -> None:
        self._tasks: list[Task] = [Task(t.id, t.name, t.done) for t in tasks or []]
        self._next_id = max((t.id for t in self._tasks), default=0) + 1
        self._thread_lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator[_TaskTx]:
        with self._thread_lock:
            tx = _TaskTx([Task(t.id, t.name, t.done) for t in self._tasks], self._next_id)
            yield tx
            if tx.dirty:
                self._tasks = [Task(t.id, t.name, t.done) for t in tx.tasks]
                self._next_id = tx.next_id


def build_store(store_config: dict[str, Any]) -> TaskRepository:
    """Create the store described by a ``get_store_config`` mapping."""
    if store_config.get("backend") == "memory":
        return MemoryTaskStore()
    return FileTaskStore(Path(store_config["path"]))
