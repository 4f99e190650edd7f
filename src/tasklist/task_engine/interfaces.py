from __future__ import annotations

from abc import ABC, abstractmethod

from .model import Task


class TaskRepository(ABC):
    """Create/read/update/delete access to the persisted task list.

    Every mutation addresses a task by its integer id and raises
    :class:`~tasklist.errors.NotFoundError` when no such task exists.
    """

    @abstractmethod
    def list_tasks(self) -> list[Task]:
        raise NotImplementedError

    @abstractmethod
    def create_task(self, name: str) -> Task:
        raise NotImplementedError

    @abstractmethod
    def update_task_name(self, task_id: int, name: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_task_done(self, task_id: int, done: bool) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete_task(self, task_id: int) -> None:
        raise NotImplementedError
