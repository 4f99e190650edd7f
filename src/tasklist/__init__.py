"""Provide the public `tasklist` package exports."""

from __future__ import annotations

from .dispatch import ACTIONS, dispatch_action
from .errors import NotFoundError, TaskListError, UnknownActionError, ValidationError
from .task_engine import FileTaskStore, MemoryTaskStore, Task, TaskRepository
from .validation import validate_id, validate_name

__all__ = [
    "ACTIONS",
    "FileTaskStore",
    "MemoryTaskStore",
    "NotFoundError",
    "Task",
    "TaskListError",
    "TaskRepository",
    "UnknownActionError",
    "ValidationError",
    "dispatch_action",
    "validate_id",
    "validate_name",
]
