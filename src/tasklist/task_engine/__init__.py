"""Task model and the store adapters backing the task list.

The core never builds a :class:`Task` itself; it goes through a
:class:`TaskRepository`, which assigns ids and owns persistence.
"""

from .interfaces import TaskRepository
from .model import Task
from .store import FileTaskStore, MemoryTaskStore, build_store

__all__ = ["FileTaskStore", "MemoryTaskStore", "Task", "TaskRepository", "build_store"]
