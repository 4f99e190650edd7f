"""Client-side view-model of the task list."""

from .clients import HttpTaskClient, LocalTaskClient, TaskClient
from .controller import ListController, ListView
from .render import render_list
from .rows import AddForm, RowMachine, RowPhase, RowViewState

__all__ = [
    "AddForm",
    "HttpTaskClient",
    "ListController",
    "ListView",
    "LocalTaskClient",
    "RowMachine",
    "RowPhase",
    "RowViewState",
    "TaskClient",
    "render_list",
]
