"""List view-model: fetched tasks, per-row machines and the editing id.

The controller pulls the whole list after every successful mutation and
rebuilds row state from it; it never patches the list locally.  Each
submission runs as its own ``asyncio`` task, so rows mutate independently.
Whichever refresh lands last decides what is displayed.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine, Mapping
from dataclasses import dataclass
from typing import Any, Optional

from loguru import logger

from ..constants import (
    ACTION_ADD,
    ACTION_DELETE,
    ACTION_DONE,
    ACTION_UNDONE,
    ACTION_UPDATE,
    EMPTY_LIST_PLACEHOLDER,
)
from ..errors import TaskListError
from ..task_engine.model import Task
from .clients import TaskClient
from .rows import AddForm, RowMachine, RowViewState


@dataclass(frozen=True)
class ListView:
    rows: list[RowViewState]
    add_pending: bool
    add_draft: str

    @property
    def empty(self) -> bool:
        return not self.rows

    @property
    def placeholder(self) -> Optional[str]:
        return EMPTY_LIST_PLACEHOLDER if self.empty else None

    @property
    def editing_rows(self) -> list[RowViewState]:
        return [row for row in self.rows if row.editing]


class ListController:
    """Owns the task list as last fetched and the single editing id.

    Control methods return ``None`` when the row's controls are disabled
    (for example while a submission from that row is pending); otherwise they
    return the ``asyncio.Task`` running the submission, whose result is
    ``True`` on success and ``False`` when the mutation was rejected.
    """

    def __init__(self, client: TaskClient) -> None:
        self._client = client
        self.tasks: list[Task] = []
        self.editing_id: Optional[int] = None
        self.add_form = AddForm()
        self._rows: dict[int, RowMachine] = {}
        self._in_flight: set[asyncio.Task[bool]] = set()

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    async def refresh(self) -> list[Task]:
        """Re-read the full list and reconcile row state against it."""
        tasks = await self._client.fetch_tasks()
        self._reconcile(tasks)
        return tasks

    def _reconcile(self, tasks: list[Task]) -> None:
        self.tasks = list(tasks)
        live = {task.id for task in tasks}
        for task_id in list(self._rows):
            if task_id not in live and not self._rows[task_id].pending:
                del self._rows[task_id]
        for task in tasks:
            self._rows.setdefault(task.id, RowMachine(task.id))

    def row(self, task_id: int) -> Optional[RowMachine]:
        return self._rows.get(task_id)

    def _task(self, task_id: int) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def view(self) -> ListView:
        rows = [
            RowViewState.build(task, self._rows[task.id], self.editing_id)
            for task in self.tasks
        ]
        return ListView(rows=rows, add_pending=self.add_form.pending, add_draft=self.add_form.draft)

    @property
    def busy(self) -> bool:
        return bool(self._in_flight)

    async def wait_idle(self) -> None:
        """Wait until every submission issued so far has settled."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def start_editing(self, task_id: int) -> bool:
        """Claim the editing id for *task_id*, closing any other row's edit."""
        machine = self._rows.get(task_id)
        if machine is None or self._task(task_id) is None:
            logger.debug("Ignoring edit of unknown task {}", task_id)
            return False
        if not machine.can_start_editing():
            logger.debug("Ignoring edit of task {}: submission pending", task_id)
            return False
        self.editing_id = task_id
        return True

    def cancel_editing(self, task_id: int) -> bool:
        if self.editing_id != task_id:
            return False
        machine = self._rows.get(task_id)
        if machine is not None and machine.pending:
            logger.debug("Ignoring cancel of task {}: submission pending", task_id)
            return False
        self.editing_id = None
        return True

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _idle_row(self, task_id: int, control: str) -> Optional[RowMachine]:
        machine = self._rows.get(task_id)
        if machine is None or self._task(task_id) is None:
            logger.debug("Ignoring {} of unknown task {}", control, task_id)
            return None
        if not machine.can_submit():
            logger.debug("Ignoring {} of task {}: {} pending", control, task_id, machine.in_flight)
            return None
        return machine

    def toggle_done(self, task_id: int) -> Optional[asyncio.Task[bool]]:
        machine = self._idle_row(task_id, "toggle")
        if machine is None:
            return None
        task = self._task(task_id)
        action = ACTION_UNDONE if task.done else ACTION_DONE
        return self._submit_row(machine, {"id": str(task_id), "action": action})

    def submit_update(self, task_id: int, name: str) -> Optional[asyncio.Task[bool]]:
        if self.editing_id != task_id:
            logger.debug("Ignoring update of task {}: not in edit mode", task_id)
            return None
        machine = self._idle_row(task_id, "update")
        if machine is None:
            return None
        return self._submit_row(machine, {"id": str(task_id), "action": ACTION_UPDATE, "name": name})

    def delete(self, task_id: int) -> Optional[asyncio.Task[bool]]:
        machine = self._idle_row(task_id, "delete")
        if machine is None:
            return None
        return self._submit_row(machine, {"id": str(task_id), "action": ACTION_DELETE})

    def add(self, name: str) -> Optional[asyncio.Task[bool]]:
        if self.add_form.pending:
            logger.debug("Ignoring add: previous add pending")
            return None
        self.add_form.begin(name)
        return self._spawn(self._run_add({"action": ACTION_ADD, "name": name}))

    def _submit_row(self, machine: RowMachine, fields: dict[str, str]) -> asyncio.Task[bool]:
        machine.begin(fields["action"])
        return self._spawn(self._run_row(machine, fields))

    def _spawn(self, coro: Coroutine[Any, Any, bool]) -> asyncio.Task[bool]:
        task = asyncio.get_running_loop().create_task(coro)
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    async def _send(self, fields: Mapping[str, str]) -> bool:
        try:
            await self._client.submit(fields)
        except TaskListError as exc:
            logger.warning(
                "Action {} (id={}) rejected: {}", fields.get("action"), fields.get("id"), exc.message
            )
            return False
        try:
            await self.refresh()
        except TaskListError as exc:
            # The write already landed; only the displayed list is stale.
            logger.warning(
                "Action {} (id={}) applied but refresh failed: {}",
                fields.get("action"),
                fields.get("id"),
                exc.message,
            )
        return True

    async def _run_row(self, machine: RowMachine, fields: dict[str, str]) -> bool:
        try:
            return await self._send(fields)
        finally:
            machine.resolve()
            if self.editing_id == machine.task_id:
                self.editing_id = None

    async def _run_add(self, fields: dict[str, str]) -> bool:
        try:
            return await self._send(fields)
        finally:
            self.add_form.resolve()
