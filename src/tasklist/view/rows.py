"""Per-row interaction state for the task list.

Each displayed task has a :class:`RowMachine` keyed by the task id.  The
machine only knows whether a mutation submitted from its row is in flight;
whether the row is being edited is decided by the list controller's single
editing id, so two rows can never both be editing.

:class:`RowViewState` is the immutable snapshot a renderer paints.  It is
rebuilt from scratch on every render pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..task_engine.model import Task


class RowPhase(str, Enum):
    IDLE = "idle"
    PENDING = "pending"


@dataclass
class RowMachine:
    """In-flight tracking for one row.

    ``IDLE`` → ``PENDING`` when the row submits a mutation, and back to
    ``IDLE`` when that submission resolves, whatever the outcome.
    """

    task_id: int
    phase: RowPhase = RowPhase.IDLE
    in_flight: Optional[str] = None

    @property
    def pending(self) -> bool:
        return self.phase == RowPhase.PENDING

    def can_submit(self) -> bool:
        return self.phase == RowPhase.IDLE

    def can_start_editing(self) -> bool:
        return self.phase == RowPhase.IDLE

    def begin(self, action: str) -> None:
        """Enter ``PENDING`` for *action*."""
        if self.pending:
            raise ValueError(
                f"Row {self.task_id} already has a pending {self.in_flight!r} submission"
            )
        self.phase = RowPhase.PENDING
        self.in_flight = action

    def resolve(self) -> None:
        self.phase = RowPhase.IDLE
        self.in_flight = None


@dataclass
class AddForm:
    """State of the add-task form: its draft text and its own pending flag."""

    draft: str = ""
    phase: RowPhase = RowPhase.IDLE

    @property
    def pending(self) -> bool:
        return self.phase == RowPhase.PENDING

    def begin(self, name: str) -> None:
        if self.pending:
            raise ValueError("An add submission is already pending")
        self.draft = name
        self.phase = RowPhase.PENDING

    def resolve(self) -> None:
        # The form is reset once its submission settles, success or not.
        self.draft = ""
        self.phase = RowPhase.IDLE


@dataclass(frozen=True)
class RowViewState:
    """What a renderer needs to paint one row."""

    task_id: int
    name: str
    done: bool
    editing: bool
    pending: bool
    draft_name: str

    @property
    def checkbox_enabled(self) -> bool:
        return not self.pending

    @property
    def name_clickable(self) -> bool:
        return not self.pending and not self.editing

    @property
    def update_enabled(self) -> bool:
        return self.editing and not self.pending

    @property
    def cancel_enabled(self) -> bool:
        return self.editing and not self.pending

    @property
    def delete_enabled(self) -> bool:
        return not self.pending

    @classmethod
    def build(cls, task: Task, machine: RowMachine, editing_id: Optional[int]) -> "RowViewState":
        return cls(
            task_id=task.id,
            name=task.name,
            done=task.done,
            editing=editing_id == task.id,
            pending=machine.pending,
            draft_name=task.name,
        )
