"""Error taxonomy shared by the dispatcher, the stores and the transports."""

from __future__ import annotations


class TaskListError(Exception):
    """Base class for every error raised by the task list core."""

    kind = "task_list_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TaskListError):
    """A submitted ``id`` or ``name`` field is missing or malformed."""

    kind = "validation_error"


class UnknownActionError(TaskListError):
    """The ``action`` discriminator is missing or not recognized."""

    kind = "unknown_action"


class NotFoundError(TaskListError):
    """The store holds no task with the requested id."""

    kind = "not_found"


class StoreError(TaskListError):
    """The backing file could not be read or parsed."""

    kind = "store_error"


class TransportError(TaskListError):
    """The task server could not be reached or answered unexpectedly."""

    kind = "transport_error"


ERROR_KINDS: dict[str, type[TaskListError]] = {
    cls.kind: cls for cls in (ValidationError, UnknownActionError, NotFoundError, StoreError)
}
