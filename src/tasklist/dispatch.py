"""Route a submitted action to exactly one store operation.

The dispatcher is the single mutation entry point.  It reads the ``action``
discriminator, validates the fields that action needs, and then performs one
store write.  It keeps no state between calls and catches nothing: validation,
unknown-action and not-found errors reach the caller unchanged.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from loguru import logger

from .constants import ACTION_ADD, ACTION_DELETE, ACTION_DONE, ACTION_UNDONE, ACTION_UPDATE
from .errors import UnknownActionError
from .task_engine.interfaces import TaskRepository
from .validation import validate_id, validate_name


def _add(store: TaskRepository, action: str, fields: Mapping[str, Any]) -> None:
    store.create_task(validate_name(fields))


def _update(store: TaskRepository, action: str, fields: Mapping[str, Any]) -> None:
    name = validate_name(fields)
    task_id = validate_id(fields)
    store.update_task_name(task_id, name)


def _set_done(store: TaskRepository, action: str, fields: Mapping[str, Any]) -> None:
    store.set_task_done(validate_id(fields), action == ACTION_DONE)


def _delete(store: TaskRepository, action: str, fields: Mapping[str, Any]) -> None:
    store.delete_task(validate_id(fields))


_HANDLERS: dict[str, Callable[[TaskRepository, str, Mapping[str, Any]], None]] = {
    ACTION_ADD: _add,
    ACTION_UPDATE: _update,
    ACTION_DONE: _set_done,
    ACTION_UNDONE: _set_done,
    ACTION_DELETE: _delete,
}

ACTIONS = frozenset(_HANDLERS)


def dispatch_action(store: TaskRepository, fields: Mapping[str, Any]) -> None:
    """Apply the mutation described by *fields* to *store*.

    Args:
        store: The task store adapter.
        fields: A form-like mapping holding ``action`` plus ``id`` and/or ``name``.

    Raises:
        UnknownActionError: ``action`` is missing or not one of :data:`ACTIONS`.
        ValidationError: a required field is missing or malformed; the store is not touched.
        NotFoundError: raised by the store when the addressed task does not exist.
    """
    action = fields.get("action")
    handler = _HANDLERS.get(action) if isinstance(action, str) else None
    if handler is None:
        raise UnknownActionError("unknown action")
    logger.debug("Dispatching action {} (id={})", action, fields.get("id"))
    handler(store, action, fields)
