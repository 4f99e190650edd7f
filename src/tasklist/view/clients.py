"""Transports used by the list controller to read and mutate the task list."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Optional, Protocol

import httpx
from loguru import logger

from ..dispatch import dispatch_action
from ..errors import ERROR_KINDS, StoreError, TaskListError, TransportError
from ..task_engine.interfaces import TaskRepository
from ..task_engine.model import Task

TASKS_PATH = "/api/tasks"


class TaskClient(Protocol):
    async def fetch_tasks(self) -> list[Task]: ...

    async def submit(self, fields: Mapping[str, str]) -> None: ...


class LocalTaskClient:
    """Talks to a store in the same process.

    Store calls run in a worker thread so file locking never blocks the event
    loop.
    """

    def __init__(self, store: TaskRepository) -> None:
        self.store = store

    async def fetch_tasks(self) -> list[Task]:
        try:
            return await asyncio.to_thread(self.store.list_tasks)
        except OSError as exc:
            raise StoreError(f"cannot read task store: {exc}") from exc

    async def submit(self, fields: Mapping[str, str]) -> None:
        try:
            await asyncio.to_thread(dispatch_action, self.store, dict(fields))
        except OSError as exc:
            raise StoreError(f"cannot write task store: {exc}") from exc


class HttpTaskClient:
    """Talks to a running task server over HTTP.

    Error bodies of the form ``{"error": <kind>, "detail": <message>}`` are
    turned back into the matching :class:`TaskListError` subclass.
    """

    def __init__(
        self,
        base_url: str,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ) -> None:
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "HttpTaskClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, **kwargs) -> httpx.Response:
        try:
            resp = await self._http.request(method, TASKS_PATH, **kwargs)
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {TASKS_PATH} failed: {exc}") from exc
        if resp.is_success:
            return resp
        raise _error_from_response(resp)

    async def fetch_tasks(self) -> list[Task]:
        resp = await self._request("GET")
        try:
            return [Task.from_dict(item) for item in resp.json()["tasks"]]
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise TransportError(f"malformed task list from server: {exc!r}") from exc

    async def submit(self, fields: Mapping[str, str]) -> None:
        await self._request("POST", data=dict(fields))


def _error_from_response(resp: httpx.Response) -> TaskListError:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error_cls = ERROR_KINDS.get(str(body.get("error")))
        detail = body.get("detail")
        if error_cls is not None and isinstance(detail, str):
            return error_cls(detail)
    logger.debug("Unexpected response {}: {}", resp.status_code, resp.text[:200])
    return TransportError(f"server answered {resp.status_code}")
