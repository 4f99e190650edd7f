"""Tests for driving the list controller over HTTP."""

from __future__ import annotations

import httpx
import pytest

from tasklist.errors import NotFoundError, TransportError, UnknownActionError, ValidationError
from tasklist.server.api import create_app
from tasklist.task_engine.model import Task
from tasklist.task_engine.store import MemoryTaskStore
from tasklist.view.clients import HttpTaskClient
from tasklist.view.controller import ListController


@pytest.fixture
def store() -> MemoryTaskStore:
    return MemoryTaskStore([Task(1, "Buy milk")])


@pytest.fixture
async def client(store: MemoryTaskStore):
    app = create_app(store=store, enable_cors=False)
    async with HttpTaskClient("http://test", transport=httpx.ASGITransport(app=app)) as c:
        yield c


@pytest.mark.anyio
class TestHttpTaskClient:
    async def test_fetch(self, client: HttpTaskClient) -> None:
        assert await client.fetch_tasks() == [Task(1, "Buy milk", False)]

    async def test_submit(self, client: HttpTaskClient, store: MemoryTaskStore) -> None:
        await client.submit({"action": "done", "id": "1"})
        assert store.list_tasks()[0].done is True

    async def test_errors_mapped(self, client: HttpTaskClient) -> None:
        with pytest.raises(ValidationError, match="name must be at least 1 characters"):
            await client.submit({"action": "add", "name": ""})
        with pytest.raises(UnknownActionError):
            await client.submit({"action": "bogus"})
        with pytest.raises(NotFoundError):
            await client.submit({"action": "delete", "id": "99"})

    async def test_unexpected_status(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="bad gateway")

        async with HttpTaskClient("http://test", transport=httpx.MockTransport(handler)) as c:
            with pytest.raises(TransportError, match="502"):
                await c.fetch_tasks()

    async def test_malformed_task_list(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"items": []})

        async with HttpTaskClient("http://test", transport=httpx.MockTransport(handler)) as c:
            with pytest.raises(TransportError, match="malformed task list"):
                await c.fetch_tasks()

    async def test_non_json_task_list(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>proxy page</html>")

        async with HttpTaskClient("http://test", transport=httpx.MockTransport(handler)) as c:
            with pytest.raises(TransportError):
                await c.fetch_tasks()

    async def test_connection_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with HttpTaskClient("http://test", transport=httpx.MockTransport(handler)) as c:
            with pytest.raises(TransportError, match="refused"):
                await c.submit({"action": "add", "name": "x"})


@pytest.mark.anyio
async def test_controller_over_http(client: HttpTaskClient) -> None:
    controller = ListController(client)
    await controller.refresh()

    assert await controller.add("Walk dog") is True
    assert await controller.toggle_done(1) is True
    controller.start_editing(2)
    assert await controller.submit_update(2, "Walk cat") is True
    assert await controller.delete(1) is True

    rows = controller.view().rows
    assert [(r.task_id, r.name, r.done, r.editing) for r in rows] == [(2, "Walk cat", False, False)]
