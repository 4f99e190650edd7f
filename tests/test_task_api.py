"""Tests for the task list HTTP endpoints."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from httpx import ASGITransport, AsyncClient

from tasklist.server.api import create_app
from tasklist.task_engine.store import MemoryTaskStore


@pytest.fixture
def app(tmp_path: Path):
    """Create a test app with a temp project directory."""
    project_dir = tmp_path / "test_project"
    project_dir.mkdir()
    return create_app(project_dir=project_dir, enable_cors=False)


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def _add(client: AsyncClient, name: str) -> int:
    resp = await client.post("/api/tasks", data={"action": "add", "name": name})
    assert resp.status_code == 200
    listed = (await client.get("/api/tasks")).json()["tasks"]
    return listed[-1]["id"]


@pytest.mark.anyio
class TestLoader:
    async def test_root(self, client: AsyncClient) -> None:
        resp = await client.get("/")
        assert resp.status_code == 200
        assert resp.json()["status"] == "running"

    async def test_list_empty(self, client: AsyncClient) -> None:
        resp = await client.get("/api/tasks")
        assert resp.status_code == 200
        assert resp.json() == {"tasks": [], "total": 0}


@pytest.mark.anyio
class TestActions:
    async def test_add(self, client: AsyncClient) -> None:
        resp = await client.post("/api/tasks", data={"action": "add", "name": "Buy milk"})
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

        data = (await client.get("/api/tasks")).json()
        assert data["total"] == 1
        assert data["tasks"][0]["name"] == "Buy milk"
        assert data["tasks"][0]["done"] is False

    async def test_repeated_field_uses_first_value(self, client: AsyncClient) -> None:
        resp = await client.post("/api/tasks", data={"action": "add", "name": ["First", "Second"]})
        assert resp.status_code == 200
        tasks = (await client.get("/api/tasks")).json()["tasks"]
        assert [t["name"] for t in tasks] == ["First"]

    async def test_done_undone(self, client: AsyncClient) -> None:
        task_id = await _add(client, "Walk dog")

        await client.post("/api/tasks", data={"action": "done", "id": str(task_id)})
        assert (await client.get("/api/tasks")).json()["tasks"][0]["done"] is True

        await client.post("/api/tasks", data={"action": "undone", "id": str(task_id)})
        task = (await client.get("/api/tasks")).json()["tasks"][0]
        assert task == {"id": task_id, "name": "Walk dog", "done": False}

    async def test_update(self, client: AsyncClient) -> None:
        task_id = await _add(client, "Old")
        resp = await client.post("/api/tasks", data={"action": "update", "id": str(task_id), "name": "New"})
        assert resp.status_code == 200
        assert (await client.get("/api/tasks")).json()["tasks"][0]["name"] == "New"

    async def test_delete_then_update_not_found(self, client: AsyncClient) -> None:
        task_id = await _add(client, "Temp")
        resp = await client.post("/api/tasks", data={"action": "delete", "id": str(task_id)})
        assert resp.status_code == 200

        resp = await client.post("/api/tasks", data={"action": "update", "id": str(task_id), "name": "x"})
        assert resp.status_code == 404
        assert resp.json()["error"] == "not_found"

    async def test_validation_error(self, client: AsyncClient) -> None:
        resp = await client.post("/api/tasks", data={"action": "add", "name": ""})
        assert resp.status_code == 400
        assert resp.json() == {"error": "validation_error", "detail": "name must be at least 1 characters"}

    async def test_non_numeric_id(self, client: AsyncClient) -> None:
        resp = await client.post("/api/tasks", data={"action": "done", "id": "abc"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "id must be numeric string"

    async def test_unknown_action(self, client: AsyncClient) -> None:
        resp = await client.post("/api/tasks", data={"action": "bogus"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "unknown_action", "detail": "unknown action"}
        assert (await client.get("/api/tasks")).json()["total"] == 0

    async def test_json_body(self, client: AsyncClient) -> None:
        resp = await client.post("/api/tasks", json={"action": "add", "name": "From JSON"})
        assert resp.status_code == 200

        resp = await client.post("/api/tasks", json={"action": "done", "id": 1})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "id must be string"

    async def test_invalid_json_body(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/tasks", content=b"{not json", headers={"content-type": "application/json"}
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "unknown_action"


@pytest.mark.anyio
async def test_uses_configured_store_path(tmp_path: Path) -> None:
    project_dir = tmp_path / "proj"
    (project_dir / ".tasklist").mkdir(parents=True)
    (project_dir / ".tasklist" / "config.yaml").write_text(
        yaml.safe_dump({"store": {"path": "data/tasks.yaml"}}), encoding="utf-8"
    )
    app = create_app(project_dir=project_dir, enable_cors=False)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        await c.post("/api/tasks", data={"action": "add", "name": "Persisted"})

    assert (project_dir / "data" / "tasks.yaml").exists()


@pytest.mark.anyio
async def test_injected_store() -> None:
    store = MemoryTaskStore()
    app = create_app(store=store, enable_cors=False)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        await c.post("/api/tasks", data={"action": "add", "name": "In memory"})
    assert [t.name for t in store.list_tasks()] == ["In memory"]


@pytest.mark.anyio
async def test_corrupt_store_is_server_error(tmp_path: Path) -> None:
    project_dir = tmp_path / "proj"
    (project_dir / ".tasklist").mkdir(parents=True)
    (project_dir / ".tasklist" / "tasks.yaml").write_text("- just\n- a list\n", encoding="utf-8")
    app = create_app(project_dir=project_dir, enable_cors=False)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        resp = await c.get("/api/tasks")
    assert resp.status_code == 500
    assert resp.json()["error"] == "store_error"
