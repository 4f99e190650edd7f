"""FastAPI web server exposing the task list loader and action endpoints."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.concurrency import run_in_threadpool

from ..config import get_store_config, load_config
from ..dispatch import dispatch_action
from ..errors import NotFoundError, StoreError, TaskListError, UnknownActionError, ValidationError
from ..task_engine.interfaces import TaskRepository
from ..task_engine.store import build_store
from .models import ActionResponse, ErrorResponse, TaskInfo, TaskListResponse

_ERROR_STATUS: dict[type[TaskListError], int] = {
    ValidationError: 400,
    UnknownActionError: 400,
    NotFoundError: 404,
    StoreError: 500,
}


async def _read_fields(request: Request) -> dict[str, Any]:
    """Read the submitted field map from a form-encoded or JSON body."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}
    form = await request.form()
    return {key: form.getlist(key)[0] for key in form.keys()}


def create_app(
    project_dir: Optional[Path] = None,
    store: Optional[TaskRepository] = None,
    enable_cors: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        project_dir: Directory holding `.tasklist/`; defaults to the working directory.
        store: Store to serve. Built from the project config when omitted.
        enable_cors: Whether to enable CORS.

    Returns:
        Configured FastAPI app.
    """
    app = FastAPI(
        title="Task List",
        description="Single-list task tracker",
        version="1.0.0",
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if store is None:
        root = project_dir or Path.cwd()
        config, err = load_config(root)
        if err:
            logger.warning("Ignoring unreadable config: {}", err)
        store = build_store(get_store_config(config, root))
    app.state.store = store

    @app.exception_handler(TaskListError)
    async def _task_list_error(request: Request, exc: TaskListError) -> JSONResponse:
        status = _ERROR_STATUS.get(type(exc), 400)
        if status >= 500:
            logger.error("Store failure on {} {}: {}", request.method, request.url.path, exc.message)
        else:
            logger.info("Rejected {} {}: {}", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=status, content={"error": exc.kind, "detail": exc.message})

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"name": "Task List", "version": "1.0.0", "status": "running"}

    @app.get("/api/tasks", response_model=TaskListResponse)
    async def list_tasks() -> TaskListResponse:
        tasks = await run_in_threadpool(app.state.store.list_tasks)
        data = [TaskInfo(**t.to_dict()) for t in tasks]
        return TaskListResponse(tasks=data, total=len(data))

    @app.post(
        "/api/tasks",
        response_model=ActionResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    )
    async def submit_action(request: Request) -> ActionResponse:
        fields = await _read_fields(request)
        await run_in_threadpool(dispatch_action, app.state.store, fields)
        return ActionResponse(status="ok")

    return app
