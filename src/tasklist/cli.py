from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from .config import VALID_LOG_LEVELS, get_log_level, get_server_config, get_store_config, load_config
from .errors import TaskListError
from .logging_utils import configure_logging
from .task_engine.store import build_store
from .view.clients import HttpTaskClient, LocalTaskClient, TaskClient
from .view.controller import ListController
from .view.render import render_list

Operation = Callable[[ListController], Optional[Awaitable[bool]]]


def _resolve_project_dir(project_dir: Optional[str]) -> Path:
    return Path(project_dir).expanduser().resolve() if project_dir else Path.cwd().resolve()


def _load(args: argparse.Namespace) -> tuple[Path, dict[str, Any]]:
    project_dir = _resolve_project_dir(args.project_dir)
    config, err = load_config(project_dir)
    if err:
        logger.warning("Ignoring unreadable config: {}", err)
    return project_dir, config


def _make_client(args: argparse.Namespace) -> TaskClient:
    if args.url:
        return HttpTaskClient(args.url)
    project_dir, config = _load(args)
    return LocalTaskClient(build_store(get_store_config(config, project_dir)))


async def _with_controller(args: argparse.Namespace, body: Callable[[ListController], Awaitable[int]]) -> int:
    client = _make_client(args)
    try:
        controller = ListController(client)
        await controller.refresh()
        return await body(controller)
    except TaskListError as exc:
        sys.stderr.write(f"{exc.message}\n")
        return 1
    finally:
        if isinstance(client, HttpTaskClient):
            await client.aclose()


def _print_list(controller: ListController, as_json: bool = False) -> None:
    if as_json:
        payload = {"tasks": [t.to_dict() for t in controller.tasks], "total": len(controller.tasks)}
        sys.stdout.write(json.dumps(payload, indent=2) + "\n")
        return
    sys.stdout.write(render_list(controller.view()))


def _mutate(args: argparse.Namespace, operation: Operation, description: str) -> int:
    async def body(controller: ListController) -> int:
        submission = operation(controller)
        if submission is None:
            sys.stderr.write(f"Cannot {description}: no such task\n")
            return 1
        ok = await submission
        await controller.wait_idle()
        if not ok:
            sys.stderr.write(f"Failed to {description}\n")
            return 1
        _print_list(controller)
        return 0

    return asyncio.run(_with_controller(args, body))


def _task_list(args: argparse.Namespace) -> int:
    async def body(controller: ListController) -> int:
        _print_list(controller, as_json=args.json)
        return 0

    return asyncio.run(_with_controller(args, body))


def _task_add(args: argparse.Namespace) -> int:
    return _mutate(args, lambda c: c.add(args.name), f"add {args.name!r}")


def _rename(controller: ListController, task_id: int, name: str) -> Optional[Awaitable[bool]]:
    if not controller.start_editing(task_id):
        return None
    return controller.submit_update(task_id, name)


def _task_rename(args: argparse.Namespace) -> int:
    return _mutate(args, lambda c: _rename(c, args.task_id, args.name), f"rename task {args.task_id}")


def _set_done(controller: ListController, task_id: int, done: bool) -> Optional[Awaitable[bool]]:
    task = next((t for t in controller.tasks if t.id == task_id), None)
    if task is None:
        return None
    if task.done == done:
        return _noop()
    return controller.toggle_done(task_id)


async def _noop() -> bool:
    return True


def _task_done(args: argparse.Namespace) -> int:
    return _mutate(args, lambda c: _set_done(c, args.task_id, True), f"complete task {args.task_id}")


def _task_undone(args: argparse.Namespace) -> int:
    return _mutate(args, lambda c: _set_done(c, args.task_id, False), f"reopen task {args.task_id}")


def _task_delete(args: argparse.Namespace) -> int:
    return _mutate(args, lambda c: c.delete(args.task_id), f"delete task {args.task_id}")


def _server(args: argparse.Namespace) -> int:
    import uvicorn

    from .server import create_app

    project_dir, config = _load(args)
    server_config = get_server_config(config)
    host = args.host or server_config["host"]
    port = args.port or server_config["port"]
    app = create_app(project_dir=project_dir)
    logger.info("Serving task list from {} on {}:{}", project_dir, host, port)
    uvicorn.run(app, host=host, port=port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Single-list task tracker")
    parser.add_argument('--project-dir', default=None, help='Directory holding .tasklist/ (default: current working directory)')
    parser.add_argument('--url', default=None, help='Base URL of a running task server (default: use the local store)')
    parser.add_argument(
        '--log-level',
        default=None,
        type=str.upper,
        choices=sorted(VALID_LOG_LEVELS),
        help='Log level (default: config or INFO)',
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    server = subparsers.add_parser('server', help='Start the web server')
    server.add_argument('--host', default=None)
    server.add_argument('--port', default=None, type=int)
    server.set_defaults(func=_server)

    tlist = subparsers.add_parser('list', help='Show the task list')
    tlist.add_argument('--json', action='store_true', help='Print JSON instead of a table')
    tlist.set_defaults(func=_task_list)

    tadd = subparsers.add_parser('add', help='Add a task')
    tadd.add_argument('name')
    tadd.set_defaults(func=_task_add)

    trename = subparsers.add_parser('rename', help='Rename a task')
    trename.add_argument('task_id', type=int)
    trename.add_argument('name')
    trename.set_defaults(func=_task_rename)

    tdone = subparsers.add_parser('done', help='Mark a task as done')
    tdone.add_argument('task_id', type=int)
    tdone.set_defaults(func=_task_done)

    tundone = subparsers.add_parser('undone', help='Mark a task as not done')
    tundone.add_argument('task_id', type=int)
    tundone.set_defaults(func=_task_undone)

    tdelete = subparsers.add_parser('delete', help='Delete a task')
    tdelete.add_argument('task_id', type=int)
    tdelete.set_defaults(func=_task_delete)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.log_level:
        configure_logging(args.log_level)
    else:
        _, config = _load(args)
        configure_logging(get_log_level(config))
    handler = getattr(args, 'func', None)
    if handler is None:
        parser.print_help()
        return 1
    return int(handler(args) or 0)


if __name__ == '__main__':
    raise SystemExit(main())
