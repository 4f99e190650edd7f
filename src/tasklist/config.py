"""Load optional configuration from `.tasklist/config.yaml`."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from .constants import (
    CONFIG_FILE,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
    LOG_LEVEL_ENV_VAR,
    STATE_DIR_NAME,
    STORE_FILENAME,
)
from .io_utils import _load_data_with_error

VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
VALID_STORE_BACKENDS = {"file", "memory"}


def load_config(project_dir: Path) -> tuple[dict[str, Any], str | None]:
    """Load the optional config file.

    Args:
        project_dir: Directory holding the `.tasklist/` state directory.

    Returns:
        A tuple of `(config, error_message)`. If the file is missing, returns `({}, None)`.
    """
    path = project_dir.resolve() / STATE_DIR_NAME / CONFIG_FILE
    data, err = _load_data_with_error(path, {})
    if err:
        return {}, err
    return data, None


def _get_nested(config: dict[str, Any], *keys: str) -> Any:
    cur: Any = config
    for key in keys:
        if not isinstance(cur, dict):
            return None
        cur = cur.get(key)
    return cur


def get_log_level(config: dict[str, Any]) -> str:
    """Resolve the log level: environment variable, then config, then default."""
    for raw in (os.environ.get(LOG_LEVEL_ENV_VAR), config.get("log_level")):
        if isinstance(raw, str) and raw.strip().upper() in VALID_LOG_LEVELS:
            return raw.strip().upper()
    return DEFAULT_LOG_LEVEL


def get_server_config(config: dict[str, Any]) -> dict[str, Any]:
    """Extract host and port for the HTTP server.

    Args:
        config: Configuration dictionary.

    Returns:
        A mapping with `host` and `port`, falling back to defaults for invalid values.
    """
    host = _get_nested(config, "server", "host")
    port = _get_nested(config, "server", "port")
    return {
        "host": host if isinstance(host, str) and host else DEFAULT_HOST,
        "port": port if isinstance(port, int) and 0 < port < 65536 else DEFAULT_PORT,
    }


def get_store_config(config: dict[str, Any], project_dir: Path) -> dict[str, Any]:
    """Extract the store backend and the path of the task file.

    Relative paths are resolved against *project_dir*.
    """
    backend = _get_nested(config, "store", "backend")
    if not isinstance(backend, str) or backend not in VALID_STORE_BACKENDS:
        backend = "file"
    raw_path = _get_nested(config, "store", "path")
    if isinstance(raw_path, str) and raw_path:
        path = Path(raw_path).expanduser()
        if not path.is_absolute():
            path = project_dir / path
    else:
        path = project_dir / STATE_DIR_NAME / STORE_FILENAME
    return {"backend": backend, "path": path}
