STATE_DIR_NAME = ".tasklist"
CONFIG_FILE = "config.yaml"
STORE_FILENAME = "tasks.yaml"
LOCK_FILENAME = "tasks.lock"

WINDOWS_LOCK_BYTES = 4096

ACTION_ADD = "add"
ACTION_UPDATE = "update"
ACTION_DONE = "done"
ACTION_UNDONE = "undone"
ACTION_DELETE = "delete"

EMPTY_LIST_PLACEHOLDER = "No Tasks"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVEL_ENV_VAR = "TASKLIST_LOG_LEVEL"
