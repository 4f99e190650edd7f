"""The persisted task record."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class Task:
    """A single entry of the task list.

    ``id`` is assigned by the store on creation and never changes; ``name``
    and ``done`` are freely replaceable through the store adapter.
    """

    id: int
    name: str
    done: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict for YAML/JSON persistence."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Deserialize from a plain dict, coercing field types."""
        return cls(
            id=int(data["id"]),
            name=str(data.get("name", "")),
            done=bool(data.get("done", False)),
        )
