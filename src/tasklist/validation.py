"""Validate submitted field maps before they reach the store."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from .errors import ValidationError

_LEADING_INT_RE = re.compile(r"^\s*([+-]?[0-9]+)")


def _parse_int_prefix(raw: str) -> int | None:
    # Leading whitespace, optional sign, then the longest run of ASCII digits.
    match = _LEADING_INT_RE.match(raw)
    if match is None:
        return None
    return int(match.group(1), 10)


def validate_id(fields: Mapping[str, Any]) -> int:
    """Return the ``id`` field as an integer.

    Any parseable integer is accepted; whether a task with that id exists is
    for the store to decide.
    """
    raw = fields.get("id")
    if not isinstance(raw, str):
        raise ValidationError("id must be string")
    value = _parse_int_prefix(raw)
    if value is None:
        raise ValidationError("id must be numeric string")
    return value


def validate_name(fields: Mapping[str, Any]) -> str:
    """Return the ``name`` field unchanged (no trimming, no upper bound)."""
    raw = fields.get("name")
    if not isinstance(raw, str):
        raise ValidationError("name must be string")
    if len(raw) <= 0:
        raise ValidationError("name must be at least 1 characters")
    return raw
