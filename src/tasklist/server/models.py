"""Pydantic models for API responses."""

from __future__ import annotations

from pydantic import BaseModel, Field


class TaskInfo(BaseModel):
    """Task information."""

    id: int
    name: str
    done: bool = False


class TaskListResponse(BaseModel):
    tasks: list[TaskInfo] = Field(default_factory=list)
    total: int = 0


class ActionResponse(BaseModel):
    status: str


class ErrorResponse(BaseModel):
    """Body returned for rejected actions."""

    error: str
    detail: str
