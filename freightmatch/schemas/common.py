"""Common schema module."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorEnvelope(BaseModel):
    status: str = "error"
    error_code: str
    detail: str


class ActorRequest(BaseModel):
    actor_id: str | None = Field(default=None, max_length=36)
