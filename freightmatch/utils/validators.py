"""Input validation helpers shared by services and routes."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from freightmatch.core.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def sanitize_text(value: str | None, max_len: int = 20000) -> str:
    """Sanitize free-form content before persistence."""
    if value is None:
        return ""
    cleaned = str(value).replace("\x00", "").strip()
    return cleaned[:max_len]


def format_validation_errors(exc: PydanticValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "payload"
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


def validate_payload(model_cls: type[ModelT], data: ModelT | dict[str, Any]) -> ModelT:
    """Coerce ``data`` into ``model_cls``, raising the domain ValidationError on failure."""
    if isinstance(data, model_cls):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump()
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(format_validation_errors(exc)) from exc
