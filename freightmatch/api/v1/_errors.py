"""Domain error to HTTP response mapping."""

from __future__ import annotations

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from freightmatch.core.exceptions import (
    AlreadyAssigned,
    ConflictError,
    FreightMatchException,
    NotFoundError,
    PreconditionFailed,
    ReceiptRequired,
    ValidationError,
)
from freightmatch.schemas.common import ErrorEnvelope

_STATUS_BY_ERROR: tuple[tuple[type[FreightMatchException], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ReceiptRequired, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AlreadyAssigned, status.HTTP_409_CONFLICT),
    (ConflictError, status.HTTP_409_CONFLICT),
    (PreconditionFailed, status.HTTP_409_CONFLICT),
)


def map_domain_error(exc: FreightMatchException) -> tuple[int, ErrorEnvelope]:
    for error_cls, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return code, ErrorEnvelope(error_code=exc.error_code, detail=str(exc))
    return status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorEnvelope(error_code=exc.error_code, detail=str(exc))


async def domain_error_handler(request: Request, exc: FreightMatchException) -> JSONResponse:
    code, envelope = map_domain_error(exc)
    return JSONResponse(status_code=code, content=envelope.model_dump())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    detail = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', 'invalid value')}"
        for error in exc.errors()
    )
    envelope = ErrorEnvelope(error_code=ValidationError.error_code, detail=detail or "invalid request")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=envelope.model_dump())
