"""Transporter directory endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from freightmatch.database.db import get_db_session
from freightmatch.models import TransporterStatus
from freightmatch.schemas.common import ActorRequest
from freightmatch.schemas.transporters import TransporterRegisterRequest, TransporterResponse
from freightmatch.services.transporter_service import TransporterService

router = APIRouter(prefix="/transporters", tags=["transporters"])


def _dump(transporter) -> dict:
    return TransporterResponse.model_validate(transporter).model_dump(mode="json")


@router.post("", status_code=status.HTTP_201_CREATED)
def register_transporter(payload: TransporterRegisterRequest) -> dict:
    with get_db_session() as session:
        return _dump(TransporterService(session).register_transporter(payload))


@router.get("")
def list_transporters(status_filter: TransporterStatus | None = Query(default=None, alias="status")) -> dict:
    with get_db_session() as session:
        rows = TransporterService(session).list_transporters(status=status_filter)
        return {"items": [_dump(row) for row in rows]}


@router.get("/{transporter_id}")
def get_transporter(transporter_id: str) -> dict:
    with get_db_session() as session:
        return _dump(TransporterService(session).get_transporter(transporter_id))


@router.post("/{transporter_id}/validate")
def validate_transporter(transporter_id: str, payload: ActorRequest) -> dict:
    with get_db_session() as session:
        return _dump(TransporterService(session).validate_transporter(transporter_id, actor_id=payload.actor_id))


@router.post("/{transporter_id}/block")
def block_transporter(transporter_id: str, payload: ActorRequest) -> dict:
    with get_db_session() as session:
        return _dump(TransporterService(session).block_transporter(transporter_id, actor_id=payload.actor_id))


@router.post("/{transporter_id}/unblock")
def unblock_transporter(transporter_id: str, payload: ActorRequest) -> dict:
    with get_db_session() as session:
        return _dump(TransporterService(session).unblock_transporter(transporter_id, actor_id=payload.actor_id))
