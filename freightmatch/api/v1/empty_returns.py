"""Empty return endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from freightmatch.database.db import get_db_session
from freightmatch.schemas.contracts import AssignmentResponse
from freightmatch.schemas.empty_returns import EmptyReturnAssignRequest, EmptyReturnCreateRequest, EmptyReturnResponse
from freightmatch.services.empty_return_service import EmptyReturnService
from freightmatch.tasks.dispatch import get_event_dispatcher

router = APIRouter(prefix="/empty-returns", tags=["empty-returns"])


@router.post("", status_code=status.HTTP_201_CREATED)
def announce_empty_return(payload: EmptyReturnCreateRequest) -> dict:
    with get_db_session() as session:
        empty_return = EmptyReturnService(session).announce_empty_return(payload)
        return EmptyReturnResponse.model_validate(empty_return).model_dump(mode="json")


@router.get("")
def list_active_empty_returns(
    from_city: str | None = Query(default=None),
    to_city: str | None = Query(default=None),
) -> dict:
    with get_db_session() as session:
        rows = EmptyReturnService(session).list_active_empty_returns(from_city=from_city, to_city=to_city)
        return {"items": [EmptyReturnResponse.model_validate(row).model_dump(mode="json") for row in rows]}


@router.post("/{empty_return_id}/assign")
def assign_empty_return(empty_return_id: str, payload: EmptyReturnAssignRequest) -> dict:
    with get_db_session() as session:
        service = EmptyReturnService(session, dispatcher=get_event_dispatcher())
        result = service.assign_empty_return(
            empty_return_id,
            payload.request_id,
            transporter_amount=payload.transporter_amount,
            platform_fee=payload.platform_fee,
            actor_id=payload.actor_id,
        )
        return AssignmentResponse.model_validate(result).model_dump(mode="json")
