"""Transport request lifecycle endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Query, Response, status

from freightmatch.database.db import get_db_session
from freightmatch.models import RequestStatus
from freightmatch.schemas.offers import TransporterActionRequest
from freightmatch.schemas.requests import (
    ArchiveRequest,
    CancelRequest,
    CompleteRequest,
    HideRequest,
    QualifyRequest,
    RequestCreateRequest,
    RequestEditRequest,
    RequestResponse,
)
from freightmatch.schemas.transporters import RecommendationResponse
from freightmatch.services.request_service import RequestLifecycleService
from freightmatch.tasks.dispatch import get_event_dispatcher

router = APIRouter(prefix="/requests", tags=["requests"])


def _dump(request) -> dict:
    return RequestResponse.model_validate(request).model_dump(mode="json")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_request(payload: RequestCreateRequest) -> dict:
    with get_db_session() as session:
        service = RequestLifecycleService(session, dispatcher=get_event_dispatcher())
        return _dump(service.create_request(payload))


@router.get("")
def list_requests(
    client_id: str | None = Query(default=None),
    status_filter: RequestStatus | None = Query(default=None, alias="status"),
    transporter_id: str | None = Query(default=None),
    include_hidden: bool = Query(default=False),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
) -> dict:
    with get_db_session() as session:
        rows = RequestLifecycleService(session).list_requests(
            client_id=client_id,
            status=status_filter,
            transporter_id=transporter_id,
            include_hidden=include_hidden,
            limit=limit,
            offset=offset,
        )
        return {"items": [_dump(row) for row in rows], "limit": limit, "offset": offset}


@router.get("/{request_id}")
def get_request(request_id: str) -> dict:
    with get_db_session() as session:
        return _dump(RequestLifecycleService(session).get_request(request_id))


@router.patch("/{request_id}")
def edit_request(request_id: str, payload: RequestEditRequest) -> dict:
    with get_db_session() as session:
        service = RequestLifecycleService(session, dispatcher=get_event_dispatcher())
        return _dump(service.edit_request(request_id, payload))


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_request(request_id: str, actor_id: str | None = Query(default=None)) -> Response:
    with get_db_session() as session:
        RequestLifecycleService(session).delete_request(request_id, actor_id=actor_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{request_id}/qualify")
def qualify_request(request_id: str, payload: QualifyRequest) -> dict:
    with get_db_session() as session:
        service = RequestLifecycleService(session, dispatcher=get_event_dispatcher())
        request = service.qualify_request(
            request_id,
            transporter_amount=payload.transporter_amount,
            platform_fee=payload.platform_fee,
            actor_id=payload.actor_id,
        )
        return _dump(request)


@router.post("/{request_id}/publish")
def publish_request(request_id: str, actor_id: str | None = Query(default=None)) -> dict:
    with get_db_session() as session:
        service = RequestLifecycleService(session, dispatcher=get_event_dispatcher())
        return _dump(service.publish_for_matching(request_id, actor_id=actor_id))


@router.post("/{request_id}/archive")
def archive_request(request_id: str, payload: ArchiveRequest) -> dict:
    with get_db_session() as session:
        service = RequestLifecycleService(session, dispatcher=get_event_dispatcher())
        return _dump(service.archive_request(request_id, payload.reason, actor_id=payload.actor_id))


@router.post("/{request_id}/cancel")
def cancel_request(request_id: str, payload: CancelRequest) -> dict:
    with get_db_session() as session:
        service = RequestLifecycleService(session, dispatcher=get_event_dispatcher())
        return _dump(service.cancel_request(request_id, actor_id=payload.actor_id, reason=payload.reason))


@router.post("/{request_id}/hide")
def toggle_hide(request_id: str, payload: HideRequest) -> dict:
    with get_db_session() as session:
        service = RequestLifecycleService(session, dispatcher=get_event_dispatcher())
        return _dump(service.toggle_hide(request_id, payload.is_hidden, actor_id=payload.actor_id))


@router.post("/{request_id}/start-transit")
def start_transit(request_id: str, payload: TransporterActionRequest) -> dict:
    with get_db_session() as session:
        service = RequestLifecycleService(session, dispatcher=get_event_dispatcher())
        return _dump(service.start_transit(request_id, transporter_id=payload.transporter_id))


@router.post("/{request_id}/complete")
def complete_request(request_id: str, payload: CompleteRequest) -> dict:
    with get_db_session() as session:
        service = RequestLifecycleService(session, dispatcher=get_event_dispatcher())
        request = service.complete_request(
            request_id,
            client_id=payload.client_id,
            rating=payload.rating,
            comment=payload.comment,
        )
        return _dump(request)


@router.post("/{request_id}/republish")
def republish_request(request_id: str, actor_id: str | None = Query(default=None)) -> dict:
    with get_db_session() as session:
        service = RequestLifecycleService(session, dispatcher=get_event_dispatcher())
        return _dump(service.republish_request(request_id, actor_id=actor_id))


@router.get("/{request_id}/recommendations")
def get_recommendations(request_id: str, limit: int | None = Query(default=None, ge=1, le=100)) -> dict:
    with get_db_session() as session:
        ranked = RequestLifecycleService(session).get_recommendations(request_id, limit=limit)
        return {
            "items": [RecommendationResponse.model_validate(item).model_dump(mode="json") for item in ranked],
        }
