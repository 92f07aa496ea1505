"""Interest, offer and selection endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from freightmatch.database.db import get_db_session
from freightmatch.schemas.contracts import (
    AcceptOfferRequest,
    AssignmentResponse,
    ChooseTransporterRequest,
    ManualAssignmentRequest,
)
from freightmatch.schemas.offers import (
    DeclineResponse,
    ExpressInterestRequest,
    InterestResponse,
    OfferCreateRequest,
    OfferResponse,
    TransporterActionRequest,
)
from freightmatch.services.assignment_resolver import AssignmentResult
from freightmatch.services.request_service import RequestLifecycleService
from freightmatch.tasks.dispatch import get_event_dispatcher

router = APIRouter(prefix="/requests", tags=["matching"])


def _service(session) -> RequestLifecycleService:
    return RequestLifecycleService(session, dispatcher=get_event_dispatcher())


def _assignment(result: AssignmentResult) -> dict:
    return AssignmentResponse.model_validate(result).model_dump(mode="json")


@router.post("/{request_id}/interest")
def express_interest(request_id: str, payload: ExpressInterestRequest) -> dict:
    with get_db_session() as session:
        interest = _service(session).express_interest(
            request_id, payload.transporter_id, availability_date=payload.availability_date
        )
        return InterestResponse.model_validate(interest).model_dump(mode="json")


@router.delete("/{request_id}/interest/{transporter_id}")
def withdraw_interest(request_id: str, transporter_id: str) -> dict:
    with get_db_session() as session:
        removed = _service(session).withdraw_interest(request_id, transporter_id)
        return {"request_id": request_id, "transporter_id": transporter_id, "removed": removed}


@router.post("/{request_id}/decline")
def decline_request(request_id: str, payload: TransporterActionRequest) -> dict:
    with get_db_session() as session:
        decline = _service(session).decline_request(request_id, payload.transporter_id)
        return DeclineResponse.model_validate(decline).model_dump(mode="json")


@router.post("/{request_id}/offers", status_code=status.HTTP_201_CREATED)
def submit_offer(request_id: str, payload: OfferCreateRequest) -> dict:
    with get_db_session() as session:
        offer = _service(session).submit_offer(
            request_id,
            payload.transporter_id,
            amount=payload.amount,
            pickup_date=payload.pickup_date,
            load_type=payload.load_type,
        )
        return OfferResponse.model_validate(offer).model_dump(mode="json")


@router.get("/{request_id}/offers")
def list_offers(request_id: str, viewer: str = Query(default="transporter", pattern="^(client|transporter)$")) -> dict:
    with get_db_session() as session:
        offers = _service(session).list_offers(request_id, viewer=viewer)
        return {"items": [OfferResponse.model_validate(offer).model_dump(mode="json") for offer in offers]}


@router.post("/{request_id}/choose")
def choose_transporter(request_id: str, payload: ChooseTransporterRequest) -> dict:
    with get_db_session() as session:
        result = _service(session).choose_transporter(request_id, payload.transporter_id, client_id=payload.client_id)
        return _assignment(result)


@router.post("/{request_id}/assign")
def assign_transporter_manually(request_id: str, payload: ManualAssignmentRequest) -> dict:
    with get_db_session() as session:
        result = _service(session).assign_transporter_manually(
            request_id,
            payload.transporter_id,
            transporter_amount=payload.transporter_amount,
            platform_fee=payload.platform_fee,
            actor_id=payload.actor_id,
        )
        return _assignment(result)


@router.post("/{request_id}/offers/{offer_id}/accept")
def accept_offer(request_id: str, offer_id: str, payload: AcceptOfferRequest) -> dict:
    with get_db_session() as session:
        result = _service(session).accept_offer(offer_id, client_id=payload.client_id, request_id=request_id)
        return _assignment(result)
