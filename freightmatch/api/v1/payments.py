"""Payment validation endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter

from freightmatch.database.db import get_db_session
from freightmatch.schemas.payments import AdminPaymentActionRequest, MarkAsPaidRequest, MarkForBillingRequest
from freightmatch.schemas.requests import RequestResponse
from freightmatch.services.payment_workflow import PaymentValidationWorkflow
from freightmatch.tasks.dispatch import get_event_dispatcher

router = APIRouter(prefix="/requests", tags=["payments"])


def _workflow(session) -> PaymentValidationWorkflow:
    return PaymentValidationWorkflow(session, dispatcher=get_event_dispatcher())


def _dump(request) -> dict:
    return RequestResponse.model_validate(request).model_dump(mode="json")


@router.post("/{request_id}/mark-for-billing")
def mark_for_billing(request_id: str, payload: MarkForBillingRequest) -> dict:
    with get_db_session() as session:
        return _dump(_workflow(session).mark_for_billing(request_id, payload.transporter_id))


@router.post("/{request_id}/mark-as-paid")
def mark_as_paid(request_id: str, payload: MarkAsPaidRequest) -> dict:
    with get_db_session() as session:
        return _dump(_workflow(session).mark_as_paid(request_id, payload.receipt, client_id=payload.client_id))


@router.post("/{request_id}/payment/validate")
def admin_validate_payment(request_id: str, payload: AdminPaymentActionRequest) -> dict:
    with get_db_session() as session:
        return _dump(_workflow(session).admin_validate_payment(request_id, actor_id=payload.actor_id))


@router.post("/{request_id}/payment/reject")
def admin_reject_receipt(request_id: str, payload: AdminPaymentActionRequest) -> dict:
    with get_db_session() as session:
        request = _workflow(session).admin_reject_receipt(request_id, actor_id=payload.actor_id, reason=payload.reason)
        return _dump(request)
