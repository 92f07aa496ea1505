"""Notification fan-out for committed request events."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from freightmatch.core.config import get_config
from freightmatch.database.db import get_db_session
from freightmatch.models import Notification, TransportRequest
from freightmatch.services.recommendation_ranker import RecommendationRanker
from freightmatch.tasks.celery_app import celery_app
from freightmatch.tasks.hooks import after_task, before_task

logger = logging.getLogger(__name__)

NotificationSpec = tuple[str, str, str, str]


def _reference(message: dict[str, Any]) -> str:
    return message.get("payload", {}).get("reference_id") or message.get("request_id", "")


def _offer_received(session: Session, message: dict[str, Any]) -> list[NotificationSpec]:
    payload = message["payload"]
    return [
        (
            payload["client_id"],
            "offer_received",
            "New offer",
            f"A transporter sent an offer for request {_reference(message)}.",
        )
    ]


def _transporter_assigned(session: Session, message: dict[str, Any]) -> list[NotificationSpec]:
    payload = message["payload"]
    reference = _reference(message)
    return [
        (payload["transporter_id"], "assignment", "You have been selected", f"You were selected for request {reference}."),
        (payload["client_id"], "transporter_assigned", "Transporter assigned", f"A transporter is assigned to request {reference}."),
    ]


def _first_qualification(session: Session, message: dict[str, Any]) -> list[NotificationSpec]:
    if not message["payload"].get("first_qualification"):
        return []
    request = session.get(TransportRequest, message["request_id"])
    if request is None:
        return []
    already_sent = session.scalar(
        select(Notification.id).where(Notification.related_id == request.id, Notification.type == "recommendation")
    )
    if already_sent is not None:
        return []
    ranked = RecommendationRanker(session).rank(request, limit=get_config().RECOMMENDATION_LIMIT)
    return [
        (
            candidate.id,
            "recommendation",
            "New request matching your profile",
            f"Request {request.reference_id} from {request.from_city} to {request.to_city} matches your profile.",
        )
        for candidate in ranked
    ]


def _billing_requested(session: Session, message: dict[str, Any]) -> list[NotificationSpec]:
    payload = message["payload"]
    return [
        (payload["client_id"], "payment_requested", "Payment requested", f"Please pay for request {_reference(message)}.")
    ]


def _receipt_rejected(session: Session, message: dict[str, Any]) -> list[NotificationSpec]:
    payload = message["payload"]
    detail = f" Reason: {payload['reason']}" if payload.get("reason") else ""
    return [
        (
            payload["client_id"],
            "receipt_rejected",
            "Receipt rejected",
            f"Your payment receipt for request {_reference(message)} was rejected.{detail}",
        )
    ]


def _payment_validated(session: Session, message: dict[str, Any]) -> list[NotificationSpec]:
    payload = message["payload"]
    reference = _reference(message)
    specs = [(payload["client_id"], "payment_validated", "Payment validated", f"Payment for request {reference} is confirmed.")]
    if payload.get("transporter_id"):
        specs.append(
            (payload["transporter_id"], "payment_validated", "Payment validated", f"Payment for request {reference} is confirmed.")
        )
    return specs


def _request_cancelled(session: Session, message: dict[str, Any]) -> list[NotificationSpec]:
    transporter_id = message["payload"].get("transporter_id")
    if not transporter_id:
        return []
    return [(transporter_id, "request_cancelled", "Request cancelled", f"Request {_reference(message)} was cancelled.")]


HANDLERS: dict[str, Callable[[Session, dict[str, Any]], list[NotificationSpec]]] = {
    "offer.submitted": _offer_received,
    "request.transporter_assigned": _transporter_assigned,
    "request.qualified": _first_qualification,
    "payment.billing_requested": _billing_requested,
    "payment.receipt_rejected": _receipt_rejected,
    "payment.validated": _payment_validated,
    "request.cancelled": _request_cancelled,
}


def handle_request_event(session: Session, message: dict[str, Any]) -> list[Notification]:
    """Turn one committed request event into notification rows (not committed)."""
    handler = HANDLERS.get(message.get("event_type", ""))
    if handler is None:
        return []
    notifications = [
        Notification(user_id=user_id, type=kind, title=title, message=text, related_id=message.get("request_id"))
        for user_id, kind, title, text in handler(session, message)
    ]
    session.add_all(notifications)
    return notifications


@celery_app.task(bind=True, name="events.dispatch_request_event")
def dispatch_request_event(self, message: dict[str, Any]) -> dict[str, Any]:
    context = {
        "request_id": message.get("request_id"),
        "reference_id": _reference(message),
        "actor_id": message.get("actor_id"),
        "task_id": getattr(self.request, "id", None),
        "trace_id": uuid.uuid4().hex,
    }
    logger.info("task.start", extra=before_task("events.dispatch_request_event", context))
    try:
        with get_db_session() as session:
            created = handle_request_event(session, message)
            session.commit()
    except Exception:
        logger.exception(
            "task.failed", extra=after_task("events.dispatch_request_event", context, status="failed")
        )
        raise
    logger.info("task.finish", extra=after_task("events.dispatch_request_event", context, status="succeeded"))
    return {"event_id": message.get("event_id"), "event_type": message.get("event_type"), "notifications": len(created)}
