"""Shared service base with robust session lifecycle behavior."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from freightmatch.core.exceptions import ConflictError, NotFoundError
from freightmatch.database.db import SessionLocal
from freightmatch.models import RequestEvent, TransportRequest

logger = logging.getLogger(__name__)


class EventDispatcher(Protocol):
    def publish(self, message: dict[str, Any]) -> None: ...


class BaseService:
    """Base class for services that operate on a SQLAlchemy session.

    Domain events recorded during a unit of work are handed to the dispatcher
    only after the transaction commits.
    """

    def __init__(self, db: Session | None = None, dispatcher: EventDispatcher | None = None) -> None:
        self.db = db or SessionLocal()
        self.dispatcher = dispatcher
        self._pending_events: list[RequestEvent] = []

    def get_request(self, request_id: str) -> TransportRequest:
        request = self.db.get(TransportRequest, request_id)
        if request is None:
            raise NotFoundError(f"Request not found: {request_id}")
        return request

    def record_event(
        self,
        request: TransportRequest,
        event_type: str,
        actor_id: str | None = None,
        **payload: Any,
    ) -> RequestEvent:
        event = RequestEvent(
            request_id=request.id,
            event_type=event_type,
            actor_id=actor_id,
            payload={"reference_id": request.reference_id, **payload},
        )
        self.db.add(event)
        self._pending_events.append(event)
        return event

    def commit(self) -> None:
        """Commit current transaction and rollback on failure."""
        try:
            self.db.commit()
        except StaleDataError as exc:
            self.rollback()
            raise ConflictError("Request was modified concurrently; reload and retry.") from exc
        except Exception:
            self.rollback()
            raise
        events, self._pending_events = self._pending_events, []
        self._dispatch(events)

    def rollback(self) -> None:
        self._pending_events = []
        self.db.rollback()

    def close(self) -> None:
        self.db.close()

    def _dispatch(self, events: list[RequestEvent]) -> None:
        if self.dispatcher is None:
            return
        for event in events:
            message = event.as_message()
            try:
                self.dispatcher.publish(message)
            except Exception:
                logger.warning(
                    "events.dispatch_failed",
                    extra={
                        "event": "events.dispatch_failed",
                        "request_id": event.request_id,
                        "event_type": event.event_type,
                    },
                    exc_info=True,
                )

    def __enter__(self) -> "BaseService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type:
            self.rollback()
        self.close()
