"""Request event (audit + outbound domain event) model module."""

from __future__ import annotations

from sqlalchemy import JSON, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from freightmatch.models.base import AuditMixin, Base, IdMixin


class RequestEvent(Base, IdMixin, AuditMixin):
    __tablename__ = "request_events"
    __table_args__ = (Index("idx_request_events_request_type", "request_id", "event_type"),)

    request_id: Mapped[str] = mapped_column(ForeignKey("transport_requests.id", ondelete="CASCADE"), nullable=False)
    event_type: Mapped[str] = mapped_column(String(80), nullable=False)
    actor_id: Mapped[str | None] = mapped_column(String(36))
    payload: Mapped[dict | None] = mapped_column(JSON)

    request = relationship("TransportRequest", back_populates="events")

    def as_message(self) -> dict:
        """Serializable form handed to the notification collaborator."""
        return {
            "event_id": self.id,
            "event_type": self.event_type,
            "request_id": self.request_id,
            "actor_id": self.actor_id,
            "payload": dict(self.payload or {}),
        }
