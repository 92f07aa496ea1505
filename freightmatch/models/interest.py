"""Interest and decline ledger models.

Each (request, transporter) pair is one row guarded by a unique constraint,
so adding or removing a transporter never rewrites a shared collection.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from freightmatch.models.base import AuditMixin, Base, IdMixin


class TransporterInterest(Base, IdMixin, AuditMixin):
    __tablename__ = "transporter_interests"
    __table_args__ = (
        UniqueConstraint("request_id", "transporter_id", name="uq_interests_request_transporter"),
    )

    request_id: Mapped[str] = mapped_column(ForeignKey("transport_requests.id", ondelete="CASCADE"), nullable=False)
    transporter_id: Mapped[str] = mapped_column(String(36), nullable=False)
    availability_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    request = relationship("TransportRequest", back_populates="interests")


class RequestDecline(Base, IdMixin, AuditMixin):
    __tablename__ = "request_declines"
    __table_args__ = (
        UniqueConstraint("request_id", "transporter_id", name="uq_declines_request_transporter"),
    )

    request_id: Mapped[str] = mapped_column(ForeignKey("transport_requests.id", ondelete="CASCADE"), nullable=False)
    transporter_id: Mapped[str] = mapped_column(String(36), nullable=False)

    request = relationship("TransportRequest", back_populates="declines")
