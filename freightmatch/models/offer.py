"""Offer model module."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from freightmatch.models.base import AuditMixin, Base, IdMixin, enum_column
from freightmatch.models.enums import LoadType, OfferStatus


class Offer(Base, IdMixin, AuditMixin):
    __tablename__ = "offers"
    __table_args__ = (
        UniqueConstraint("request_id", "transporter_id", name="uq_offers_request_transporter"),
        Index("idx_offers_request_status", "request_id", "status"),
    )

    request_id: Mapped[str] = mapped_column(ForeignKey("transport_requests.id", ondelete="CASCADE"), nullable=False)
    transporter_id: Mapped[str] = mapped_column(ForeignKey("transporters.id", ondelete="RESTRICT"), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    pickup_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    load_type: Mapped[LoadType] = mapped_column(enum_column(LoadType), nullable=False)
    status: Mapped[OfferStatus] = mapped_column(enum_column(OfferStatus), default=OfferStatus.PENDING, nullable=False)

    request = relationship("TransportRequest", back_populates="offers")
    transporter = relationship("Transporter")
