"""Transport request model module."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from freightmatch.models.base import AuditMixin, Base, IdMixin, enum_column
from freightmatch.models.enums import ArchiveReason, PaymentStatus, RequestStatus


class TransportRequest(Base, IdMixin, AuditMixin):
    __tablename__ = "transport_requests"
    __table_args__ = (
        Index("idx_transport_requests_status", "status"),
        Index("idx_transport_requests_client", "client_id"),
        Index("idx_transport_requests_payment_status", "payment_status"),
        CheckConstraint(
            "accepted_offer_id IS NULL OR assigned_transporter_id IS NULL",
            name="ck_transport_requests_single_winner",
        ),
    )

    reference_id: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    client_id: Mapped[str] = mapped_column(String(36), nullable=False)

    from_city: Mapped[str] = mapped_column(String(120), nullable=False)
    to_city: Mapped[str] = mapped_column(String(120), nullable=False)
    from_address: Mapped[str | None] = mapped_column(String(500))
    to_address: Mapped[str | None] = mapped_column(String(500))

    goods_type: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    budget: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    requested_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    handling_required: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    departure_floor: Mapped[int | None] = mapped_column(Integer)
    departure_elevator: Mapped[bool | None] = mapped_column(Boolean)
    arrival_floor: Mapped[int | None] = mapped_column(Integer)
    arrival_elevator: Mapped[bool | None] = mapped_column(Boolean)

    status: Mapped[RequestStatus] = mapped_column(
        enum_column(RequestStatus), default=RequestStatus.OPEN, nullable=False
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        enum_column(PaymentStatus), default=PaymentStatus.NOT_REQUIRED, nullable=False
    )
    archive_reason: Mapped[ArchiveReason | None] = mapped_column(enum_column(ArchiveReason))

    qualified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    published_for_matching_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    transporter_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    platform_fee: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    client_total: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    priced_from_offer: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    accepted_offer_id: Mapped[str | None] = mapped_column(String(36))
    assigned_transporter_id: Mapped[str | None] = mapped_column(
        ForeignKey("transporters.id", ondelete="SET NULL")
    )
    assigned_by_id: Mapped[str | None] = mapped_column(String(36))
    assigned_manually: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    assigned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    payment_receipt: Mapped[str | None] = mapped_column(Text)
    payment_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    is_hidden: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    interests = relationship(
        "TransporterInterest", back_populates="request", cascade="all, delete-orphan", lazy="selectin"
    )
    declines = relationship(
        "RequestDecline", back_populates="request", cascade="all, delete-orphan", lazy="selectin"
    )
    offers = relationship("Offer", back_populates="request", cascade="all, delete-orphan")
    events = relationship("RequestEvent", back_populates="request", cascade="all, delete-orphan")
    accepted_offer = relationship(
        "Offer",
        primaryjoin="foreign(TransportRequest.accepted_offer_id) == Offer.id",
        viewonly=True,
    )

    @property
    def transporter_interests(self) -> frozenset[str]:
        return frozenset(interest.transporter_id for interest in self.interests)

    @property
    def declined_by(self) -> frozenset[str]:
        return frozenset(decline.transporter_id for decline in self.declines)

    @property
    def is_qualified(self) -> bool:
        return self.qualified_at is not None

    @property
    def committed_transporter_id(self) -> str | None:
        """Transporter bound to the request, through manual/client pick or an accepted offer."""
        if self.assigned_transporter_id is not None:
            return self.assigned_transporter_id
        if self.accepted_offer is not None:
            return self.accepted_offer.transporter_id
        return None
