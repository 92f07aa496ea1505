"""Contract model module."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from freightmatch.models.base import AuditMixin, Base, IdMixin, enum_column
from freightmatch.models.enums import ContractStatus


class Contract(Base, IdMixin, AuditMixin):
    __tablename__ = "contracts"
    __table_args__ = (
        Index("idx_contracts_request", "request_id"),
        Index("idx_contracts_transporter_status", "transporter_id", "status"),
    )

    # Nulled when the request is hard-deleted; the contract itself is never removed.
    request_id: Mapped[str | None] = mapped_column(ForeignKey("transport_requests.id", ondelete="SET NULL"))
    reference_id: Mapped[str] = mapped_column(String(32), nullable=False)
    offer_id: Mapped[str | None] = mapped_column(ForeignKey("offers.id", ondelete="SET NULL"))
    client_id: Mapped[str] = mapped_column(String(36), nullable=False)
    transporter_id: Mapped[str] = mapped_column(ForeignKey("transporters.id", ondelete="RESTRICT"), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[ContractStatus] = mapped_column(
        enum_column(ContractStatus), default=ContractStatus.IN_PROGRESS, nullable=False
    )

    transporter = relationship("Transporter")
