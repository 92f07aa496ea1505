"""Transporter directory model module."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from freightmatch.models.base import AuditMixin, Base, IdMixin, enum_column
from freightmatch.models.enums import AccountStatus, TransporterStatus


class Transporter(Base, IdMixin, AuditMixin):
    __tablename__ = "transporters"
    __table_args__ = (Index("idx_transporters_status_account", "status", "account_status"),)

    name: Mapped[str | None] = mapped_column(String(255))
    phone_number: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    city: Mapped[str | None] = mapped_column(String(120))
    status: Mapped[TransporterStatus] = mapped_column(
        enum_column(TransporterStatus), default=TransporterStatus.PENDING, nullable=False
    )
    account_status: Mapped[AccountStatus] = mapped_column(
        enum_column(AccountStatus), default=AccountStatus.ACTIVE, nullable=False
    )
    rating: Mapped[Decimal] = mapped_column(Numeric(3, 2), default=Decimal("0"), nullable=False)
    total_ratings: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_trips: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_active_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    @property
    def is_eligible(self) -> bool:
        return self.status == TransporterStatus.VALIDATED and self.account_status == AccountStatus.ACTIVE
