"""Empty return model module."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from freightmatch.models.base import AuditMixin, Base, IdMixin, enum_column
from freightmatch.models.enums import EmptyReturnStatus


class EmptyReturn(Base, IdMixin, AuditMixin):
    __tablename__ = "empty_returns"
    __table_args__ = (Index("idx_empty_returns_route_status", "from_city", "to_city", "status"),)

    transporter_id: Mapped[str] = mapped_column(ForeignKey("transporters.id", ondelete="CASCADE"), nullable=False)
    from_city: Mapped[str] = mapped_column(String(120), nullable=False)
    to_city: Mapped[str] = mapped_column(String(120), nullable=False)
    return_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[EmptyReturnStatus] = mapped_column(
        enum_column(EmptyReturnStatus), default=EmptyReturnStatus.ACTIVE, nullable=False
    )
    assigned_request_id: Mapped[str | None] = mapped_column(String(36))

    transporter = relationship("Transporter")
