"""Platform settings model module."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from freightmatch.models.base import AuditMixin, Base


class PlatformSettings(Base, AuditMixin):
    __tablename__ = "platform_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # Global display ratio; independent from the per-request platform_fee.
    commission_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
