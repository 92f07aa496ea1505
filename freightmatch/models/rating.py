"""Rating model module."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from freightmatch.models.base import AuditMixin, Base, IdMixin


class Rating(Base, IdMixin, AuditMixin):
    __tablename__ = "ratings"
    __table_args__ = (CheckConstraint("score BETWEEN 1 AND 5", name="ck_ratings_score_range"),)

    contract_id: Mapped[str] = mapped_column(ForeignKey("contracts.id", ondelete="CASCADE"), unique=True, nullable=False)
    request_id: Mapped[str | None] = mapped_column(String(36))
    transporter_id: Mapped[str] = mapped_column(ForeignKey("transporters.id", ondelete="CASCADE"), nullable=False)
    client_id: Mapped[str] = mapped_column(String(36), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str | None] = mapped_column(Text)
