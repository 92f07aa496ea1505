"""Transporter directory and recommendation schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from freightmatch.models.enums import AccountStatus, RecommendationTier, TransporterStatus


class TransporterRegisterRequest(BaseModel):
    phone_number: str = Field(min_length=6, max_length=32)
    name: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=120)

    @field_validator("phone_number")
    @classmethod
    def _normalize_phone(cls, value: str) -> str:
        cleaned = value.replace(" ", "").replace("-", "")
        if not cleaned.lstrip("+").isdigit():
            raise ValueError("phone_number must contain digits only")
        return cleaned


class TransporterResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None = None
    phone_number: str
    city: str | None = None
    status: TransporterStatus
    account_status: AccountStatus
    rating: Decimal
    total_ratings: int
    total_trips: int
    last_active_at: datetime | None = None


class RecommendationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None = None
    city: str | None = None
    rating: Decimal
    total_trips: int
    tier: RecommendationTier
    empty_return_id: str | None = None
