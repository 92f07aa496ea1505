"""Admin settings and reporting schemas."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class CommissionUpdateRequest(BaseModel):
    commission_percentage: Decimal = Field(ge=0, le=100)
    actor_id: str | None = Field(default=None, max_length=36)


class SettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    commission_percentage: Decimal


class CommissionOverviewResponse(BaseModel):
    request_id: str
    reference_id: str
    transporter_amount: Decimal | None = None
    platform_fee: Decimal | None = None
    client_total: Decimal | None = None
    commission_percentage: Decimal
    commission_amount: Decimal | None = None


class PlatformStatsResponse(BaseModel):
    requests_by_status: dict[str, int]
    open_requests: int
    completed_requests: int
    awaiting_admin_validation: int
    active_transporters: int
    contracts: int
    paid_volume: Decimal
