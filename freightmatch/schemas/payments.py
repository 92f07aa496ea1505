"""Payment workflow schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field


class MarkForBillingRequest(BaseModel):
    transporter_id: str = Field(min_length=1, max_length=36)


class MarkAsPaidRequest(BaseModel):
    receipt: str | None = Field(default=None, max_length=2000)
    client_id: str | None = Field(default=None, max_length=36)


class AdminPaymentActionRequest(BaseModel):
    actor_id: str | None = Field(default=None, max_length=36)
    reason: str | None = Field(default=None, max_length=1000)
