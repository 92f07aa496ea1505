"""Interest, decline and offer schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from freightmatch.models.enums import LoadType, OfferStatus


class ExpressInterestRequest(BaseModel):
    transporter_id: str = Field(min_length=1, max_length=36)
    availability_date: datetime | None = None


class TransporterActionRequest(BaseModel):
    transporter_id: str = Field(min_length=1, max_length=36)


class OfferCreateRequest(BaseModel):
    transporter_id: str = Field(min_length=1, max_length=36)
    amount: Decimal
    pickup_date: datetime
    load_type: LoadType


class InterestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    request_id: str
    transporter_id: str
    availability_date: datetime | None = None
    created_at: datetime | None = None


class DeclineResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    request_id: str
    transporter_id: str


class OfferResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    request_id: str
    transporter_id: str
    amount: Decimal
    client_amount: Decimal | None = None
    pickup_date: datetime
    load_type: LoadType
    status: OfferStatus
    created_at: datetime | None = None
