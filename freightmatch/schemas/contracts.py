"""Selection and contract schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from freightmatch.models.enums import ContractStatus, SelectionKind
from freightmatch.schemas.requests import RequestResponse


class ChooseTransporterRequest(BaseModel):
    transporter_id: str = Field(min_length=1, max_length=36)
    client_id: str | None = Field(default=None, max_length=36)


class ManualAssignmentRequest(BaseModel):
    transporter_id: str = Field(min_length=1, max_length=36)
    transporter_amount: Decimal
    platform_fee: Decimal
    actor_id: str | None = Field(default=None, max_length=36)


class AcceptOfferRequest(BaseModel):
    client_id: str | None = Field(default=None, max_length=36)


class ContractResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    request_id: str | None = None
    reference_id: str
    offer_id: str | None = None
    client_id: str
    transporter_id: str
    amount: Decimal
    status: ContractStatus
    created_at: datetime | None = None


class AssignmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    request: RequestResponse
    contract: ContractResponse
    selection: SelectionKind
