"""Empty return schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from freightmatch.models.enums import EmptyReturnStatus


class EmptyReturnCreateRequest(BaseModel):
    transporter_id: str = Field(min_length=1, max_length=36)
    from_city: str = Field(min_length=1, max_length=120)
    to_city: str = Field(min_length=1, max_length=120)
    return_date: datetime


class EmptyReturnAssignRequest(BaseModel):
    request_id: str = Field(min_length=1, max_length=36)
    transporter_amount: Decimal
    platform_fee: Decimal
    actor_id: str | None = Field(default=None, max_length=36)


class EmptyReturnResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    transporter_id: str
    from_city: str
    to_city: str
    return_date: datetime
    status: EmptyReturnStatus
    assigned_request_id: str | None = None
