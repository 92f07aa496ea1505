"""Transport request schemas for service inputs and API contracts."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from freightmatch.models.enums import ArchiveReason, PaymentStatus, RequestStatus

MIN_DESCRIPTION_LENGTH = 10
HANDLING_FIELDS = ("departure_floor", "departure_elevator", "arrival_floor", "arrival_elevator")


class RequestDetails(BaseModel):
    """Client-editable fields of a transport request."""

    from_city: str = Field(min_length=1, max_length=120)
    to_city: str = Field(min_length=1, max_length=120)
    from_address: str | None = Field(default=None, max_length=500)
    to_address: str | None = Field(default=None, max_length=500)
    description: str = Field(max_length=5000)
    goods_type: str = Field(min_length=1, max_length=120)
    budget: Decimal | None = Field(default=None, ge=0)
    requested_date: datetime | None = None
    handling_required: bool = False
    departure_floor: int | None = Field(default=None, ge=0)
    departure_elevator: bool | None = None
    arrival_floor: int | None = Field(default=None, ge=0)
    arrival_elevator: bool | None = None

    @field_validator("from_city", "to_city", "goods_type", "description", mode="before")
    @classmethod
    def _strip(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("description")
    @classmethod
    def _description_long_enough(cls, value: str) -> str:
        if len(value) < MIN_DESCRIPTION_LENGTH:
            raise ValueError(f"description must contain at least {MIN_DESCRIPTION_LENGTH} characters")
        return value

    @model_validator(mode="after")
    def _handling_fields(self) -> "RequestDetails":
        if self.handling_required:
            missing = [name for name in HANDLING_FIELDS if getattr(self, name) is None]
            if missing:
                raise ValueError(f"handling requires {', '.join(missing)}")
        else:
            for name in HANDLING_FIELDS:
                setattr(self, name, None)
        return self


class RequestCreateRequest(RequestDetails):
    client_id: str = Field(min_length=1, max_length=36)


class RequestEditRequest(RequestDetails):
    client_id: str | None = Field(default=None, max_length=36)


class QualifyRequest(BaseModel):
    transporter_amount: Decimal
    platform_fee: Decimal
    actor_id: str | None = Field(default=None, max_length=36)


class ArchiveRequest(BaseModel):
    reason: str = Field(min_length=1, max_length=60)
    actor_id: str | None = Field(default=None, max_length=36)


class CancelRequest(BaseModel):
    actor_id: str | None = Field(default=None, max_length=36)
    reason: str | None = Field(default=None, max_length=1000)


class HideRequest(BaseModel):
    is_hidden: bool
    actor_id: str | None = Field(default=None, max_length=36)


class CompleteRequest(BaseModel):
    client_id: str | None = Field(default=None, max_length=36)
    rating: int | None = Field(default=None, ge=1, le=5)
    comment: str | None = Field(default=None, max_length=2000)


class RequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    reference_id: str
    client_id: str
    from_city: str
    to_city: str
    from_address: str | None = None
    to_address: str | None = None
    description: str
    goods_type: str
    budget: Decimal | None = None
    requested_date: datetime | None = None
    handling_required: bool
    departure_floor: int | None = None
    departure_elevator: bool | None = None
    arrival_floor: int | None = None
    arrival_elevator: bool | None = None
    status: RequestStatus
    payment_status: PaymentStatus
    archive_reason: ArchiveReason | None = None
    qualified_at: datetime | None = None
    published_for_matching_at: datetime | None = None
    transporter_amount: Decimal | None = None
    platform_fee: Decimal | None = None
    client_total: Decimal | None = None
    accepted_offer_id: str | None = None
    assigned_transporter_id: str | None = None
    assigned_manually: bool
    assigned_at: datetime | None = None
    completed_at: datetime | None = None
    payment_receipt: str | None = None
    payment_date: datetime | None = None
    transporter_interests: list[str] = Field(default_factory=list)
    declined_by: list[str] = Field(default_factory=list)
    is_hidden: bool
    version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("transporter_interests", "declined_by", mode="before")
    @classmethod
    def _sorted_ids(cls, value):
        if isinstance(value, (set, frozenset)):
            return sorted(value)
        return value
