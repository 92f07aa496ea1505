"""Pydantic schema package for API contracts."""

from freightmatch.schemas.admin import (
    CommissionOverviewResponse,
    CommissionUpdateRequest,
    PlatformStatsResponse,
    SettingsResponse,
)
from freightmatch.schemas.common import ActorRequest, ErrorEnvelope
from freightmatch.schemas.contracts import (
    AcceptOfferRequest,
    AssignmentResponse,
    ChooseTransporterRequest,
    ContractResponse,
    ManualAssignmentRequest,
)
from freightmatch.schemas.empty_returns import (
    EmptyReturnAssignRequest,
    EmptyReturnCreateRequest,
    EmptyReturnResponse,
)
from freightmatch.schemas.offers import (
    DeclineResponse,
    ExpressInterestRequest,
    InterestResponse,
    OfferCreateRequest,
    OfferResponse,
    TransporterActionRequest,
)
from freightmatch.schemas.payments import AdminPaymentActionRequest, MarkAsPaidRequest, MarkForBillingRequest
from freightmatch.schemas.requests import (
    ArchiveRequest,
    CancelRequest,
    CompleteRequest,
    HideRequest,
    QualifyRequest,
    RequestCreateRequest,
    RequestDetails,
    RequestEditRequest,
    RequestResponse,
)
from freightmatch.schemas.transporters import (
    RecommendationResponse,
    TransporterRegisterRequest,
    TransporterResponse,
)

__all__ = [
    "AcceptOfferRequest",
    "ActorRequest",
    "AdminPaymentActionRequest",
    "ArchiveRequest",
    "AssignmentResponse",
    "CancelRequest",
    "ChooseTransporterRequest",
    "CommissionOverviewResponse",
    "CommissionUpdateRequest",
    "CompleteRequest",
    "ContractResponse",
    "DeclineResponse",
    "EmptyReturnAssignRequest",
    "EmptyReturnCreateRequest",
    "EmptyReturnResponse",
    "ErrorEnvelope",
    "ExpressInterestRequest",
    "HideRequest",
    "InterestResponse",
    "ManualAssignmentRequest",
    "MarkAsPaidRequest",
    "MarkForBillingRequest",
    "OfferCreateRequest",
    "OfferResponse",
    "PlatformStatsResponse",
    "QualifyRequest",
    "RecommendationResponse",
    "RequestCreateRequest",
    "RequestDetails",
    "RequestEditRequest",
    "RequestResponse",
    "SettingsResponse",
    "TransporterActionRequest",
    "TransporterRegisterRequest",
    "TransporterResponse",
]
