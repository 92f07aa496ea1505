"""SQLAlchemy model package for the marketplace schema."""

from freightmatch.models.base import Base
from freightmatch.models.contract import Contract
from freightmatch.models.empty_return import EmptyReturn
from freightmatch.models.enums import (
    AccountStatus,
    ArchiveReason,
    ContractStatus,
    EmptyReturnStatus,
    LoadType,
    OfferStatus,
    PaymentStatus,
    RecommendationTier,
    RequestStatus,
    SelectionKind,
    TransporterStatus,
)
from freightmatch.models.interest import RequestDecline, TransporterInterest
from freightmatch.models.notification import Notification
from freightmatch.models.offer import Offer
from freightmatch.models.platform_settings import PlatformSettings
from freightmatch.models.rating import Rating
from freightmatch.models.request_event import RequestEvent
from freightmatch.models.transport_request import TransportRequest
from freightmatch.models.transporter import Transporter

__all__ = [
    "AccountStatus",
    "ArchiveReason",
    "Base",
    "Contract",
    "ContractStatus",
    "EmptyReturn",
    "EmptyReturnStatus",
    "LoadType",
    "Notification",
    "Offer",
    "OfferStatus",
    "PaymentStatus",
    "PlatformSettings",
    "Rating",
    "RecommendationTier",
    "RequestDecline",
    "RequestEvent",
    "RequestStatus",
    "SelectionKind",
    "TransportRequest",
    "Transporter",
    "TransporterInterest",
    "TransporterStatus",
]
