"""Canonical enum values for the freight marketplace schema."""

from __future__ import annotations

import enum


class RequestStatus(str, enum.Enum):
    OPEN = "open"
    PUBLISHED_FOR_MATCHING = "published_for_matching"
    ACCEPTED = "accepted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    ARCHIVED = "archived"


class PaymentStatus(str, enum.Enum):
    NOT_REQUIRED = "not_required"
    PENDING = "pending"
    AWAITING_PAYMENT = "awaiting_payment"
    PENDING_ADMIN_VALIDATION = "pending_admin_validation"
    PAID = "paid"


class ArchiveReason(str, enum.Enum):
    """Fixed archive reason codes used by coordinators."""

    CLIENT_INJOIGNABLE = "client_injoignable"
    TRAITE_AILLEURS = "traite_ailleurs"
    BUDGET_INSUFFISANT = "budget_insuffisant"
    INFOS_INCOMPLETES = "infos_incompletes"
    NON_PRIORITAIRE = "non_prioritaire"
    NON_REALISABLE = "non_realisable"
    CLIENT_ANNULE = "client_annule"
    AUCUNE_OFFRE = "aucune_offre"
    PRIX_REFUSE = "prix_refuse"
    INJOIGNABLE_LONG_TERME = "injoignable_long_terme"
    A_REPRENDRE_PLUS_TARD = "a_reprendre_plus_tard"
    OFFRE_EXPIREE = "offre_expiree"


class OfferStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COMPLETED = "completed"


class LoadType(str, enum.Enum):
    RETURN = "return"
    SHARED = "shared"


class ContractStatus(str, enum.Enum):
    IN_PROGRESS = "in_progress"
    MARKED_PAID_TRANSPORTER = "marked_paid_transporter"
    MARKED_PAID_CLIENT = "marked_paid_client"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class EmptyReturnStatus(str, enum.Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    ASSIGNED = "assigned"


class TransporterStatus(str, enum.Enum):
    PENDING = "pending"
    VALIDATED = "validated"


class AccountStatus(str, enum.Enum):
    ACTIVE = "active"
    BLOCKED = "blocked"


class RecommendationTier(str, enum.Enum):
    EMPTY_RETURN = "empty_return"
    ACTIVE = "active"
    RATING = "rating"


class SelectionKind(str, enum.Enum):
    CLIENT_CHOICE = "client_choice"
    MANUAL = "manual"
    OFFER = "offer"
