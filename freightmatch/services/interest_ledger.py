"""Interest, decline and offer ledger for transport requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from freightmatch.core.exceptions import ConflictError, NotFoundError, PreconditionFailed, ValidationError
from freightmatch.models import (
    LoadType,
    Offer,
    OfferStatus,
    RequestDecline,
    RequestStatus,
    Transporter,
    TransporterInterest,
)
from freightmatch.services.base_service import BaseService
from freightmatch.services.pricing import pricing_engine, to_money
from freightmatch.services.settings_service import SettingsService
from freightmatch.utils.dates import to_utc, utcnow

logger = logging.getLogger(__name__)

BIDDING_STATUSES = frozenset({RequestStatus.OPEN, RequestStatus.PUBLISHED_FOR_MATCHING})


@dataclass(frozen=True)
class OfferView:
    """Offer as listed to a viewer; ``client_amount`` is only set for clients."""

    id: str
    request_id: str
    transporter_id: str
    amount: Decimal
    client_amount: Decimal | None
    pickup_date: datetime
    load_type: LoadType
    status: OfferStatus
    created_at: datetime


class InterestOfferLedger(BaseService):
    """Per-(request, transporter) rows for interest, declines and bids."""

    def get_eligible_transporter(self, transporter_id: str) -> Transporter:
        transporter = self.db.get(Transporter, transporter_id)
        if transporter is None:
            raise NotFoundError(f"Transporter not found: {transporter_id}")
        if not transporter.is_eligible:
            raise PreconditionFailed(f"Transporter {transporter_id} is not validated or is blocked.")
        return transporter

    def _find_interest(self, request_id: str, transporter_id: str) -> TransporterInterest | None:
        return self.db.scalar(
            select(TransporterInterest).where(
                TransporterInterest.request_id == request_id,
                TransporterInterest.transporter_id == transporter_id,
            )
        )

    def _has_declined(self, request_id: str, transporter_id: str) -> bool:
        row = self.db.scalar(
            select(RequestDecline.id).where(
                RequestDecline.request_id == request_id,
                RequestDecline.transporter_id == transporter_id,
            )
        )
        return row is not None

    def express_interest(
        self,
        request_id: str,
        transporter_id: str,
        availability_date: datetime | None = None,
    ) -> TransporterInterest:
        request = self.get_request(request_id)
        if request.status != RequestStatus.PUBLISHED_FOR_MATCHING or request.is_hidden:
            raise PreconditionFailed(f"Request {request.reference_id} is not open for interest.")
        transporter = self.get_eligible_transporter(transporter_id)
        if self._has_declined(request_id, transporter_id):
            raise PreconditionFailed(f"Transporter {transporter_id} declined request {request.reference_id}.")

        availability = to_utc(availability_date)
        interest = self._find_interest(request_id, transporter_id)
        created = interest is None
        if created:
            interest = TransporterInterest(
                request_id=request_id,
                transporter_id=transporter_id,
                availability_date=availability,
            )
            self.db.add(interest)
            self.record_event(request, "transporter.interest_expressed", actor_id=transporter_id)
        elif availability is not None:
            interest.availability_date = availability
        transporter.last_active_at = utcnow()

        try:
            self.commit()
        except IntegrityError:
            # A concurrent call inserted the same pair first; update that row instead.
            interest = self._find_interest(request_id, transporter_id)
            if interest is None:
                raise
            if availability is not None:
                interest.availability_date = availability
                self.commit()
            created = False
        self.db.expire(request, ["interests"])

        logger.info(
            "ledger.interest_expressed",
            extra={
                "event": "ledger.interest_expressed",
                "request_id": request_id,
                "transporter_id": transporter_id,
                "created": created,
            },
        )
        return interest

    def withdraw_interest(self, request_id: str, transporter_id: str) -> bool:
        """Remove the transporter's interest; returns False when there was none."""
        request = self.get_request(request_id)
        if request.status not in BIDDING_STATUSES:
            raise PreconditionFailed(f"Request {request.reference_id} no longer accepts interest changes.")
        result = self.db.execute(
            delete(TransporterInterest).where(
                TransporterInterest.request_id == request_id,
                TransporterInterest.transporter_id == transporter_id,
            )
        )
        removed = result.rowcount > 0
        if removed:
            self.record_event(request, "transporter.interest_withdrawn", actor_id=transporter_id)
        self.commit()
        self.db.expire(request, ["interests"])
        logger.info(
            "ledger.interest_withdrawn",
            extra={
                "event": "ledger.interest_withdrawn",
                "request_id": request_id,
                "transporter_id": transporter_id,
                "removed": removed,
            },
        )
        return removed

    def decline_request(self, request_id: str, transporter_id: str) -> RequestDecline:
        request = self.get_request(request_id)
        if request.status not in BIDDING_STATUSES:
            raise PreconditionFailed(f"Request {request.reference_id} cannot be declined in status {request.status.value}.")

        decline = self.db.scalar(
            select(RequestDecline).where(
                RequestDecline.request_id == request_id,
                RequestDecline.transporter_id == transporter_id,
            )
        )
        if decline is None:
            decline = RequestDecline(request_id=request_id, transporter_id=transporter_id)
            self.db.add(decline)
            self.record_event(request, "transporter.declined", actor_id=transporter_id)
        self.db.execute(
            delete(TransporterInterest).where(
                TransporterInterest.request_id == request_id,
                TransporterInterest.transporter_id == transporter_id,
            )
        )
        try:
            self.commit()
        except IntegrityError:
            decline = self.db.scalar(
                select(RequestDecline).where(
                    RequestDecline.request_id == request_id,
                    RequestDecline.transporter_id == transporter_id,
                )
            )
            if decline is None:
                raise
        self.db.expire(request, ["interests", "declines"])
        logger.info(
            "ledger.request_declined",
            extra={"event": "ledger.request_declined", "request_id": request_id, "transporter_id": transporter_id},
        )
        return decline

    def submit_offer(
        self,
        request_id: str,
        transporter_id: str,
        amount: object,
        pickup_date: datetime,
        load_type: LoadType | str,
    ) -> Offer:
        request = self.get_request(request_id)
        if request.status not in BIDDING_STATUSES or request.is_hidden:
            raise PreconditionFailed(f"Request {request.reference_id} does not accept offers.")
        self.get_eligible_transporter(transporter_id)
        if self._has_declined(request_id, transporter_id):
            raise PreconditionFailed(f"Transporter {transporter_id} declined request {request.reference_id}.")

        value = to_money(amount, "amount")
        if value <= 0:
            raise ValidationError("Offer amount must be greater than 0.")
        if pickup_date is None:
            raise ValidationError("pickup_date is required.")
        try:
            load = LoadType(load_type)
        except ValueError as exc:
            raise ValidationError(f"Unknown load type: {load_type}") from exc

        existing = self.db.scalar(
            select(Offer.id).where(Offer.request_id == request_id, Offer.transporter_id == transporter_id)
        )
        if existing is not None:
            raise ConflictError("An offer from this transporter already exists for this request.")

        offer = Offer(
            request_id=request_id,
            transporter_id=transporter_id,
            amount=value,
            pickup_date=to_utc(pickup_date),
            load_type=load,
            status=OfferStatus.PENDING,
        )
        self.db.add(offer)
        self.db.flush()
        self.record_event(
            request,
            "offer.submitted",
            actor_id=transporter_id,
            client_id=request.client_id,
            offer_id=offer.id,
            amount=str(value),
        )
        try:
            self.commit()
        except IntegrityError as exc:
            raise ConflictError("An offer from this transporter already exists for this request.") from exc

        logger.info(
            "ledger.offer_submitted",
            extra={"event": "ledger.offer_submitted", "request_id": request_id, "transporter_id": transporter_id},
        )
        return offer

    def list_offers(self, request_id: str, viewer: str = "transporter") -> list[OfferView]:
        """List offers; the client view adds the commission-inclusive amount."""
        self.get_request(request_id)
        offers = self.db.scalars(
            select(Offer).where(Offer.request_id == request_id).order_by(Offer.created_at, Offer.id)
        ).all()
        percentage = SettingsService(self.db).get_commission_percentage() if viewer == "client" else None
        return [
            OfferView(
                id=offer.id,
                request_id=offer.request_id,
                transporter_id=offer.transporter_id,
                amount=offer.amount,
                client_amount=(
                    pricing_engine.client_offer_amount(offer.amount, percentage) if percentage is not None else None
                ),
                pickup_date=offer.pickup_date,
                load_type=offer.load_type,
                status=offer.status,
                created_at=offer.created_at,
            )
            for offer in offers
        ]
