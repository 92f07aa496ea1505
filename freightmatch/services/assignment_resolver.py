"""Exactly-one-winner selection of a transporter for a request.

Every selection path funnels into a single conditional UPDATE guarded on the
request status. The first writer flips the request to ``accepted``; any later
writer matches no row and is told the request is already assigned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select, update

from freightmatch.core.exceptions import AlreadyAssigned, NotFoundError, PreconditionFailed
from freightmatch.models import (
    Contract,
    ContractStatus,
    Offer,
    OfferStatus,
    PaymentStatus,
    RequestStatus,
    SelectionKind,
    TransportRequest,
    TransporterInterest,
)
from freightmatch.orchestration.state_machine import MATCHED_STATUSES, request_state_machine
from freightmatch.services.base_service import BaseService
from freightmatch.services.interest_ledger import InterestOfferLedger
from freightmatch.services.pricing import pricing_engine, to_money
from freightmatch.services.settings_service import SettingsService
from freightmatch.utils.dates import utcnow

logger = logging.getLogger(__name__)

CLIENT_CHOICE_SOURCES = frozenset({RequestStatus.PUBLISHED_FOR_MATCHING})
MANUAL_SOURCES = frozenset({RequestStatus.OPEN, RequestStatus.PUBLISHED_FOR_MATCHING})
OFFER_SOURCES = frozenset({RequestStatus.OPEN, RequestStatus.PUBLISHED_FOR_MATCHING})

assert all(request_state_machine.can_transition(s, RequestStatus.ACCEPTED) for s in MANUAL_SOURCES | OFFER_SOURCES)


@dataclass(frozen=True)
class AssignmentResult:
    request: TransportRequest
    contract: Contract
    selection: SelectionKind


class AssignmentResolver(BaseService):
    """Commits a single winning transporter and creates its contract."""

    def _claim(self, request_id: str, sources: frozenset[RequestStatus], **values: Any) -> TransportRequest:
        now = utcnow()
        result = self.db.execute(
            update(TransportRequest)
            .where(TransportRequest.id == request_id, TransportRequest.status.in_(list(sources)))
            .values(
                status=RequestStatus.ACCEPTED,
                payment_status=PaymentStatus.PENDING,
                assigned_at=now,
                updated_at=now,
                version=TransportRequest.version + 1,
                **values,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self._raise_claim_failure(request_id)
        request = self.db.get(TransportRequest, request_id, populate_existing=True)
        self.db.expire(request, ["accepted_offer"])
        return request

    def _raise_claim_failure(self, request_id: str) -> None:
        current = self.db.get(TransportRequest, request_id, populate_existing=True)
        if current is None:
            self.rollback()
            raise NotFoundError(f"Request not found: {request_id}")
        status, reference_id = current.status, current.reference_id
        self.rollback()
        if status in MATCHED_STATUSES:
            logger.info(
                "assignment.lost_race",
                extra={"event": "assignment.lost_race", "request_id": request_id, "reference_id": reference_id},
            )
            raise AlreadyAssigned(
                f"Request {reference_id} is already assigned to another transporter.",
                request_id=request_id,
            )
        raise PreconditionFailed(f"Request {reference_id} cannot be assigned in status {status.value}.")

    def _create_contract(
        self,
        request: TransportRequest,
        transporter_id: str,
        amount: Decimal,
        offer_id: str | None = None,
    ) -> Contract:
        contract = Contract(
            request_id=request.id,
            reference_id=request.reference_id,
            offer_id=offer_id,
            client_id=request.client_id,
            transporter_id=transporter_id,
            amount=amount,
            status=ContractStatus.IN_PROGRESS,
        )
        self.db.add(contract)
        self.db.flush()
        return contract

    def _finish(
        self,
        request: TransportRequest,
        contract: Contract,
        selection: SelectionKind,
        actor_id: str | None,
    ) -> AssignmentResult:
        self.record_event(
            request,
            "request.transporter_assigned",
            actor_id=actor_id,
            client_id=request.client_id,
            transporter_id=contract.transporter_id,
            contract_id=contract.id,
            selection=selection.value,
        )
        self.commit()
        logger.info(
            "assignment.committed",
            extra={
                "event": "assignment.committed",
                "request_id": request.id,
                "reference_id": request.reference_id,
                "transporter_id": contract.transporter_id,
                "selection": selection.value,
            },
        )
        return AssignmentResult(request=request, contract=contract, selection=selection)

    def choose_transporter(self, request_id: str, transporter_id: str, client_id: str | None = None) -> AssignmentResult:
        """Client picks one transporter out of the interest pool."""
        request = self.get_request(request_id)
        if client_id is not None and request.client_id != client_id:
            raise PreconditionFailed("Only the request owner can choose a transporter.")
        in_pool = self.db.scalar(
            select(TransporterInterest.id).where(
                TransporterInterest.request_id == request_id,
                TransporterInterest.transporter_id == transporter_id,
            )
        )
        if in_pool is None:
            if request.status in MATCHED_STATUSES:
                raise AlreadyAssigned(f"Request {request.reference_id} is already assigned.", request_id=request_id)
            raise PreconditionFailed(f"Transporter {transporter_id} has not expressed interest in this request.")
        InterestOfferLedger(self.db).get_eligible_transporter(transporter_id)

        request = self._claim(
            request_id,
            CLIENT_CHOICE_SOURCES,
            assigned_transporter_id=transporter_id,
            accepted_offer_id=None,
            assigned_by_id=client_id or request.client_id,
            assigned_manually=False,
        )
        if request.transporter_amount is None:
            self.rollback()
            raise PreconditionFailed(f"Request {request.reference_id} has no qualified price.")
        contract = self._create_contract(request, transporter_id, request.transporter_amount)
        return self._finish(request, contract, SelectionKind.CLIENT_CHOICE, client_id or request.client_id)

    def assign_transporter_manually(
        self,
        request_id: str,
        transporter_id: str,
        transporter_amount: object,
        platform_fee: object,
        actor_id: str | None = None,
    ) -> AssignmentResult:
        """Coordinator assigns a transporter directly, pricing the request at the same time."""
        client_total = pricing_engine.calculate_client_total(transporter_amount, platform_fee)
        amount = to_money(transporter_amount, "transporter_amount")
        fee = to_money(platform_fee, "platform_fee")
        self.get_request(request_id)
        InterestOfferLedger(self.db).get_eligible_transporter(transporter_id)

        request = self._claim(
            request_id,
            MANUAL_SOURCES,
            assigned_transporter_id=transporter_id,
            accepted_offer_id=None,
            assigned_by_id=actor_id,
            assigned_manually=True,
            transporter_amount=amount,
            platform_fee=fee,
            client_total=client_total,
            priced_from_offer=False,
            qualified_at=func.coalesce(TransportRequest.qualified_at, utcnow()),
        )
        contract = self._create_contract(request, transporter_id, amount)
        return self._finish(request, contract, SelectionKind.MANUAL, actor_id)

    def accept_offer(
        self,
        offer_id: str,
        client_id: str | None = None,
        request_id: str | None = None,
    ) -> AssignmentResult:
        """Accept a legacy price offer; sibling offers are left pending.

        The request is the offer's own. Pricing is taken from the offer unless a
        coordinator priced the request explicitly.
        """
        offer = self.db.get(Offer, offer_id)
        if offer is None or (request_id is not None and offer.request_id != request_id):
            raise NotFoundError(f"Offer not found: {offer_id}")
        request = self.get_request(offer.request_id)
        if client_id is not None and request.client_id != client_id:
            raise PreconditionFailed("Only the request owner can accept an offer.")

        pricing: dict[str, Any] = {}
        if request.transporter_amount is None or request.priced_from_offer:
            percentage = SettingsService(self.db).get_commission_percentage()
            fee = pricing_engine.commission_amount(offer.amount, percentage)
            pricing = {
                "transporter_amount": offer.amount,
                "platform_fee": fee,
                "client_total": pricing_engine.calculate_client_total(offer.amount, fee),
                "priced_from_offer": True,
                "qualified_at": func.coalesce(TransportRequest.qualified_at, utcnow()),
            }

        request = self._claim(
            request.id,
            OFFER_SOURCES,
            accepted_offer_id=offer.id,
            assigned_transporter_id=None,
            assigned_by_id=client_id or request.client_id,
            assigned_manually=False,
            **pricing,
        )
        flipped = self.db.execute(
            update(Offer)
            .where(Offer.id == offer.id, Offer.status == OfferStatus.PENDING)
            .values(status=OfferStatus.ACCEPTED, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if flipped.rowcount != 1:
            self.rollback()
            raise PreconditionFailed(f"Offer {offer_id} is no longer pending.")
        self.db.refresh(offer)

        contract = self._create_contract(request, offer.transporter_id, offer.amount, offer_id=offer.id)
        return self._finish(request, contract, SelectionKind.OFFER, client_id or request.client_id)
