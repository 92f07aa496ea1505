"""Request lifecycle facade.

Owns every request status transition and delegates interest, selection,
payment and ranking work to the dedicated services. Each public method is a
single unit of work: it either commits fully or rolls back and raises.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy import exists, func, select, update
from sqlalchemy.exc import IntegrityError

from freightmatch.core.config import get_config
from freightmatch.core.exceptions import ConflictError, PreconditionFailed, ValidationError
from freightmatch.models import (
    ArchiveReason,
    Contract,
    ContractStatus,
    LoadType,
    OfferStatus,
    PaymentStatus,
    Rating,
    RequestDecline,
    RequestStatus,
    TransportRequest,
    Transporter,
)
from freightmatch.orchestration.state_machine import payment_state_machine, request_state_machine
from freightmatch.schemas.requests import RequestCreateRequest, RequestEditRequest
from freightmatch.services.assignment_resolver import AssignmentResolver, AssignmentResult
from freightmatch.services.base_service import BaseService
from freightmatch.services.interest_ledger import InterestOfferLedger, OfferView
from freightmatch.services.payment_workflow import PaymentValidationWorkflow
from freightmatch.services.pricing import pricing_engine, to_money
from freightmatch.services.recommendation_ranker import RecommendationRanker, RecommendedTransporter
from freightmatch.utils.dates import to_utc, utcnow
from freightmatch.utils.ids import new_reference_id
from freightmatch.utils.validators import validate_payload

logger = logging.getLogger(__name__)

REFERENCE_ATTEMPTS = 5
EDITABLE_STATUSES = frozenset({RequestStatus.OPEN, RequestStatus.PUBLISHED_FOR_MATCHING})
EDITABLE_FIELDS = (
    "from_city",
    "to_city",
    "from_address",
    "to_address",
    "description",
    "goods_type",
    "budget",
    "requested_date",
    "handling_required",
    "departure_floor",
    "departure_elevator",
    "arrival_floor",
    "arrival_elevator",
)


class RequestLifecycleService(BaseService):
    """Service for transport request CRUD and lifecycle transitions."""

    # -- helpers -----------------------------------------------------------

    def _transition(self, request: TransportRequest, target: RequestStatus) -> RequestStatus:
        previous = request.status
        request_state_machine.assert_transition(previous, target)
        request.status = target
        return previous

    def _log_transition(self, event: str, request: TransportRequest, actor_id: str | None, **fields) -> None:
        logger.info(
            event,
            extra={
                "event": event,
                "request_id": request.id,
                "reference_id": request.reference_id,
                "actor_id": actor_id,
                "status": request.status.value,
                **fields,
            },
        )

    def _ensure_owner(self, request: TransportRequest, client_id: str | None) -> None:
        if client_id is not None and request.client_id != client_id:
            raise PreconditionFailed("Only the request owner can perform this action.")

    def _ledger(self) -> InterestOfferLedger:
        return InterestOfferLedger(self.db, dispatcher=self.dispatcher)

    def _resolver(self) -> AssignmentResolver:
        return AssignmentResolver(self.db, dispatcher=self.dispatcher)

    def _payments(self) -> PaymentValidationWorkflow:
        return PaymentValidationWorkflow(self.db, dispatcher=self.dispatcher)

    def _cancel_current_contract(self, request: TransportRequest) -> str | None:
        contract = self._payments().current_contract(request)
        if contract is None or contract.status == ContractStatus.COMPLETED:
            return None
        contract.status = ContractStatus.CANCELLED
        return contract.id

    # -- creation and editing ---------------------------------------------

    def create_request(self, data: RequestCreateRequest | dict) -> TransportRequest:
        payload = validate_payload(RequestCreateRequest, data)
        fields = payload.model_dump(include=set(EDITABLE_FIELDS))
        fields["requested_date"] = to_utc(fields["requested_date"])

        for _ in range(REFERENCE_ATTEMPTS):
            request = TransportRequest(
                reference_id=new_reference_id(),
                client_id=payload.client_id,
                status=RequestStatus.OPEN,
                payment_status=PaymentStatus.NOT_REQUIRED,
                **fields,
            )
            self.db.add(request)
            try:
                self.db.flush()
            except IntegrityError:
                self.rollback()
                continue
            self.record_event(request, "request.created", actor_id=payload.client_id)
            self.commit()
            self._log_transition("request.created", request, payload.client_id)
            return request
        raise ConflictError("Could not allocate a unique reference id.")

    def edit_request(
        self,
        request_id: str,
        data: RequestEditRequest | dict,
        client_id: str | None = None,
    ) -> TransportRequest:
        payload = validate_payload(RequestEditRequest, data)
        request = self.get_request(request_id)
        self._ensure_owner(request, client_id or payload.client_id)
        if request.status not in EDITABLE_STATUSES:
            raise PreconditionFailed(f"Request {request.reference_id} can no longer be edited.")

        for name, value in payload.model_dump(include=set(EDITABLE_FIELDS)).items():
            setattr(request, name, to_utc(value) if name == "requested_date" else value)
        self.record_event(request, "request.edited", actor_id=client_id or payload.client_id)
        self.commit()
        self._log_transition("request.edited", request, client_id)
        return request

    def list_requests(
        self,
        client_id: str | None = None,
        status: RequestStatus | None = None,
        transporter_id: str | None = None,
        include_hidden: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> list[TransportRequest]:
        """List requests by client, by status, or open for a given transporter."""
        stmt = select(TransportRequest)
        if client_id is not None:
            stmt = stmt.where(TransportRequest.client_id == client_id)
        if status is not None:
            stmt = stmt.where(TransportRequest.status == status)
        if transporter_id is not None:
            stmt = stmt.where(
                TransportRequest.status == RequestStatus.PUBLISHED_FOR_MATCHING,
                ~exists().where(
                    RequestDecline.request_id == TransportRequest.id,
                    RequestDecline.transporter_id == transporter_id,
                ),
            )
        if not include_hidden:
            stmt = stmt.where(TransportRequest.is_hidden.is_(False))
        stmt = stmt.order_by(TransportRequest.created_at.desc(), TransportRequest.id).limit(limit).offset(offset)
        return list(self.db.scalars(stmt).all())

    # -- coordinator lifecycle --------------------------------------------

    def qualify_request(
        self,
        request_id: str,
        transporter_amount: object,
        platform_fee: object,
        actor_id: str | None = None,
    ) -> TransportRequest:
        """Price the request; the first qualification triggers recommendations."""
        client_total = pricing_engine.calculate_client_total(transporter_amount, platform_fee)
        request = self.get_request(request_id)
        if request.status not in EDITABLE_STATUSES:
            raise PreconditionFailed(
                f"Request {request.reference_id} cannot be qualified in status {request.status.value}."
            )

        first_qualification = request.qualified_at is None
        request.transporter_amount = to_money(transporter_amount, "transporter_amount")
        request.platform_fee = to_money(platform_fee, "platform_fee")
        request.client_total = client_total
        request.priced_from_offer = False
        if first_qualification:
            request.qualified_at = utcnow()
        self.record_event(
            request,
            "request.qualified",
            actor_id=actor_id,
            first_qualification=first_qualification,
            client_total=str(client_total),
        )
        self.commit()
        self._log_transition(
            "request.qualified", request, actor_id, first_qualification=first_qualification
        )
        return request

    def publish_for_matching(self, request_id: str, actor_id: str | None = None) -> TransportRequest:
        request = self.get_request(request_id)
        if not request.is_qualified:
            raise PreconditionFailed(f"Request {request.reference_id} must be qualified before publishing.")
        if request.status != RequestStatus.OPEN:
            raise PreconditionFailed(
                f"Request {request.reference_id} cannot be published from status {request.status.value}."
            )
        self._transition(request, RequestStatus.PUBLISHED_FOR_MATCHING)
        request.published_for_matching_at = utcnow()
        self.record_event(request, "request.published", actor_id=actor_id)
        self.commit()
        self._log_transition("request.published", request, actor_id)
        return request

    def archive_request(self, request_id: str, reason: str, actor_id: str | None = None) -> TransportRequest:
        try:
            archive_reason = ArchiveReason(reason)
        except ValueError as exc:
            raise ValidationError(f"Unknown archive reason: {reason}") from exc
        request = self.get_request(request_id)
        self._transition(request, RequestStatus.ARCHIVED)
        request.archive_reason = archive_reason
        self.record_event(request, "request.archived", actor_id=actor_id, reason=archive_reason.value)
        self.commit()
        self._log_transition("request.archived", request, actor_id, reason=archive_reason.value)
        return request

    def cancel_request(
        self,
        request_id: str,
        actor_id: str | None = None,
        reason: str | None = None,
    ) -> TransportRequest:
        request = self.get_request(request_id)
        self._transition(request, RequestStatus.CANCELLED)
        # Nothing is owed on a job that never ran.
        request.payment_status = PaymentStatus.NOT_REQUIRED
        cancelled_contract_id = self._cancel_current_contract(request)
        self.record_event(
            request,
            "request.cancelled",
            actor_id=actor_id,
            client_id=request.client_id,
            transporter_id=request.committed_transporter_id,
            reason=reason,
            contract_id=cancelled_contract_id,
        )
        self.commit()
        self._log_transition("request.cancelled", request, actor_id)
        return request

    def expire_stale_requests(self, now: datetime | None = None) -> int:
        """Expire published requests left unmatched beyond the expiry window."""
        current = to_utc(now) or utcnow()
        cutoff = current - timedelta(days=get_config().REQUEST_EXPIRY_DAYS)
        result = self.db.execute(
            update(TransportRequest)
            .where(
                TransportRequest.status == RequestStatus.PUBLISHED_FOR_MATCHING,
                TransportRequest.published_for_matching_at < cutoff,
            )
            .values(status=RequestStatus.EXPIRED, updated_at=current, version=TransportRequest.version + 1)
            .execution_options(synchronize_session=False)
        )
        self.commit()
        expired = result.rowcount or 0
        logger.info("request.expired", extra={"event": "request.expired", "count": expired})
        return expired

    def toggle_hide(self, request_id: str, is_hidden: bool, actor_id: str | None = None) -> TransportRequest:
        request = self.get_request(request_id)
        request.is_hidden = bool(is_hidden)
        self.record_event(request, "request.visibility_changed", actor_id=actor_id, is_hidden=request.is_hidden)
        self.commit()
        self._log_transition("request.visibility_changed", request, actor_id, is_hidden=request.is_hidden)
        return request

    def delete_request(self, request_id: str, actor_id: str | None = None) -> None:
        """Hard-delete a request; its contracts and ratings are kept, detached."""
        request = self.get_request(request_id)
        reference_id = request.reference_id
        self.db.execute(
            update(Contract)
            .where(Contract.request_id == request_id)
            .values(request_id=None, offer_id=None, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        self.db.execute(
            update(Rating)
            .where(Rating.request_id == request_id)
            .values(request_id=None)
            .execution_options(synchronize_session=False)
        )
        self.db.delete(request)
        self.commit()
        logger.info(
            "request.deleted",
            extra={"event": "request.deleted", "request_id": request_id, "reference_id": reference_id, "actor_id": actor_id},
        )

    # -- execution ---------------------------------------------------------

    def start_transit(self, request_id: str, transporter_id: str | None = None) -> TransportRequest:
        request = self.get_request(request_id)
        if transporter_id is not None and request.committed_transporter_id != transporter_id:
            raise PreconditionFailed("Only the assigned transporter can start the transport.")
        self._transition(request, RequestStatus.IN_PROGRESS)
        self.record_event(request, "request.in_transit", actor_id=transporter_id, client_id=request.client_id)
        self.commit()
        self._log_transition("request.in_transit", request, transporter_id)
        return request

    def complete_request(
        self,
        request_id: str,
        client_id: str | None = None,
        rating: int | None = None,
        comment: str | None = None,
    ) -> TransportRequest:
        """Close the job, request payment and optionally rate the transporter."""
        if rating is not None and (isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5):
            raise ValidationError("rating must be an integer between 1 and 5.")
        request = self.get_request(request_id)
        self._ensure_owner(request, client_id)
        transporter_id = request.committed_transporter_id
        self._transition(request, RequestStatus.COMPLETED)
        request.completed_at = utcnow()
        if request.payment_status == PaymentStatus.PENDING:
            payment_state_machine.assert_transition(request.payment_status, PaymentStatus.AWAITING_PAYMENT)
            request.payment_status = PaymentStatus.AWAITING_PAYMENT
        if request.accepted_offer is not None:
            request.accepted_offer.status = OfferStatus.COMPLETED

        if transporter_id is not None:
            values: dict = {"total_trips": Transporter.total_trips + 1}
            if rating is not None:
                self._store_rating(request, transporter_id, rating, comment)
                values["rating"] = func.round(
                    (Transporter.rating * Transporter.total_ratings + rating) / (Transporter.total_ratings + 1.0),
                    2,
                )
                values["total_ratings"] = Transporter.total_ratings + 1
            self.db.execute(
                update(Transporter)
                .where(Transporter.id == transporter_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )

        self.record_event(
            request,
            "request.completed",
            actor_id=client_id or request.client_id,
            transporter_id=transporter_id,
            rating=rating,
        )
        try:
            self.commit()
        except IntegrityError as exc:
            raise ConflictError("This contract has already been rated.") from exc
        self._log_transition("request.completed", request, client_id, transporter_id=transporter_id)
        return request

    def _store_rating(self, request: TransportRequest, transporter_id: str, score: int, comment: str | None) -> None:
        contract = self._payments().current_contract(request)
        if contract is None:
            raise PreconditionFailed(f"Request {request.reference_id} has no contract to rate.")
        already = self.db.scalar(select(Rating.id).where(Rating.contract_id == contract.id))
        if already is not None:
            raise ConflictError("This contract has already been rated.")
        self.db.add(
            Rating(
                contract_id=contract.id,
                request_id=request.id,
                transporter_id=transporter_id,
                client_id=request.client_id,
                score=score,
                comment=comment,
            )
        )

    def republish_request(self, request_id: str, actor_id: str | None = None) -> TransportRequest:
        """Put a matched request back on the market."""
        request = self.get_request(request_id)
        if request.payment_status == PaymentStatus.PAID:
            raise PreconditionFailed(f"Request {request.reference_id} is paid and cannot be republished.")
        previous_offer = request.accepted_offer
        self._transition(request, RequestStatus.PUBLISHED_FOR_MATCHING)
        superseded_contract_id = self._cancel_current_contract(request)
        if previous_offer is not None:
            previous_offer.status = OfferStatus.REJECTED
        request.assigned_transporter_id = None
        request.accepted_offer_id = None
        request.assigned_by_id = None
        request.assigned_manually = False
        request.assigned_at = None
        request.completed_at = None
        request.payment_status = PaymentStatus.NOT_REQUIRED
        request.payment_receipt = None
        request.published_for_matching_at = utcnow()
        self.record_event(request, "request.republished", actor_id=actor_id, contract_id=superseded_contract_id)
        self.commit()
        self.db.expire(request, ["accepted_offer"])
        self._log_transition("request.republished", request, actor_id)
        return request

    # -- delegated operations ---------------------------------------------

    def express_interest(self, request_id: str, transporter_id: str, availability_date: datetime | None = None):
        return self._ledger().express_interest(request_id, transporter_id, availability_date)

    def withdraw_interest(self, request_id: str, transporter_id: str) -> bool:
        return self._ledger().withdraw_interest(request_id, transporter_id)

    def decline_request(self, request_id: str, transporter_id: str):
        return self._ledger().decline_request(request_id, transporter_id)

    def submit_offer(
        self,
        request_id: str,
        transporter_id: str,
        amount: object,
        pickup_date: datetime,
        load_type: LoadType | str,
    ):
        return self._ledger().submit_offer(request_id, transporter_id, amount, pickup_date, load_type)

    def list_offers(self, request_id: str, viewer: str = "transporter") -> list[OfferView]:
        return self._ledger().list_offers(request_id, viewer=viewer)

    def choose_transporter(self, request_id: str, transporter_id: str, client_id: str | None = None) -> AssignmentResult:
        return self._resolver().choose_transporter(request_id, transporter_id, client_id=client_id)

    def assign_transporter_manually(
        self,
        request_id: str,
        transporter_id: str,
        transporter_amount: object,
        platform_fee: object,
        actor_id: str | None = None,
    ) -> AssignmentResult:
        return self._resolver().assign_transporter_manually(
            request_id, transporter_id, transporter_amount, platform_fee, actor_id=actor_id
        )

    def accept_offer(
        self,
        offer_id: str,
        client_id: str | None = None,
        request_id: str | None = None,
    ) -> AssignmentResult:
        return self._resolver().accept_offer(offer_id, client_id=client_id, request_id=request_id)

    def mark_for_billing(self, request_id: str, transporter_id: str) -> TransportRequest:
        return self._payments().mark_for_billing(request_id, transporter_id)

    def mark_as_paid(self, request_id: str, receipt: str | None, client_id: str | None = None) -> TransportRequest:
        return self._payments().mark_as_paid(request_id, receipt, client_id=client_id)

    def admin_reject_receipt(self, request_id: str, actor_id: str | None = None, reason: str | None = None):
        return self._payments().admin_reject_receipt(request_id, actor_id=actor_id, reason=reason)

    def admin_validate_payment(self, request_id: str, actor_id: str | None = None) -> TransportRequest:
        return self._payments().admin_validate_payment(request_id, actor_id=actor_id)

    def get_recommendations(
        self,
        request_id: str,
        limit: int | None = None,
        now: datetime | None = None,
    ) -> list[RecommendedTransporter]:
        return RecommendationRanker(self.db).get_recommendations(request_id, limit=limit, now=now)
