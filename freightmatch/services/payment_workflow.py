"""Manual receipt-upload-and-validate payment loop."""

from __future__ import annotations

import logging

from sqlalchemy import select

from freightmatch.core.exceptions import PreconditionFailed, ReceiptRequired
from freightmatch.models import Contract, ContractStatus, PaymentStatus, TransportRequest
from freightmatch.orchestration.state_machine import MATCHED_STATUSES, payment_state_machine
from freightmatch.services.base_service import BaseService
from freightmatch.utils.dates import utcnow
from freightmatch.utils.validators import sanitize_text

logger = logging.getLogger(__name__)


class PaymentValidationWorkflow(BaseService):
    """Moves ``payment_status`` through its transition table."""

    def _transition(self, request: TransportRequest, target: PaymentStatus) -> PaymentStatus:
        previous = request.payment_status
        payment_state_machine.assert_transition(previous, target)
        request.payment_status = target
        return previous

    def current_contract(self, request: TransportRequest) -> Contract | None:
        """Latest contract bound to the request's committed transporter."""
        transporter_id = request.committed_transporter_id
        if transporter_id is None:
            return None
        return self.db.scalar(
            select(Contract)
            .where(Contract.request_id == request.id, Contract.transporter_id == transporter_id)
            .order_by(Contract.created_at.desc(), Contract.id.desc())
            .limit(1)
        )

    def _set_contract_status(self, request: TransportRequest, status: ContractStatus) -> None:
        contract = self.current_contract(request)
        if contract is not None:
            contract.status = status

    def _log(self, event: str, request: TransportRequest, previous: PaymentStatus, actor_id: str | None) -> None:
        logger.info(
            event,
            extra={
                "event": event,
                "request_id": request.id,
                "reference_id": request.reference_id,
                "actor_id": actor_id,
                "from_status": previous.value,
                "to_status": request.payment_status.value,
            },
        )

    def mark_for_billing(self, request_id: str, transporter_id: str) -> TransportRequest:
        """The committed transporter declares the job delivered and asks for payment."""
        request = self.get_request(request_id)
        if request.status not in MATCHED_STATUSES:
            raise PreconditionFailed(f"Request {request.reference_id} has no committed transporter.")
        if request.committed_transporter_id != transporter_id:
            raise PreconditionFailed("Only the assigned transporter can mark the request for billing.")

        previous = self._transition(request, PaymentStatus.AWAITING_PAYMENT)
        self._set_contract_status(request, ContractStatus.MARKED_PAID_TRANSPORTER)
        self.record_event(
            request,
            "payment.billing_requested",
            actor_id=transporter_id,
            client_id=request.client_id,
            client_total=str(request.client_total) if request.client_total is not None else None,
        )
        self.commit()
        self._log("payment.billing_requested", request, previous, transporter_id)
        return request

    def mark_as_paid(self, request_id: str, receipt: str | None, client_id: str | None = None) -> TransportRequest:
        """Client declares payment with a receipt reference."""
        receipt_ref = sanitize_text(receipt)
        if not receipt_ref:
            raise ReceiptRequired("A payment receipt is required.")
        request = self.get_request(request_id)
        if client_id is not None and request.client_id != client_id:
            raise PreconditionFailed("Only the request owner can declare a payment.")
        if request.status not in MATCHED_STATUSES:
            raise PreconditionFailed(f"Request {request.reference_id} has no committed transporter.")

        previous = self._transition(request, PaymentStatus.PENDING_ADMIN_VALIDATION)
        request.payment_receipt = receipt_ref
        self._set_contract_status(request, ContractStatus.MARKED_PAID_CLIENT)
        self.record_event(request, "payment.receipt_submitted", actor_id=client_id or request.client_id)
        self.commit()
        self._log("payment.receipt_submitted", request, previous, client_id)
        return request

    def admin_reject_receipt(
        self,
        request_id: str,
        actor_id: str | None = None,
        reason: str | None = None,
    ) -> TransportRequest:
        request = self.get_request(request_id)
        previous = self._transition(request, PaymentStatus.AWAITING_PAYMENT)
        request.payment_receipt = None
        self.record_event(
            request,
            "payment.receipt_rejected",
            actor_id=actor_id,
            client_id=request.client_id,
            reason=sanitize_text(reason, max_len=1000) or None,
        )
        self.commit()
        self._log("payment.receipt_rejected", request, previous, actor_id)
        return request

    def admin_validate_payment(self, request_id: str, actor_id: str | None = None) -> TransportRequest:
        """Only path into ``paid``; irreversible."""
        request = self.get_request(request_id)
        previous = self._transition(request, PaymentStatus.PAID)
        request.payment_date = utcnow()
        self._set_contract_status(request, ContractStatus.COMPLETED)
        self.record_event(
            request,
            "payment.validated",
            actor_id=actor_id,
            client_id=request.client_id,
            transporter_id=request.committed_transporter_id,
        )
        self.commit()
        self._log("payment.validated", request, previous, actor_id)
        return request
