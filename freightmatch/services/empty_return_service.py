"""Empty return announcements and their admin consumption."""

from __future__ import annotations

import logging
from datetime import datetime, time, timezone

from sqlalchemy import func, select, update

from freightmatch.core.exceptions import NotFoundError, PreconditionFailed, ValidationError
from freightmatch.models import EmptyReturn, EmptyReturnStatus
from freightmatch.schemas.empty_returns import EmptyReturnCreateRequest
from freightmatch.services.assignment_resolver import AssignmentResolver, AssignmentResult
from freightmatch.services.base_service import BaseService
from freightmatch.services.interest_ledger import InterestOfferLedger
from freightmatch.utils.dates import to_utc, utc_day, utcnow
from freightmatch.utils.validators import validate_payload

logger = logging.getLogger(__name__)


class EmptyReturnService(BaseService):
    def announce_empty_return(self, data: EmptyReturnCreateRequest | dict, now: datetime | None = None) -> EmptyReturn:
        payload = validate_payload(EmptyReturnCreateRequest, data)
        InterestOfferLedger(self.db).get_eligible_transporter(payload.transporter_id)
        return_date = to_utc(payload.return_date)
        if utc_day(return_date) < utc_day(to_utc(now) or utcnow()):
            raise ValidationError("return_date cannot be in the past.")

        empty_return = EmptyReturn(
            transporter_id=payload.transporter_id,
            from_city=payload.from_city.strip(),
            to_city=payload.to_city.strip(),
            return_date=return_date,
            status=EmptyReturnStatus.ACTIVE,
        )
        self.db.add(empty_return)
        self.commit()
        logger.info(
            "empty_return.announced",
            extra={
                "event": "empty_return.announced",
                "transporter_id": payload.transporter_id,
                "empty_return_id": empty_return.id,
            },
        )
        return empty_return

    def get_empty_return(self, empty_return_id: str) -> EmptyReturn:
        empty_return = self.db.get(EmptyReturn, empty_return_id)
        if empty_return is None:
            raise NotFoundError(f"Empty return not found: {empty_return_id}")
        return empty_return

    def list_active_empty_returns(self, from_city: str | None = None, to_city: str | None = None) -> list[EmptyReturn]:
        stmt = (
            select(EmptyReturn)
            .where(EmptyReturn.status == EmptyReturnStatus.ACTIVE)
            .order_by(EmptyReturn.return_date, EmptyReturn.id)
        )
        if from_city:
            stmt = stmt.where(func.lower(EmptyReturn.from_city) == from_city.strip().lower())
        if to_city:
            stmt = stmt.where(func.lower(EmptyReturn.to_city) == to_city.strip().lower())
        return list(self.db.scalars(stmt).all())

    def assign_empty_return(
        self,
        empty_return_id: str,
        request_id: str,
        transporter_amount: object,
        platform_fee: object,
        actor_id: str | None = None,
    ) -> AssignmentResult:
        """Consume an active empty return by assigning its transporter to a request."""
        empty_return = self.get_empty_return(empty_return_id)
        transporter_id = empty_return.transporter_id
        consumed = self.db.execute(
            update(EmptyReturn)
            .where(EmptyReturn.id == empty_return_id, EmptyReturn.status == EmptyReturnStatus.ACTIVE)
            .values(status=EmptyReturnStatus.ASSIGNED, assigned_request_id=request_id, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if consumed.rowcount != 1:
            self.rollback()
            raise PreconditionFailed(f"Empty return {empty_return_id} is no longer available.")

        resolver = AssignmentResolver(self.db, dispatcher=self.dispatcher)
        try:
            result = resolver.assign_transporter_manually(
                request_id,
                transporter_id,
                transporter_amount=transporter_amount,
                platform_fee=platform_fee,
                actor_id=actor_id,
            )
        except Exception:
            self.rollback()
            raise
        self.db.refresh(empty_return)
        logger.info(
            "empty_return.assigned",
            extra={
                "event": "empty_return.assigned",
                "empty_return_id": empty_return_id,
                "request_id": request_id,
                "transporter_id": transporter_id,
            },
        )
        return result

    def expire_empty_returns(self, now: datetime | None = None) -> int:
        """Expire active empty returns whose return day has passed."""
        today = utc_day(to_utc(now) or utcnow())
        start_of_today = datetime.combine(today, time.min, tzinfo=timezone.utc)
        result = self.db.execute(
            update(EmptyReturn)
            .where(EmptyReturn.status == EmptyReturnStatus.ACTIVE, EmptyReturn.return_date < start_of_today)
            .values(status=EmptyReturnStatus.EXPIRED, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        self.commit()
        expired = result.rowcount or 0
        logger.info("empty_return.expired", extra={"event": "empty_return.expired", "count": expired})
        return expired
