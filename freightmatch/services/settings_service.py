"""Platform settings, commission reporting and platform statistics."""

from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import func, select

from freightmatch.core.config import get_config
from freightmatch.core.exceptions import ValidationError
from freightmatch.models import (
    AccountStatus,
    Contract,
    PaymentStatus,
    PlatformSettings,
    RequestStatus,
    TransportRequest,
    Transporter,
    TransporterStatus,
)
from freightmatch.services.base_service import BaseService
from freightmatch.services.pricing import pricing_engine, to_money

logger = logging.getLogger(__name__)

SETTINGS_ROW_ID = 1


class SettingsService(BaseService):
    """Reads and updates the single platform settings row."""

    def get_settings(self) -> PlatformSettings:
        settings = self.db.get(PlatformSettings, SETTINGS_ROW_ID)
        if settings is None:
            settings = PlatformSettings(
                id=SETTINGS_ROW_ID,
                commission_percentage=to_money(get_config().DEFAULT_COMMISSION_PERCENTAGE, "commission_percentage"),
            )
            self.db.add(settings)
            self.db.flush()
        return settings

    def get_commission_percentage(self) -> Decimal:
        settings = self.db.get(PlatformSettings, SETTINGS_ROW_ID)
        if settings is None:
            return to_money(get_config().DEFAULT_COMMISSION_PERCENTAGE, "commission_percentage")
        return Decimal(settings.commission_percentage)

    def update_commission_percentage(self, percentage: object, actor_id: str | None = None) -> PlatformSettings:
        value = to_money(percentage, "commission_percentage")
        if value < 0 or value > 100:
            raise ValidationError("commission_percentage must be between 0 and 100.")
        settings = self.get_settings()
        settings.commission_percentage = value
        self.commit()
        logger.info(
            "settings.commission_updated",
            extra={"event": "settings.commission_updated", "actor_id": actor_id, "commission_percentage": str(value)},
        )
        return settings

    def commission_overview(self, request_id: str) -> dict:
        """Stored platform fee next to the informational global commission."""
        request = self.get_request(request_id)
        percentage = self.get_commission_percentage()
        commission = None
        if request.transporter_amount is not None:
            commission = pricing_engine.commission_amount(request.transporter_amount, percentage)
        return {
            "request_id": request.id,
            "reference_id": request.reference_id,
            "transporter_amount": request.transporter_amount,
            "platform_fee": request.platform_fee,
            "client_total": request.client_total,
            "commission_percentage": percentage,
            "commission_amount": commission,
        }

    def platform_stats(self) -> dict:
        status_rows = self.db.execute(
            select(TransportRequest.status, func.count()).group_by(TransportRequest.status)
        ).all()
        by_status = {status.value: 0 for status in RequestStatus}
        for status, count in status_rows:
            by_status[RequestStatus(status).value] = count

        active_transporters = self.db.scalar(
            select(func.count())
            .select_from(Transporter)
            .where(
                Transporter.status == TransporterStatus.VALIDATED,
                Transporter.account_status == AccountStatus.ACTIVE,
            )
        )
        paid_volume = self.db.scalar(
            select(func.coalesce(func.sum(TransportRequest.client_total), 0)).where(
                TransportRequest.payment_status == PaymentStatus.PAID
            )
        )
        return {
            "requests_by_status": by_status,
            "open_requests": by_status[RequestStatus.OPEN.value]
            + by_status[RequestStatus.PUBLISHED_FOR_MATCHING.value],
            "completed_requests": by_status[RequestStatus.COMPLETED.value],
            "awaiting_admin_validation": self.db.scalar(
                select(func.count())
                .select_from(TransportRequest)
                .where(TransportRequest.payment_status == PaymentStatus.PENDING_ADMIN_VALIDATION)
            ),
            "active_transporters": active_transporters or 0,
            "contracts": self.db.scalar(select(func.count()).select_from(Contract)) or 0,
            "paid_volume": to_money(paid_volume or 0, "paid_volume"),
        }
