"""Transporter directory operations used by the matching core."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from freightmatch.core.exceptions import ConflictError, NotFoundError
from freightmatch.models import AccountStatus, Transporter, TransporterStatus
from freightmatch.schemas.transporters import TransporterRegisterRequest
from freightmatch.services.base_service import BaseService
from freightmatch.utils.dates import to_utc, utcnow
from freightmatch.utils.validators import validate_payload

logger = logging.getLogger(__name__)


class TransporterService(BaseService):
    def register_transporter(self, data: TransporterRegisterRequest | dict) -> Transporter:
        payload = validate_payload(TransporterRegisterRequest, data)
        existing = self.db.scalar(select(Transporter.id).where(Transporter.phone_number == payload.phone_number))
        if existing is not None:
            raise ConflictError("A transporter with this phone number already exists.")
        transporter = Transporter(
            phone_number=payload.phone_number,
            name=payload.name,
            city=payload.city,
            status=TransporterStatus.PENDING,
            account_status=AccountStatus.ACTIVE,
        )
        self.db.add(transporter)
        try:
            self.commit()
        except IntegrityError as exc:
            raise ConflictError("A transporter with this phone number already exists.") from exc
        logger.info(
            "transporter.registered",
            extra={"event": "transporter.registered", "transporter_id": transporter.id},
        )
        return transporter

    def get_transporter(self, transporter_id: str) -> Transporter:
        transporter = self.db.get(Transporter, transporter_id)
        if transporter is None:
            raise NotFoundError(f"Transporter not found: {transporter_id}")
        return transporter

    def list_transporters(self, status: TransporterStatus | None = None) -> list[Transporter]:
        stmt = select(Transporter).order_by(Transporter.created_at, Transporter.id)
        if status is not None:
            stmt = stmt.where(Transporter.status == status)
        return list(self.db.scalars(stmt).all())

    def validate_transporter(self, transporter_id: str, actor_id: str | None = None) -> Transporter:
        transporter = self.get_transporter(transporter_id)
        transporter.status = TransporterStatus.VALIDATED
        self.commit()
        logger.info(
            "transporter.validated",
            extra={"event": "transporter.validated", "transporter_id": transporter_id, "actor_id": actor_id},
        )
        return transporter

    def block_transporter(self, transporter_id: str, actor_id: str | None = None) -> Transporter:
        return self._set_account_status(transporter_id, AccountStatus.BLOCKED, actor_id)

    def unblock_transporter(self, transporter_id: str, actor_id: str | None = None) -> Transporter:
        return self._set_account_status(transporter_id, AccountStatus.ACTIVE, actor_id)

    def _set_account_status(self, transporter_id: str, status: AccountStatus, actor_id: str | None) -> Transporter:
        transporter = self.get_transporter(transporter_id)
        transporter.account_status = status
        self.commit()
        logger.info(
            "transporter.account_status_changed",
            extra={
                "event": "transporter.account_status_changed",
                "transporter_id": transporter_id,
                "actor_id": actor_id,
                "account_status": status.value,
            },
        )
        return transporter

    def record_activity(self, transporter_id: str, at: datetime | None = None) -> Transporter:
        transporter = self.get_transporter(transporter_id)
        transporter.last_active_at = to_utc(at) or utcnow()
        self.commit()
        return transporter
