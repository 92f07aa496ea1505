"""Builders for test data."""

from __future__ import annotations

import itertools
from datetime import datetime
from decimal import Decimal

from freightmatch.models import AccountStatus, Transporter, TransporterStatus

_phone_numbers = itertools.count(600000001)

REQUEST_PAYLOAD = {
    "client_id": "client-1",
    "from_city": "Casablanca",
    "to_city": "Rabat",
    "description": "10 boxes of furniture",
    "goods_type": "furniture",
}


def request_payload(**overrides) -> dict:
    return {**REQUEST_PAYLOAD, **overrides}


def make_transporter(
    session,
    name: str = "Transporter",
    city: str | None = "Casablanca",
    validated: bool = True,
    blocked: bool = False,
    rating: str = "0",
    total_ratings: int = 0,
    total_trips: int = 0,
    last_active_at: datetime | None = None,
) -> Transporter:
    transporter = Transporter(
        name=name,
        phone_number=f"+212{next(_phone_numbers)}",
        city=city,
        status=TransporterStatus.VALIDATED if validated else TransporterStatus.PENDING,
        account_status=AccountStatus.BLOCKED if blocked else AccountStatus.ACTIVE,
        rating=Decimal(rating),
        total_ratings=total_ratings,
        total_trips=total_trips,
        last_active_at=last_active_at,
    )
    session.add(transporter)
    session.commit()
    session.refresh(transporter)
    return transporter


def make_request(service, **overrides):
    return service.create_request(request_payload(**overrides))


def make_published_request(service, transporter_amount: int = 500, platform_fee: int = 50, **overrides):
    request = make_request(service, **overrides)
    service.qualify_request(request.id, transporter_amount=transporter_amount, platform_fee=platform_fee)
    return service.publish_for_matching(request.id)


def make_assigned_request(service, transporter, **overrides):
    request = make_published_request(service, **overrides)
    service.express_interest(request.id, transporter.id)
    return service.choose_transporter(request.id, transporter.id, client_id=request.client_id)
