from __future__ import annotations

import threading
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from freightmatch.core.exceptions import ConflictError, NotFoundError, PreconditionFailed, ValidationError
from freightmatch.models import OfferStatus, RequestStatus, TransporterInterest
from freightmatch.services.interest_ledger import InterestOfferLedger
from tests.factories import make_assigned_request, make_published_request, make_request, make_transporter

PICKUP = datetime(2026, 11, 2, 8, 0, tzinfo=timezone.utc)


def _interest_count(session, request_id: str) -> int:
    return session.scalar(
        select(func.count()).select_from(TransporterInterest).where(TransporterInterest.request_id == request_id)
    )


def test_express_interest_is_idempotent(service, session, dispatcher):
    transporter = make_transporter(session)
    request = make_published_request(service)

    service.express_interest(request.id, transporter.id)
    service.express_interest(request.id, transporter.id)

    assert _interest_count(session, request.id) == 1
    assert dispatcher.event_types().count("transporter.interest_expressed") == 1
    session.refresh(transporter)
    assert transporter.last_active_at is not None


def test_concurrent_interest_from_same_transporter_keeps_one_row(session_factory, session, service):
    transporter = make_transporter(session)
    request = make_published_request(service)

    barrier = threading.Barrier(2)
    errors: list[Exception] = []
    interest_ids: list[str] = []

    def express() -> None:
        db = session_factory()
        try:
            ledger = InterestOfferLedger(db)
            barrier.wait()
            interest_ids.append(ledger.express_interest(request.id, transporter.id, availability_date=PICKUP).id)
        except Exception as exc:
            errors.append(exc)
        finally:
            db.close()

    threads = [threading.Thread(target=express) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)

    assert errors == []
    assert len(interest_ids) == 2
    assert len(set(interest_ids)) == 1
    assert _interest_count(session, request.id) == 1


def test_second_interest_updates_availability(service, session):
    transporter = make_transporter(session)
    request = make_published_request(service)
    service.express_interest(request.id, transporter.id)
    interest = service.express_interest(request.id, transporter.id, availability_date=PICKUP)
    assert interest.availability_date.date() == PICKUP.date()


def test_interest_requires_published_visible_request(service, session):
    transporter = make_transporter(session)
    request = make_request(service)
    with pytest.raises(PreconditionFailed):
        service.express_interest(request.id, transporter.id)

    published = make_published_request(service)
    service.toggle_hide(published.id, True)
    with pytest.raises(PreconditionFailed):
        service.express_interest(published.id, transporter.id)


@pytest.mark.parametrize("validated, blocked", [(False, False), (True, True)])
def test_interest_requires_eligible_transporter(service, session, validated, blocked):
    transporter = make_transporter(session, validated=validated, blocked=blocked)
    request = make_published_request(service)
    with pytest.raises(PreconditionFailed):
        service.express_interest(request.id, transporter.id)


def test_interest_from_unknown_transporter(service):
    request = make_published_request(service)
    with pytest.raises(NotFoundError):
        service.express_interest(request.id, "ghost")


def test_withdraw_without_interest_is_a_noop(service, session, dispatcher):
    transporter = make_transporter(session)
    request = make_published_request(service)
    assert service.withdraw_interest(request.id, transporter.id) is False
    assert "transporter.interest_withdrawn" not in dispatcher.event_types()


def test_withdraw_removes_interest(service, session):
    transporter = make_transporter(session)
    request = make_published_request(service)
    service.express_interest(request.id, transporter.id)

    assert service.withdraw_interest(request.id, transporter.id) is True
    assert transporter.id not in service.get_request(request.id).transporter_interests


def test_withdraw_after_assignment_is_rejected(service, session):
    transporter = make_transporter(session)
    result = make_assigned_request(service, transporter)
    with pytest.raises(PreconditionFailed):
        service.withdraw_interest(result.request.id, transporter.id)


def test_decline_removes_interest_and_blocks_new_interest(service, session):
    transporter = make_transporter(session)
    request = make_published_request(service)
    service.express_interest(request.id, transporter.id)

    service.decline_request(request.id, transporter.id)
    service.decline_request(request.id, transporter.id)

    stored = service.get_request(request.id)
    assert stored.declined_by == frozenset({transporter.id})
    assert stored.transporter_interests == frozenset()
    with pytest.raises(PreconditionFailed):
        service.express_interest(request.id, transporter.id)


def test_submit_offer(service, session, dispatcher):
    transporter = make_transporter(session)
    request = make_request(service)
    offer = service.submit_offer(request.id, transporter.id, "420", PICKUP, "return")

    assert offer.status == OfferStatus.PENDING
    assert offer.amount == Decimal("420.00")
    submitted = [m for m in dispatcher.messages if m["event_type"] == "offer.submitted"]
    assert submitted[0]["payload"]["client_id"] == "client-1"
    assert submitted[0]["payload"]["offer_id"] == offer.id


def test_duplicate_offer_conflicts(service, session):
    transporter = make_transporter(session)
    request = make_request(service)
    service.submit_offer(request.id, transporter.id, 420, PICKUP, "return")
    with pytest.raises(ConflictError):
        service.submit_offer(request.id, transporter.id, 380, PICKUP, "return")


@pytest.mark.parametrize("amount, load_type", [(0, "return"), (-10, "shared"), (100, "full_truck")])
def test_offer_validation(service, session, amount, load_type):
    transporter = make_transporter(session)
    request = make_request(service)
    with pytest.raises(ValidationError):
        service.submit_offer(request.id, transporter.id, amount, PICKUP, load_type)


def test_offer_on_matched_request_is_rejected(service, session):
    winner = make_transporter(session)
    bidder = make_transporter(session)
    result = make_assigned_request(service, winner)
    with pytest.raises(PreconditionFailed):
        service.submit_offer(result.request.id, bidder.id, 300, PICKUP, "shared")


def test_client_view_of_offers_includes_commission(service, session):
    transporter = make_transporter(session)
    request = make_request(service)
    service.submit_offer(request.id, transporter.id, 1000, PICKUP, "shared")

    transporter_view = service.list_offers(request.id)
    client_view = service.list_offers(request.id, viewer="client")
    assert transporter_view[0].client_amount is None
    assert client_view[0].client_amount == Decimal("1100.00")
    assert client_view[0].status == OfferStatus.PENDING


def test_list_offers_for_missing_request(service):
    with pytest.raises(NotFoundError):
        service.list_offers("missing")


def test_interest_pool_survives_status_reads(service, session):
    first = make_transporter(session)
    second = make_transporter(session)
    request = make_published_request(service)
    service.express_interest(request.id, first.id)
    service.express_interest(request.id, second.id)
    stored = service.get_request(request.id)
    assert stored.status == RequestStatus.PUBLISHED_FOR_MATCHING
    assert stored.transporter_interests == frozenset({first.id, second.id})
