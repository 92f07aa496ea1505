from __future__ import annotations

import threading
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from freightmatch.core.exceptions import AlreadyAssigned, NotFoundError, PreconditionFailed, ValidationError
from freightmatch.models import (
    Contract,
    ContractStatus,
    Offer,
    OfferStatus,
    PaymentStatus,
    RequestStatus,
    SelectionKind,
    TransportRequest,
)
from freightmatch.services.assignment_resolver import AssignmentResolver
from freightmatch.services.transporter_service import TransporterService
from tests.factories import make_published_request, make_request, make_transporter

PICKUP = datetime(2026, 11, 2, 8, 0, tzinfo=timezone.utc)


def _contract_count(session, request_id: str) -> int:
    return session.scalar(select(func.count()).select_from(Contract).where(Contract.request_id == request_id))


def test_scenario_interest_choose_then_late_choice(service, session, dispatcher):
    t1 = make_transporter(session, name="T1")
    t2 = make_transporter(session, name="T2")
    request = make_published_request(service)

    service.express_interest(request.id, t1.id)
    service.express_interest(request.id, t2.id)
    result = service.choose_transporter(request.id, t1.id, client_id="client-1")

    assert result.selection == SelectionKind.CLIENT_CHOICE
    assert result.request.status == RequestStatus.ACCEPTED
    assert result.request.assigned_transporter_id == t1.id
    assert result.request.accepted_offer_id is None
    assert result.request.payment_status == PaymentStatus.PENDING
    assert result.contract.transporter_id == t1.id
    assert result.contract.amount == Decimal("500.00")
    assert result.contract.status == ContractStatus.IN_PROGRESS

    with pytest.raises(AlreadyAssigned):
        service.choose_transporter(request.id, t2.id, client_id="client-1")

    session.expire_all()
    assert service.get_request(request.id).assigned_transporter_id == t1.id
    assert _contract_count(session, request.id) == 1
    assert dispatcher.event_types().count("request.transporter_assigned") == 1


def test_choose_requires_interest(service, session):
    transporter = make_transporter(session)
    request = make_published_request(service)
    with pytest.raises(PreconditionFailed):
        service.choose_transporter(request.id, transporter.id)


def test_choose_requires_owner(service, session):
    transporter = make_transporter(session)
    request = make_published_request(service)
    service.express_interest(request.id, transporter.id)
    with pytest.raises(PreconditionFailed):
        service.choose_transporter(request.id, transporter.id, client_id="intruder")


def test_choose_rejects_transporter_blocked_after_interest(service, session):
    transporter = make_transporter(session)
    request = make_published_request(service)
    service.express_interest(request.id, transporter.id)
    TransporterService(session).block_transporter(transporter.id)
    with pytest.raises(PreconditionFailed):
        service.choose_transporter(request.id, transporter.id)
    assert service.get_request(request.id).status == RequestStatus.PUBLISHED_FOR_MATCHING


def test_stale_session_loses_to_committed_winner(session_factory, session, service):
    t1 = make_transporter(session)
    t2 = make_transporter(session)
    request = make_published_request(service)
    service.express_interest(request.id, t1.id)
    service.express_interest(request.id, t2.id)

    stale_session = session_factory()
    try:
        stale_view = stale_session.get(TransportRequest, request.id)
        assert stale_view.status == RequestStatus.PUBLISHED_FOR_MATCHING

        service.choose_transporter(request.id, t1.id)

        with pytest.raises(AlreadyAssigned):
            AssignmentResolver(stale_session).choose_transporter(request.id, t2.id)
    finally:
        stale_session.close()

    session.expire_all()
    assert _contract_count(session, request.id) == 1


def test_concurrent_choices_produce_exactly_one_winner(session_factory, session, service):
    t1 = make_transporter(session)
    t2 = make_transporter(session)
    request = make_published_request(service)
    service.express_interest(request.id, t1.id)
    service.express_interest(request.id, t2.id)

    barrier = threading.Barrier(2)
    outcomes: dict[str, object] = {}

    def choose(transporter_id: str) -> None:
        db = session_factory()
        try:
            resolver = AssignmentResolver(db)
            barrier.wait()
            result = resolver.choose_transporter(request.id, transporter_id)
            outcomes[transporter_id] = result.contract.transporter_id
        except Exception as exc:
            outcomes[transporter_id] = exc
        finally:
            db.close()

    threads = [threading.Thread(target=choose, args=(tid,)) for tid in (t1.id, t2.id)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)

    winners = [value for value in outcomes.values() if isinstance(value, str)]
    losers = [value for value in outcomes.values() if isinstance(value, AlreadyAssigned)]
    assert len(winners) == 1
    assert len(losers) == 1

    session.expire_all()
    stored = service.get_request(request.id)
    assert stored.assigned_transporter_id == winners[0]
    assert _contract_count(session, request.id) == 1


def test_manual_assignment_from_open(service, session):
    transporter = make_transporter(session)
    request = make_request(service)

    result = service.assign_transporter_manually(request.id, transporter.id, 800, 80, actor_id="coordinator-1")
    assert result.selection == SelectionKind.MANUAL
    assert result.request.status == RequestStatus.ACCEPTED
    assert result.request.assigned_manually is True
    assert result.request.client_total == Decimal("880.00")
    assert result.request.qualified_at is not None
    assert result.contract.amount == Decimal("800.00")


def test_manual_assignment_rejects_bad_pricing(service, session):
    transporter = make_transporter(session)
    request = make_request(service)
    with pytest.raises(ValidationError):
        service.assign_transporter_manually(request.id, transporter.id, 0, 10)
    assert service.get_request(request.id).status == RequestStatus.OPEN


def test_manual_assignment_after_winner_is_already_assigned(service, session):
    t1 = make_transporter(session)
    t2 = make_transporter(session)
    request = make_published_request(service)
    service.express_interest(request.id, t1.id)
    service.choose_transporter(request.id, t1.id)

    with pytest.raises(AlreadyAssigned):
        service.assign_transporter_manually(request.id, t2.id, 500, 50)


def test_assignment_on_archived_request_is_precondition_failure(service, session):
    transporter = make_transporter(session)
    request = make_request(service)
    service.archive_request(request.id, "aucune_offre")
    with pytest.raises(PreconditionFailed) as excinfo:
        service.assign_transporter_manually(request.id, transporter.id, 500, 50)
    assert not isinstance(excinfo.value, AlreadyAssigned)


def test_accept_offer_prices_unqualified_request(service, session):
    winner = make_transporter(session)
    sibling = make_transporter(session)
    request = make_request(service)
    offer = service.submit_offer(request.id, winner.id, 1000, PICKUP, "return")
    other = service.submit_offer(request.id, sibling.id, 1200, PICKUP, "shared")

    result = service.accept_offer(offer.id, client_id="client-1")
    assert result.selection == SelectionKind.OFFER
    assert result.request.accepted_offer_id == offer.id
    assert result.request.assigned_transporter_id is None
    assert result.request.committed_transporter_id == winner.id
    assert result.request.transporter_amount == Decimal("1000.00")
    assert result.request.platform_fee == Decimal("100.00")
    assert result.request.client_total == Decimal("1100.00")
    assert result.contract.offer_id == offer.id

    session.expire_all()
    assert session.get(Offer, offer.id).status == OfferStatus.ACCEPTED
    assert session.get(Offer, other.id).status == OfferStatus.PENDING


def test_accept_offer_keeps_existing_qualification(service, session):
    transporter = make_transporter(session)
    request = make_published_request(service, transporter_amount=700, platform_fee=70)
    offer = service.submit_offer(request.id, transporter.id, 650, PICKUP, "return")
    result = service.accept_offer(offer.id)
    assert result.request.client_total == Decimal("770.00")
    assert result.contract.amount == Decimal("650.00")


def test_second_offer_acceptance_is_already_assigned(service, session):
    t1 = make_transporter(session)
    t2 = make_transporter(session)
    request = make_request(service)
    first = service.submit_offer(request.id, t1.id, 500, PICKUP, "return")
    second = service.submit_offer(request.id, t2.id, 450, PICKUP, "return")
    service.accept_offer(first.id)

    with pytest.raises(AlreadyAssigned):
        service.accept_offer(second.id)
    session.expire_all()
    assert service.get_request(request.id).accepted_offer_id == first.id


def test_republished_offer_request_is_repriced_from_next_offer(service, session):
    first = make_transporter(session)
    second = make_transporter(session)
    request = make_request(service)
    offer_a = service.submit_offer(request.id, first.id, 400, PICKUP, "return")
    offer_b = service.submit_offer(request.id, second.id, 450, PICKUP, "return")

    initial = service.accept_offer(offer_a.id)
    assert initial.request.client_total == Decimal("440.00")
    service.complete_request(request.id)
    service.republish_request(request.id)

    result = service.accept_offer(offer_b.id)
    assert result.request.committed_transporter_id == second.id
    assert result.request.transporter_amount == Decimal("450.00")
    assert result.request.platform_fee == Decimal("45.00")
    assert result.request.client_total == Decimal("495.00")
    assert result.contract.amount == Decimal("450.00")

    session.expire_all()
    assert session.get(Contract, initial.contract.id).status == ContractStatus.CANCELLED
    billed = service.mark_for_billing(request.id, second.id)
    assert billed.client_total == Decimal("495.00")


def test_requalified_request_keeps_coordinator_pricing_for_offers(service, session):
    transporter = make_transporter(session)
    request = make_request(service)
    offer = service.submit_offer(request.id, transporter.id, 400, PICKUP, "return")
    service.qualify_request(request.id, transporter_amount=380, platform_fee=60)

    result = service.accept_offer(offer.id)
    assert result.request.priced_from_offer is False
    assert result.request.client_total == Decimal("440.00")


def test_accept_offer_under_another_request_is_not_found(service, session):
    transporter = make_transporter(session)
    request = make_request(service)
    other = make_request(service)
    offer = service.submit_offer(request.id, transporter.id, 400, PICKUP, "return")

    with pytest.raises(NotFoundError):
        service.accept_offer(offer.id, request_id=other.id)
    assert service.get_request(request.id).status == RequestStatus.OPEN
