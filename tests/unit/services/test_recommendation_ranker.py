from __future__ import annotations

from datetime import datetime, timedelta, timezone

from freightmatch.models import EmptyReturn, EmptyReturnStatus, RecommendationTier
from freightmatch.services.recommendation_ranker import RecommendationRanker
from tests.factories import make_published_request, make_request, make_transporter

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _empty_return(session, transporter, return_date, from_city="Casablanca", to_city="Rabat", status=EmptyReturnStatus.ACTIVE):
    row = EmptyReturn(
        transporter_id=transporter.id,
        from_city=from_city,
        to_city=to_city,
        return_date=return_date,
        status=status,
    )
    session.add(row)
    session.commit()
    return row


def test_tiers_rank_empty_return_then_active_then_rating(service, session):
    request = make_request(service, requested_date=datetime(2026, 10, 25, 9, 0, tzinfo=timezone.utc))
    by_rating = make_transporter(session, name="Top rated", rating="5.00", total_trips=40)
    active = make_transporter(session, name="Active", rating="3.00", last_active_at=NOW - timedelta(days=2))
    empty = make_transporter(session, name="Empty return", rating="1.00")
    _empty_return(session, empty, datetime(2026, 10, 25, 18, 0, tzinfo=timezone.utc), from_city="casablanca", to_city="RABAT")

    ranked = service.get_recommendations(request.id, now=NOW)
    assert [r.id for r in ranked] == [empty.id, active.id, by_rating.id]
    assert [r.tier for r in ranked] == [
        RecommendationTier.EMPTY_RETURN,
        RecommendationTier.ACTIVE,
        RecommendationTier.RATING,
    ]
    assert ranked[0].empty_return_id is not None


def test_empty_return_on_other_day_does_not_count(service, session):
    request = make_request(service, requested_date=datetime(2026, 10, 25, 9, 0, tzinfo=timezone.utc))
    transporter = make_transporter(session)
    _empty_return(session, transporter, datetime(2026, 10, 26, 9, 0, tzinfo=timezone.utc))

    ranked = service.get_recommendations(request.id, now=NOW)
    assert ranked[0].tier == RecommendationTier.RATING


def test_undated_request_matches_future_empty_returns_only(service, session):
    request = make_request(service)
    future = make_transporter(session, name="Future")
    past = make_transporter(session, name="Past")
    _empty_return(session, future, NOW + timedelta(days=3))
    _empty_return(session, past, NOW - timedelta(days=3))

    tiers = {r.id: r.tier for r in service.get_recommendations(request.id, now=NOW)}
    assert tiers[future.id] == RecommendationTier.EMPTY_RETURN
    assert tiers[past.id] == RecommendationTier.RATING


def test_assigned_empty_returns_are_ignored(service, session):
    request = make_request(service)
    transporter = make_transporter(session)
    _empty_return(session, transporter, NOW + timedelta(days=1), status=EmptyReturnStatus.ASSIGNED)
    assert service.get_recommendations(request.id, now=NOW)[0].tier == RecommendationTier.RATING


def test_ineligible_and_declined_transporters_are_excluded(service, session):
    request = make_published_request(service)
    kept = make_transporter(session)
    make_transporter(session, validated=False)
    make_transporter(session, blocked=True)
    declined = make_transporter(session)
    service.decline_request(request.id, declined.id)

    assert [r.id for r in service.get_recommendations(request.id, now=NOW)] == [kept.id]


def test_rating_tier_breaks_ties_on_trips(service, session):
    request = make_request(service)
    fewer = make_transporter(session, rating="4.00", total_trips=3)
    more = make_transporter(session, rating="4.00", total_trips=9)
    best = make_transporter(session, rating="4.80", total_trips=1)

    assert [r.id for r in service.get_recommendations(request.id, now=NOW)] == [best.id, more.id, fewer.id]


def test_activity_window_boundary(service, session):
    request = make_request(service)
    stale = make_transporter(session, rating="5.00", last_active_at=NOW - timedelta(days=8))
    recent = make_transporter(session, rating="2.00", last_active_at=NOW - timedelta(days=6))

    ranked = service.get_recommendations(request.id, now=NOW)
    assert [r.id for r in ranked] == [recent.id, stale.id]


def test_limit_and_determinism(service, session):
    request = make_request(service)
    for index in range(4):
        make_transporter(session, name=f"T{index}", rating="3.00")

    ranker = RecommendationRanker(session)
    first = ranker.get_recommendations(request.id, limit=3, now=NOW)
    second = ranker.get_recommendations(request.id, limit=3, now=NOW)
    assert len(first) == 3
    assert first == second
    assert [r.id for r in first] == sorted(r.id for r in first)
