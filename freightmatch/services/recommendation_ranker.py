"""CamioMatch: ranks candidate transporters for a request.

Ranking tiers, highest first:

* ``empty_return``: the transporter announced an active empty return on the
  same route for the requested day (or any day from today when the request
  has no date).
* ``active``: the transporter was active within the configured window.
* ``rating``: everyone else.

Within a tier transporters are sorted by rating descending; the rating tier
also breaks ties on trip count. Transporter id is the final tie-breaker so
the order is deterministic. Ranking never writes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy import func, select

from freightmatch.core.config import get_config
from freightmatch.models import (
    AccountStatus,
    EmptyReturn,
    EmptyReturnStatus,
    RecommendationTier,
    TransportRequest,
    Transporter,
    TransporterStatus,
)
from freightmatch.services.base_service import BaseService
from freightmatch.utils.dates import same_calendar_day, to_utc, utc_day, utcnow

TIER_ORDER = {
    RecommendationTier.EMPTY_RETURN: 0,
    RecommendationTier.ACTIVE: 1,
    RecommendationTier.RATING: 2,
}


@dataclass(frozen=True)
class RecommendedTransporter:
    id: str
    name: str | None
    city: str | None
    rating: Decimal
    total_trips: int
    tier: RecommendationTier
    empty_return_id: str | None = None


def _sort_key(candidate: RecommendedTransporter) -> tuple:
    trips = -candidate.total_trips if candidate.tier == RecommendationTier.RATING else 0
    return (TIER_ORDER[candidate.tier], -candidate.rating, trips, candidate.id)


class RecommendationRanker(BaseService):
    """Read-only scorer over the transporter directory."""

    def get_recommendations(
        self,
        request_id: str,
        limit: int | None = None,
        now: datetime | None = None,
    ) -> list[RecommendedTransporter]:
        request = self.get_request(request_id)
        return self.rank(request, limit=limit, now=now)

    def rank(
        self,
        request: TransportRequest,
        limit: int | None = None,
        now: datetime | None = None,
    ) -> list[RecommendedTransporter]:
        current = to_utc(now) or utcnow()
        declined = request.declined_by
        transporters = self.db.scalars(
            select(Transporter).where(
                Transporter.status == TransporterStatus.VALIDATED,
                Transporter.account_status == AccountStatus.ACTIVE,
            )
        ).all()

        empty_returns = self._matching_empty_returns(request, current)
        active_since = current - timedelta(days=get_config().ACTIVE_WINDOW_DAYS)

        ranked: list[RecommendedTransporter] = []
        for transporter in transporters:
            if transporter.id in declined:
                continue
            empty_return = empty_returns.get(transporter.id)
            last_active = to_utc(transporter.last_active_at)
            if empty_return is not None:
                tier = RecommendationTier.EMPTY_RETURN
            elif last_active is not None and last_active >= active_since:
                tier = RecommendationTier.ACTIVE
            else:
                tier = RecommendationTier.RATING
            ranked.append(
                RecommendedTransporter(
                    id=transporter.id,
                    name=transporter.name,
                    city=transporter.city,
                    rating=Decimal(transporter.rating or 0),
                    total_trips=transporter.total_trips or 0,
                    tier=tier,
                    empty_return_id=empty_return.id if empty_return is not None else None,
                )
            )

        ranked.sort(key=_sort_key)
        if limit is not None:
            return ranked[: max(limit, 0)]
        return ranked

    def _matching_empty_returns(self, request: TransportRequest, now: datetime) -> dict[str, EmptyReturn]:
        """Earliest matching active empty return per transporter."""
        rows = self.db.scalars(
            select(EmptyReturn)
            .where(
                EmptyReturn.status == EmptyReturnStatus.ACTIVE,
                func.lower(EmptyReturn.from_city) == request.from_city.strip().lower(),
                func.lower(EmptyReturn.to_city) == request.to_city.strip().lower(),
            )
            .order_by(EmptyReturn.return_date, EmptyReturn.id)
        ).all()

        today = utc_day(now)
        matches: dict[str, EmptyReturn] = {}
        for row in rows:
            if request.requested_date is not None:
                fits = same_calendar_day(row.return_date, request.requested_date)
            else:
                fits = utc_day(row.return_date) >= today
            if fits:
                matches.setdefault(row.transporter_id, row)
        return matches
