"""Admin settings and reporting endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter

from freightmatch.database.db import get_db_session
from freightmatch.schemas.admin import (
    CommissionOverviewResponse,
    CommissionUpdateRequest,
    PlatformStatsResponse,
    SettingsResponse,
)
from freightmatch.services.settings_service import SettingsService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/settings")
def get_settings() -> dict:
    with get_db_session() as session:
        percentage = SettingsService(session).get_commission_percentage()
        return SettingsResponse(commission_percentage=percentage).model_dump(mode="json")


@router.put("/settings/commission")
def update_commission_percentage(payload: CommissionUpdateRequest) -> dict:
    with get_db_session() as session:
        settings = SettingsService(session).update_commission_percentage(
            payload.commission_percentage, actor_id=payload.actor_id
        )
        return SettingsResponse.model_validate(settings).model_dump(mode="json")


@router.get("/requests/{request_id}/commission")
def commission_overview(request_id: str) -> dict:
    with get_db_session() as session:
        overview = SettingsService(session).commission_overview(request_id)
        return CommissionOverviewResponse(**overview).model_dump(mode="json")


@router.get("/stats")
def platform_stats() -> dict:
    with get_db_session() as session:
        return PlatformStatsResponse(**SettingsService(session).platform_stats()).model_dump(mode="json")
