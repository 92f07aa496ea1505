"""Root API router for v1 endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from freightmatch.api.v1 import admin, empty_returns, health, matching, payments, requests, transporters
from freightmatch.core.config import get_config

api_router = APIRouter(prefix=get_config().API_PREFIX)
api_router.include_router(health.router)
api_router.include_router(requests.router)
api_router.include_router(matching.router)
api_router.include_router(payments.router)
api_router.include_router(transporters.router)
api_router.include_router(empty_returns.router)
api_router.include_router(admin.router)


def get_api_router() -> APIRouter:
    return api_router
