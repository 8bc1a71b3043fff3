"""Liveness and health endpoints.

GET /ping   -> static payload, never touches a backend
GET /health -> live re-check of both handles, always 200
"""

import asyncio

from fastapi import APIRouter, Depends

from biz.routes.deps import get_app_settings, get_backends
from biz.schemas import HealthResponse, PingResponse
from biz.services.probes import check_database, check_redis, utc_now
from biz.settings import Settings
from biz.stores import Backends

router = APIRouter()


@router.get("/ping", response_model=PingResponse)
async def ping() -> PingResponse:
    """Liveness check."""
    return PingResponse()


@router.get("/health", response_model=HealthResponse)
async def health(
    backends: Backends = Depends(get_backends),
    settings: Settings = Depends(get_app_settings),
) -> HealthResponse:
    """Report whether each backend answers a ping right now."""
    if not backends.enabled:
        return HealthResponse(
            service=settings.app_name,
            redis="disabled",
            mysql="disabled",
            timestamp=utc_now(),
        )

    redis_check, mysql_check = await asyncio.gather(
        check_redis(backends.redis, settings.ping_timeout),
        check_database(backends.database, settings.ping_timeout),
    )
    return HealthResponse(
        service=settings.app_name,
        redis="connected" if redis_check.status == "connected" else "disconnected",
        mysql="connected" if mysql_check.status == "connected" else "disconnected",
        timestamp=utc_now(),
    )
