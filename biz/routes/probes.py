"""Connectivity-test endpoints.

GET /test-redis -> SET/GET round-trip
GET /test-mysql -> migrate/INSERT/SELECT round-trip
GET /test-all   -> ping both backends, report each independently

Failures surface as BackendNotInitializedError (503) or
BackendOperationError (500); see the handlers registered in biz.main.
"""

import asyncio

from fastapi import APIRouter, Depends

from biz.routes.deps import get_app_settings, get_backends
from biz.schemas import (
    ErrorResponse,
    MySQLTestResponse,
    RedisTestResponse,
    TestAllResponse,
    TestRecordOut,
)
from biz.services.probes import (
    check_database,
    check_redis,
    mysql_round_trip,
    redis_round_trip,
    utc_now,
)
from biz.settings import Settings
from biz.stores import Backends

router = APIRouter()

ERROR_RESPONSES = {
    500: {"model": ErrorResponse, "description": "Backend operation failed"},
    503: {"model": ErrorResponse, "description": "Backend not initialized"},
}


@router.get("/test-redis", response_model=RedisTestResponse, responses=ERROR_RESPONSES)
async def test_redis(
    backends: Backends = Depends(get_backends),
    settings: Settings = Depends(get_app_settings),
) -> RedisTestResponse:
    """Write a timestamped value to Redis and read it back."""
    result = await redis_round_trip(backends.redis, settings.operation_timeout)
    return RedisTestResponse(
        message="Redis test succeeded",
        key=result.key,
        value=result.value,
        timestamp=utc_now(),
    )


@router.get("/test-mysql", response_model=MySQLTestResponse, responses=ERROR_RESPONSES)
async def test_mysql(
    backends: Backends = Depends(get_backends),
    settings: Settings = Depends(get_app_settings),
) -> MySQLTestResponse:
    """Insert a test record and return it with the five most recent records."""
    result = await mysql_round_trip(backends.database, settings.operation_timeout)
    return MySQLTestResponse(
        message="MySQL test succeeded",
        inserted_record=TestRecordOut.model_validate(result.inserted),
        recent_records=[TestRecordOut.model_validate(r) for r in result.recent],
        timestamp=utc_now(),
    )


@router.get("/test-all", response_model=TestAllResponse, response_model_exclude_none=True)
async def test_all(
    backends: Backends = Depends(get_backends),
    settings: Settings = Depends(get_app_settings),
) -> TestAllResponse:
    """Ping both backends; one being down never affects the other's result."""
    redis_check, mysql_check = await asyncio.gather(
        check_redis(backends.redis, settings.ping_timeout),
        check_database(backends.database, settings.ping_timeout),
    )
    return TestAllResponse(redis=redis_check, mysql=mysql_check, timestamp=utc_now())
