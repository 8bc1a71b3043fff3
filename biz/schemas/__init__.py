"""Pydantic schemas for API responses."""

from biz.schemas.common import ErrorResponse
from biz.schemas.probes import (
    BackendCheck,
    HealthResponse,
    MySQLTestResponse,
    PingResponse,
    RedisTestResponse,
    TestAllResponse,
    TestRecordOut,
)

__all__ = [
    "ErrorResponse",
    "BackendCheck",
    "HealthResponse",
    "MySQLTestResponse",
    "PingResponse",
    "RedisTestResponse",
    "TestAllResponse",
    "TestRecordOut",
]
