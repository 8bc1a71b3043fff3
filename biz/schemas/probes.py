"""Response schemas for liveness, health and connectivity-test endpoints."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

ConnectionStatus = Literal["connected", "disconnected", "disabled"]


class PingResponse(BaseModel):
    message: str = "pong"
    status: str = "healthy"


class HealthResponse(BaseModel):
    """Aggregate status; the process itself is always reported healthy."""

    status: str = "healthy"
    service: str
    redis: ConnectionStatus
    mysql: ConnectionStatus
    timestamp: datetime


class RedisTestResponse(BaseModel):
    message: str
    key: str
    value: str
    timestamp: datetime


class TestRecordOut(BaseModel):
    """Serialized test record."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    message: str
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """DATETIME columns drop the offset; stored values are UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class MySQLTestResponse(BaseModel):
    message: str
    inserted_record: TestRecordOut
    recent_records: list[TestRecordOut]
    timestamp: datetime


class BackendCheck(BaseModel):
    """Per-backend result inside /test-all.

    `test` is set only when connected, `error` only on failure.
    """

    status: Literal["connected", "error", "not_initialized"]
    test: str | None = None
    error: str | None = None


class TestAllResponse(BaseModel):
    redis: BackendCheck
    mysql: BackendCheck
    timestamp: datetime
