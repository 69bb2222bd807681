"""API 응답에 사용되는 Pydantic 모델."""
from enum import Enum

from pydantic import BaseModel, Field


class HealthStatus(str, Enum):
    """헬스 체크 상태."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"


class HealthResponse(BaseModel):
    """헬스 체크 응답."""

    status: HealthStatus
    app: str
    version: str
    counter: int = Field(..., ge=0)
    buffered_passwords: int = Field(..., ge=0)
    persistence: bool
