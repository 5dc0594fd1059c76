"""데이터 동기화 / 좌표 변환 스키마"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SyncStatus(str, Enum):
    """동기화 실행 상태"""

    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class SyncStats(BaseModel):
    total: int = 0
    created: int = 0
    updated: int = 0
    failed: int = 0


class SyncResult(BaseModel):
    """동기화 실행 결과"""

    success: bool
    stats: SyncStats = Field(default_factory=SyncStats)
    error: str | None = None
    sync_log_id: int | None = None


class SyncLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    status: SyncStatus
    started_at: datetime
    completed_at: datetime | None = None
    records_total: int = 0
    records_created: int = 0
    records_updated: int = 0
    records_failed: int = 0
    error_message: str | None = None


class SyncTotals(BaseModel):
    jobs: int = 0
    companies: int = 0
    total_created: int = 0
    total_updated: int = 0


class SyncStatusResponse(BaseModel):
    """동기화 현황 (동기화 이력이 없으면 last_sync는 null)"""

    last_sync: SyncLogResponse | None = None
    totals: SyncTotals = Field(default_factory=SyncTotals)


class GeocodingResult(BaseModel):
    """주소 → 좌표 변환 결과"""

    latitude: float
    longitude: float
    formatted_address: str | None = None
    provider: str | None = Field(default=None, description="결과를 반환한 제공자")


class GeocodeBatchResult(BaseModel):
    processed: int = 0
    updated: int = 0
    failed: int = 0


class GeocodeStats(BaseModel):
    total: int = 0
    with_coordinates: int = 0
    pending: int = 0
    percent_complete: int = 0
