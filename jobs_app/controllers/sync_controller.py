"""데이터 동기화 / 좌표 변환 API 컨트롤러"""

import logging
from collections.abc import Callable

from fastapi import HTTPException
from sqlalchemy.orm import Session, sessionmaker

from adapters.data_go_kr_client import DataGoKrClient
from adapters.db_client import get_session_factory
from adapters.job_repository import JobRepository
from middleware.otel_lgtm_metrics import record_sync_stats, tracked_session
from schemas.common import ResponseCode
from schemas.sync import (
    GeocodeBatchResult,
    GeocodeStats,
    SyncLogResponse,
    SyncResult,
    SyncStatusResponse,
    SyncTotals,
)
from services.geo.resolver import GeocodingResolver, get_geocoding_resolver
from services.ingest.geocode_worker import GeocodeWorker
from services.ingest.sync_service import SyncConfig, SyncService
from services.jobs.facet_cache import FacetCache, get_facet_cache

logger = logging.getLogger(__name__)


def _internal_error(message: str) -> HTTPException:
    return HTTPException(
        status_code=500,
        detail={"code": ResponseCode.INTERNAL_SERVER_ERROR.value, "data": {"message": message}},
    )


class SyncController:
    """동기화 / 좌표 변환 HTTP 레이어 조율자"""

    def __init__(
        self,
        session_factory: sessionmaker[Session] | None = None,
        resolver: GeocodingResolver | None = None,
        source_client_factory: Callable[[], DataGoKrClient] = DataGoKrClient,
        facet_cache: FacetCache | None = None,
        sync_config: SyncConfig | None = None,
    ):
        self.session_factory = session_factory or get_session_factory()
        self.resolver = resolver or get_geocoding_resolver()
        self.source_client_factory = source_client_factory
        self.facet_cache = facet_cache or get_facet_cache()
        self.sync_config = sync_config

    def _sync_service(self, repository: JobRepository) -> SyncService:
        return SyncService(
            repository,
            source_client_factory=self.source_client_factory,
            geocode_worker=GeocodeWorker(repository, self.resolver),
            facet_cache=self.facet_cache,
            config=self.sync_config,
        )

    # ============== 동기화 ==============

    async def run_sync(self) -> SyncResult:
        """동기화 수동 실행 - 실행 결과를 그대로 반환"""
        logger.info("API를 통한 수동 동기화 요청")
        try:
            with tracked_session(self.session_factory) as session:
                result = await self._sync_service(JobRepository(session)).run_sync()
        except Exception as e:
            logger.error(f"동기화 실행 오류: {e}")
            raise _internal_error("동기화를 실행하지 못했습니다.") from e

        record_sync_stats(result.stats.created, result.stats.updated, result.stats.failed)
        return result

    async def get_sync_status(self) -> SyncStatusResponse:
        """마지막 동기화 + 누적 집계 (동기화 이력이 없으면 last_sync=None)"""
        try:
            with tracked_session(self.session_factory) as session:
                repository = JobRepository(session)
                last_log = repository.get_latest_sync_log()
                total_created, total_updated = repository.sum_sync_records()
                return SyncStatusResponse(
                    last_sync=SyncLogResponse.model_validate(last_log) if last_log else None,
                    totals=SyncTotals(
                        jobs=repository.count_jobs(),
                        companies=repository.count_companies(),
                        total_created=total_created,
                        total_updated=total_updated,
                    ),
                )
        except Exception as e:
            logger.error(f"동기화 현황 조회 실패: {e}")
            raise _internal_error("동기화 현황을 불러오지 못했습니다.") from e

    # ============== 좌표 변환 ==============

    async def geocode_batch(self, reset: bool = False) -> GeocodeBatchResult:
        """좌표 없는 사업장 일괄 변환 (최대 50곳)"""
        try:
            with tracked_session(self.session_factory) as session:
                worker = GeocodeWorker(JobRepository(session), self.resolver)
                return await worker.geocode_missing(reset=reset)
        except Exception as e:
            logger.error(f"일괄 좌표 변환 실패: {e}")
            raise _internal_error("좌표 변환에 실패했습니다.") from e

    async def get_geocode_stats(self) -> GeocodeStats:
        try:
            with tracked_session(self.session_factory) as session:
                return GeocodeWorker(JobRepository(session), self.resolver).get_stats()
        except Exception as e:
            logger.error(f"좌표 변환 현황 조회 실패: {e}")
            raise _internal_error("좌표 변환 현황을 불러오지 못했습니다.") from e


# 싱글톤
_controller: SyncController | None = None


def get_sync_controller() -> SyncController:
    """컨트롤러 싱글톤"""
    global _controller
    if _controller is None:
        _controller = SyncController()
    return _controller
