"""데이터 동기화 서비스 - data.go.kr 수집 → 정규화 → 저장 → 좌표 변환

상태: (로그 없음) → RUNNING → COMPLETED | FAILED
SyncLog는 시작 시 1회 생성, 종료 시 1회 갱신한다. 중간에 프로세스가 죽으면 RUNNING으로 남는다.
"""

import asyncio
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from adapters.data_go_kr_client import DataGoKrClient, SourceFetchError
from adapters.db_models import Company
from adapters.job_repository import JobRepository
from schemas.jobs import NormalizedCompany
from schemas.sync import SyncResult, SyncStats
from services.geo.address_parser import parse_korean_address
from services.ingest.geocode_worker import GeocodeWorker
from services.ingest.normalizer import normalize_job_data
from services.jobs.facet_cache import FILTER_CACHE_KEY, FacetCache, get_facet_cache

logger = logging.getLogger(__name__)

SYNC_SOURCE = "data.go.kr"


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    try:
        return int(value) if value else default
    except ValueError:
        logger.warning(f"{name} 값이 정수가 아닙니다: {value!r}, 기본값 {default} 사용")
        return default


@dataclass
class SyncConfig:
    """동기화 설정"""

    max_pages: int = field(default_factory=lambda: _env_int("SYNC_MAX_PAGES", 10))
    record_delay: float = 0.1  # 레코드 처리 후 대기 (지오코딩 제공자 rate limit 대응)
    inline_geocode: bool = True  # 신규 사업장 생성 직후 즉시 좌표 변환
    stale_after_minutes: int = field(default_factory=lambda: _env_int("SYNC_STALE_AFTER_MINUTES", 120))


class SyncAlreadyRunningError(Exception):
    """다른 동기화가 진행 중"""


class SyncService:
    """data.go.kr → DB 동기화 오케스트레이터"""

    def __init__(
        self,
        repository: JobRepository,
        source_client_factory: Callable[[], DataGoKrClient] = DataGoKrClient,
        geocode_worker: GeocodeWorker | None = None,
        facet_cache: FacetCache | None = None,
        config: SyncConfig | None = None,
    ):
        self.repository = repository
        self.source_client_factory = source_client_factory
        self.geocode_worker = geocode_worker or GeocodeWorker(repository)
        self.facet_cache = facet_cache or get_facet_cache()
        self.config = config or SyncConfig()

    def _guard_single_flight(self) -> None:
        """RUNNING 로그가 있으면 중복 실행 거부 (오래된 RUNNING은 중단된 것으로 보고 FAILED 처리)"""
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        stale_before = now - timedelta(minutes=self.config.stale_after_minutes)

        for log in self.repository.find_running_sync_logs(SYNC_SOURCE):
            if log.started_at > stale_before:
                raise SyncAlreadyRunningError(f"동기화가 이미 진행 중입니다 (sync_log_id={log.id})")
            logger.warning(f"중단된 동기화 로그 정리: sync_log_id={log.id}, started_at={log.started_at}")
            self.repository.fail_sync_log(log.id, "abandoned: 완료 기록 없이 중단된 동기화")

    async def run_sync(self) -> SyncResult:
        """전체 동기화 1회 실행"""
        stats = SyncStats()

        try:
            self._guard_single_flight()
        except SyncAlreadyRunningError as e:
            logger.warning(str(e))
            return SyncResult(success=False, stats=stats, error=str(e))

        sync_log = self.repository.create_sync_log(SYNC_SOURCE)
        sync_log_id = sync_log.id
        logger.info(f"data.go.kr 동기화 시작 (sync_log_id={sync_log_id})")

        client: DataGoKrClient | None = None
        try:
            client = self.source_client_factory()
            fetched = await client.fetch_all(max_pages=self.config.max_pages)
            if fetched.error and not fetched.items:
                raise SourceFetchError(fetched.error)

            stats.total = len(fetched.items)
            logger.info(f"수집 {stats.total}건 (API totalCount={fetched.total_count})")

            for raw in fetched.items:
                await self._process_record_safely(raw, stats)
                await asyncio.sleep(self.config.record_delay)

            self.repository.complete_sync_log(sync_log_id, stats)
            self.facet_cache.invalidate(FILTER_CACHE_KEY)
            logger.info(f"동기화 완료: {stats.model_dump()}")
            return SyncResult(success=True, stats=stats, sync_log_id=sync_log_id)

        except Exception as e:
            error_message = str(e) or e.__class__.__name__
            logger.error(f"동기화 실패: {error_message}")
            self.repository.rollback()
            self.repository.fail_sync_log(sync_log_id, error_message, stats)
            return SyncResult(success=False, stats=stats, error=error_message, sync_log_id=sync_log_id)

        finally:
            if client is not None:
                await client.close()

    async def _process_record_safely(self, raw: dict[str, Any], stats: SyncStats) -> None:
        """레코드 단위 실패는 집계만 하고 계속 진행"""
        try:
            created = await self.process_record(raw)
        except Exception as e:
            logger.error(f"레코드 처리 실패 ({raw.get('busplaName')} / {raw.get('jobNm')}): {e}")
            self.repository.rollback()
            stats.failed += 1
            return

        if created:
            stats.created += 1
        else:
            stats.updated += 1

    async def process_record(self, raw: dict[str, Any]) -> bool:
        """레코드 1건 저장 - 신규 채용공고면 True, 기존 공고 갱신이면 False"""
        record = normalize_job_data(raw)
        company = await self._resolve_company(record.company)

        existing = self.repository.get_job_by_external_id(record.job.external_id)
        if existing:
            self.repository.update_job(existing.id, record.job)
            return False

        self.repository.create_job(record.job, company.id)
        return True

    async def _resolve_company(self, normalized: NormalizedCompany) -> Company:
        """external_id로 기존 사업장 조회, 없으면 PENDING으로 생성 (기존 사업장 정보는 갱신하지 않음)"""
        if normalized.external_id:
            company = self.repository.get_company_by_external_id(normalized.external_id)
            if company:
                return company

        parts = parse_korean_address(normalized.address)
        company = self.repository.create_company(normalized, parts.city, parts.district)

        if self.config.inline_geocode and normalized.address:
            await self.geocode_worker.geocode_company(company.id, normalized.address)

        return company
