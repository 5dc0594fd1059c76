"""사업장 좌표 변환 작업 - 동기화 중 즉시 처리 / PENDING 재시도 / 일괄 처리"""

import asyncio
import logging

from adapters.job_repository import JobRepository
from schemas.jobs import GeocodeStatus
from schemas.sync import GeocodeBatchResult, GeocodeStats
from services.geo.resolver import GeocodingResolver, get_geocoding_resolver

logger = logging.getLogger(__name__)

PENDING_SWEEP_LIMIT = 100
PENDING_SWEEP_DELAY = 1.0
BATCH_LIMIT = 50
BATCH_DELAY = 0.1


class GeocodeWorker:
    """사업장 주소 → 좌표 변환 후 DB 반영"""

    def __init__(self, repository: JobRepository, resolver: GeocodingResolver | None = None):
        self.repository = repository
        self.resolver = resolver or get_geocoding_resolver()

    async def geocode_company(self, company_id: int, address: str) -> GeocodeStatus:
        """사업장 1곳 좌표 변환 - 예외를 던지지 않고 최종 상태를 반환"""
        try:
            result = await self.resolver.resolve(address)
            if result:
                self.repository.update_company_geocode(
                    company_id, GeocodeStatus.SUCCESS, result.latitude, result.longitude
                )
                return GeocodeStatus.SUCCESS

            self.repository.update_company_geocode(company_id, GeocodeStatus.NOT_FOUND)
            return GeocodeStatus.NOT_FOUND
        except Exception as e:
            logger.error(f"사업장 {company_id} 좌표 변환 실패: {e}")
            self.repository.rollback()
            try:
                self.repository.update_company_geocode(company_id, GeocodeStatus.FAILED)
            except Exception as update_error:
                logger.error(f"사업장 {company_id} FAILED 상태 기록 실패: {update_error}")
                self.repository.rollback()
            return GeocodeStatus.FAILED

    async def geocode_pending(
        self,
        limit: int = PENDING_SWEEP_LIMIT,
        delay: float = PENDING_SWEEP_DELAY,
    ) -> int:
        """PENDING 상태 사업장 재시도 - 처리한 사업장 수 반환"""
        companies = self.repository.find_pending_geocode_companies(limit)
        logger.info(f"좌표 변환 대기 사업장 {len(companies)}곳")

        processed = 0
        for company in companies:
            if not company.address:
                continue
            await self.geocode_company(company.id, company.address)
            processed += 1
            await asyncio.sleep(delay)

        return processed

    async def geocode_missing(
        self,
        limit: int = BATCH_LIMIT,
        reset: bool = False,
        delay: float = BATCH_DELAY,
    ) -> GeocodeBatchResult:
        """좌표가 없는 사업장 일괄 처리 (reset이면 전체 좌표 초기화 후 진행)"""
        if reset:
            count = self.repository.reset_all_coordinates()
            logger.info(f"사업장 좌표 초기화: {count}곳")

        companies = self.repository.find_companies_missing_coordinates(limit)
        logger.info(f"좌표 변환 대상 사업장 {len(companies)}곳")

        result = GeocodeBatchResult(processed=len(companies))
        for company in companies:
            if not company.address:
                continue

            status = await self.geocode_company(company.id, company.address)
            if status == GeocodeStatus.SUCCESS:
                result.updated += 1
            else:
                result.failed += 1
            await asyncio.sleep(delay)

        return result

    def get_stats(self) -> GeocodeStats:
        total = self.repository.count_companies()
        with_coordinates = self.repository.count_companies(with_coordinates=True)
        return GeocodeStats(
            total=total,
            with_coordinates=with_coordinates,
            pending=self.repository.count_companies(with_coordinates=False),
            percent_complete=round(with_coordinates / total * 100) if total else 0,
        )
