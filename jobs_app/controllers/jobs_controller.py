"""채용공고 API 컨트롤러"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session, sessionmaker

from adapters.db_client import get_session_factory
from adapters.job_repository import JobRepository
from middleware.otel_lgtm_metrics import tracked_session
from schemas.common import NotFoundErrorData, ResponseCode
from schemas.jobs import JobListResponse, JobQueryParams, JobResponse, MapMarker
from services.jobs.facet_cache import FacetCache, get_facet_cache
from services.jobs.query_service import JobQueryService, build_map_markers

logger = logging.getLogger(__name__)


def _internal_error(message: str) -> HTTPException:
    return HTTPException(
        status_code=500,
        detail={"code": ResponseCode.INTERNAL_SERVER_ERROR.value, "data": {"message": message}},
    )


class JobsController:
    """채용공고 API 컨트롤러"""

    def __init__(
        self,
        session_factory: sessionmaker[Session] | None = None,
        facet_cache: FacetCache | None = None,
    ):
        self.session_factory = session_factory or get_session_factory()
        self.facet_cache = facet_cache or get_facet_cache()

    async def list_jobs(self, params: JobQueryParams) -> JobListResponse:
        """채용공고 목록 조회"""
        try:
            with tracked_session(self.session_factory) as session:
                service = JobQueryService(JobRepository(session), self.facet_cache)
                return service.get_jobs(params)
        except Exception as e:
            logger.error(f"채용공고 목록 조회 실패: {e}")
            raise _internal_error("채용공고 목록을 불러오지 못했습니다.") from e

    async def list_markers(self, params: JobQueryParams) -> list[MapMarker]:
        """현재 페이지 채용공고의 지도 마커"""
        result = await self.list_jobs(params)
        return build_map_markers(result.jobs)

    async def get_job(self, job_id: int) -> JobResponse:
        """채용공고 상세 조회"""
        try:
            with tracked_session(self.session_factory) as session:
                job = JobQueryService(JobRepository(session), self.facet_cache).get_job_by_id(job_id)
        except Exception as e:
            logger.error(f"채용공고 상세 조회 실패 (job_id={job_id}): {e}")
            raise _internal_error("채용공고를 불러오지 못했습니다.") from e

        if job is None:
            raise HTTPException(
                status_code=404,
                detail={
                    "code": ResponseCode.NOT_FOUND.value,
                    "data": NotFoundErrorData(resource="job", id=job_id).model_dump(),
                },
            )
        return job


# 싱글톤
_controller: JobsController | None = None


def get_jobs_controller() -> JobsController:
    """컨트롤러 싱글톤"""
    global _controller
    if _controller is None:
        _controller = JobsController()
    return _controller
