"""채용공고 조회 서비스 - 필터 / 정렬 / 페이지네이션 / 거리 계산"""

import logging
import math

from adapters.db_models import Job
from adapters.job_repository import JobRepository
from schemas.jobs import (
    WORK_ENVIRONMENT_FIELDS,
    FilterFacets,
    JobListResponse,
    JobQueryParams,
    JobResponse,
    MapMarker,
    PaginationInfo,
    SortField,
    SortOrder,
)
from services.geo.distance import calculate_distance
from services.jobs.facet_cache import FILTER_CACHE_KEY, FacetCache, get_facet_cache

logger = logging.getLogger(__name__)


def _distance_to(job: Job, user_lat: float, user_lng: float) -> float | None:
    company = job.company
    if company.latitude is None or company.longitude is None:
        return None
    return calculate_distance(user_lat, user_lng, company.latitude, company.longitude)


def _to_response(job: Job, distance: float | None = None) -> JobResponse:
    return JobResponse.model_validate(job).model_copy(update={"distance": distance})


def sort_by_distance(
    rows: list[tuple[Job, float | None]],
    sort_order: SortOrder,
) -> list[tuple[Job, float | None]]:
    """거리순 정렬 - 좌표가 없는 공고는 정렬 방향과 무관하게 맨 뒤"""
    located = [row for row in rows if row[1] is not None]
    unlocated = [row for row in rows if row[1] is None]
    located.sort(key=lambda row: row[1], reverse=sort_order == SortOrder.DESC)
    return located + unlocated


def build_map_markers(jobs: list[JobResponse]) -> list[MapMarker]:
    """지도 표시용 마커 (좌표가 있는 공고만)"""
    return [
        MapMarker(
            id=job.id,
            lat=job.company.latitude,
            lng=job.company.longitude,
            title=job.title,
            company=job.company.name,
        )
        for job in jobs
        if job.company.latitude is not None and job.company.longitude is not None
    ]


class JobQueryService:
    """채용공고 목록/상세 조회"""

    def __init__(self, repository: JobRepository, facet_cache: FacetCache | None = None):
        self.repository = repository
        self.facet_cache = facet_cache or get_facet_cache()

    def get_jobs(self, params: JobQueryParams) -> JobListResponse:
        skip = (params.page - 1) * params.limit
        has_location = params.user_lat is not None and params.user_lng is not None

        if params.sort_field == SortField.DISTANCE and has_location:
            jobs, total = self._get_jobs_by_distance(params, skip)
        else:
            # 거리 정렬인데 사용자 좌표가 없으면 최신순
            sort_field = SortField.UPDATED_AT if params.sort_field == SortField.DISTANCE else params.sort_field
            rows = self.repository.find_jobs(
                params.filters,
                sort_field=sort_field,
                sort_order=params.sort_order,
                skip=skip,
                limit=params.limit,
            )
            total = self.repository.count_jobs(params.filters)
            jobs = [
                _to_response(job, _distance_to(job, params.user_lat, params.user_lng) if has_location else None)
                for job in rows
            ]

        return JobListResponse(
            jobs=jobs,
            pagination=PaginationInfo(
                page=params.page,
                limit=params.limit,
                total=total,
                total_pages=math.ceil(total / params.limit) if params.limit else 0,
            ),
            filters=self.get_filter_options(),
        )

    def _get_jobs_by_distance(self, params: JobQueryParams, skip: int) -> tuple[list[JobResponse], int]:
        """거리순은 저장된 컬럼이 아니므로 필터 결과 전체를 읽어 계산 후 정렬/슬라이스"""
        all_jobs = self.repository.find_jobs(params.filters)
        rows = [(job, _distance_to(job, params.user_lat, params.user_lng)) for job in all_jobs]

        if params.max_distance is not None:
            rows = [row for row in rows if row[1] is None or row[1] <= params.max_distance]

        rows = sort_by_distance(rows, params.sort_order)
        page = rows[skip : skip + params.limit]
        return [_to_response(job, distance) for job, distance in page], len(rows)

    def get_job_by_id(self, job_id: int) -> JobResponse | None:
        job = self.repository.get_job(job_id)
        if job is None:
            return None
        return _to_response(job)

    # ---------- 필터 선택지 ----------

    def get_filter_options(self) -> FilterFacets:
        """필터 선택지 (5분 캐시)"""
        return self.facet_cache.get_or_load(FILTER_CACHE_KEY, self._load_filter_options)

    def _load_filter_options(self) -> FilterFacets:
        logger.debug("필터 선택지 집계 쿼리 실행")
        work_environments = {}
        for name in WORK_ENVIRONMENT_FIELDS:
            values = self.repository.distinct_job_values(f"env_{name}")
            if values:
                work_environments[name] = values

        return FilterFacets(
            categories=self.repository.distinct_job_values("category"),
            cities=self.repository.distinct_cities(),
            employment_types=self.repository.distinct_employment_types(),
            salary_types=self.repository.distinct_job_values("salary_type"),
            work_environments=work_environments,
        )

