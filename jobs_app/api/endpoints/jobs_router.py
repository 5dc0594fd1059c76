"""채용공고 API 라우터"""

from fastapi import APIRouter, Depends, Query

from controllers.jobs_controller import JobsController, get_jobs_controller
from schemas.common import ApiResponse, ResponseCode
from schemas.jobs import (
    EmploymentType,
    JobFilters,
    JobListResponse,
    JobQueryParams,
    JobResponse,
    MapMarker,
    SortField,
    SortOrder,
    WorkEnvironment,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])

MAX_PAGE_SIZE = 100


def get_job_query_params(
    page: int = Query(default=1, ge=1, description="페이지 번호"),
    limit: int = Query(default=20, ge=1, description="페이지 크기 (최대 100)"),
    sort_field: SortField = Query(default=SortField.UPDATED_AT, alias="sortField"),
    sort_order: SortOrder = Query(default=SortOrder.DESC, alias="sortOrder"),
    is_remote_available: bool | None = Query(default=None, alias="isRemoteAvailable"),
    category: str | None = Query(default=None),
    employment_type: EmploymentType | None = Query(default=None, alias="employmentType"),
    salary_type: str | None = Query(default=None, alias="salaryType"),
    city: str | None = Query(default=None),
    district: str | None = Query(default=None),
    query: str | None = Query(default=None, description="제목/설명/사업장명 검색어"),
    user_lat: float | None = Query(default=None, alias="userLat"),
    user_lng: float | None = Query(default=None, alias="userLng"),
    max_distance: float | None = Query(default=None, alias="maxDistance", description="최대 거리 (km)"),
    env_both_hands: str | None = Query(default=None, alias="envBothHands"),
    env_eyesight: str | None = Query(default=None, alias="envEyesight"),
    env_handwork: str | None = Query(default=None, alias="envHandwork"),
    env_lift_power: str | None = Query(default=None, alias="envLiftPower"),
    env_listen_talk: str | None = Query(default=None, alias="envListenTalk"),
    env_stand_walk: str | None = Query(default=None, alias="envStandWalk"),
) -> JobQueryParams:
    """쿼리스트링 → 조회 파라미터 (limit은 100으로 제한)"""
    work_environment = WorkEnvironment(
        both_hands=env_both_hands,
        eyesight=env_eyesight,
        handwork=env_handwork,
        lift_power=env_lift_power,
        listen_talk=env_listen_talk,
        stand_walk=env_stand_walk,
    )
    has_env_filter = any(value is not None for value in work_environment.model_dump().values())

    return JobQueryParams(
        page=page,
        limit=min(limit, MAX_PAGE_SIZE),
        sort_field=sort_field,
        sort_order=sort_order,
        filters=JobFilters(
            # 원격 근무 필터는 true일 때만 적용
            is_remote_available=True if is_remote_available else None,
            category=category or None,
            employment_type=employment_type,
            salary_type=salary_type or None,
            city=city or None,
            district=district or None,
            query=query or None,
            work_environment=work_environment if has_env_filter else None,
        ),
        user_lat=user_lat,
        user_lng=user_lng,
        max_distance=max_distance,
    )


@router.get(
    "",
    response_model=ApiResponse[JobListResponse],
    summary="채용공고 목록 조회",
    description="필터 / 정렬 / 페이지네이션 / 거리 계산이 적용된 채용공고 목록과 필터 선택지를 반환합니다.",
)
async def list_jobs(
    params: JobQueryParams = Depends(get_job_query_params),
    controller: JobsController = Depends(get_jobs_controller),
) -> ApiResponse[JobListResponse]:
    result = await controller.list_jobs(params)
    return ApiResponse(code=ResponseCode.OK, data=result)


@router.get(
    "/markers",
    response_model=ApiResponse[list[MapMarker]],
    summary="지도 마커 조회",
    description="현재 조건의 채용공고 중 좌표가 있는 공고만 지도 마커로 반환합니다.",
)
async def list_job_markers(
    params: JobQueryParams = Depends(get_job_query_params),
    controller: JobsController = Depends(get_jobs_controller),
) -> ApiResponse[list[MapMarker]]:
    markers = await controller.list_markers(params)
    return ApiResponse(code=ResponseCode.OK, data=markers)


@router.get(
    "/{job_id}",
    response_model=ApiResponse[JobResponse],
    summary="채용공고 상세 조회",
)
async def get_job(
    job_id: int,
    controller: JobsController = Depends(get_jobs_controller),
) -> ApiResponse[JobResponse]:
    """채용공고 상세 조회 (없으면 404)"""
    job = await controller.get_job(job_id)
    return ApiResponse(code=ResponseCode.OK, data=job)
