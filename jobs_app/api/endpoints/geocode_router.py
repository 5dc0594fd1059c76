"""사업장 좌표 변환 API 라우터"""

from fastapi import APIRouter, Depends, Query

from controllers.sync_controller import SyncController, get_sync_controller
from schemas.common import ApiResponse, ResponseCode
from schemas.sync import GeocodeBatchResult, GeocodeStats

router = APIRouter(prefix="/geocode", tags=["Geocode"])


@router.post(
    "",
    response_model=ApiResponse[GeocodeBatchResult],
    summary="좌표 일괄 변환",
    description="좌표가 없는 사업장을 최대 50곳 변환합니다. reset=true면 전체 좌표를 초기화한 뒤 진행합니다.",
)
async def geocode_batch(
    reset: bool = Query(default=False, description="전체 좌표 초기화 여부"),
    controller: SyncController = Depends(get_sync_controller),
) -> ApiResponse[GeocodeBatchResult]:
    result = await controller.geocode_batch(reset=reset)
    return ApiResponse(code=ResponseCode.OK, data=result)


@router.get(
    "",
    response_model=ApiResponse[GeocodeStats],
    summary="좌표 변환 현황",
)
async def get_geocode_stats(
    controller: SyncController = Depends(get_sync_controller),
) -> ApiResponse[GeocodeStats]:
    stats = await controller.get_geocode_stats()
    return ApiResponse(code=ResponseCode.OK, data=stats)
