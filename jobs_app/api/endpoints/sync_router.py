"""데이터 동기화 API 라우터"""

from fastapi import APIRouter, Depends

from controllers.sync_controller import SyncController, get_sync_controller
from schemas.common import ApiResponse, ResponseCode
from schemas.sync import SyncResult, SyncStatusResponse

router = APIRouter(prefix="/sync", tags=["Sync"])


@router.post(
    "",
    response_model=ApiResponse[SyncResult],
    summary="data.go.kr 동기화 실행",
    description="장애인 구인정보를 수집해 DB에 반영합니다. 이미 실행 중이면 success=false로 응답합니다.",
)
async def run_sync(
    controller: SyncController = Depends(get_sync_controller),
) -> ApiResponse[SyncResult]:
    result = await controller.run_sync()
    return ApiResponse(code=ResponseCode.OK, data=result)


@router.get(
    "",
    response_model=ApiResponse[SyncStatusResponse],
    summary="동기화 현황 조회",
)
async def get_sync_status(
    controller: SyncController = Depends(get_sync_controller),
) -> ApiResponse[SyncStatusResponse]:
    status = await controller.get_sync_status()
    return ApiResponse(code=ResponseCode.OK, data=status)
