"""Health Check Endpoint."""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from adapters.db_client import get_session_factory

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    message: str
    database: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    session_factory: sessionmaker[Session] = Depends(get_session_factory),
) -> HealthResponse:
    """API + DB 연결 상태 (DB 장애 시 status=degraded)"""
    try:
        with session_factory() as session:
            session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"DB 헬스체크 실패: {e}")
        return HealthResponse(status="degraded", message="DB 연결 실패", database="unavailable")

    return HealthResponse(status="ok", message="장애인 채용공고 API 정상 작동 중", database="ok")
