"""DB 클라이언트 - SQLAlchemy 엔진 / 세션 팩토리"""

import logging
import os

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from adapters.db_models import Base

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///./jobs.db"

# 엔진 / 세션 팩토리 (싱글톤)
_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def get_engine() -> Engine:
    """DB 엔진 싱글톤"""
    global _engine
    if _engine is None:
        database_url = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
        connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
        _engine = create_engine(database_url, pool_pre_ping=True, connect_args=connect_args)
        logger.info(f"✅ DB 엔진 초기화 완료: {_engine.url.render_as_string(hide_password=True)}")
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """세션 팩토리 싱글톤"""
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(bind=get_engine(), expire_on_commit=False)
    return _session_factory


def init_db(engine: Engine | None = None) -> None:
    """테이블 생성 (없는 테이블만)"""
    Base.metadata.create_all(engine or get_engine())
    logger.info("DB 테이블 확인 완료")


def dispose_engine() -> None:
    """엔진 종료"""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("DB 엔진 종료")
