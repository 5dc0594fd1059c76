"""동기화 / 좌표 재시도 1회 실행

사용법:
    python -m scheduler.run sync      # data.go.kr 동기화
    python -m scheduler.run geocode   # PENDING 사업장 좌표 재시도
"""

import asyncio
import logging
import sys

from dotenv import load_dotenv

from adapters.db_client import dispose_engine, get_session_factory, init_db
from adapters.job_repository import JobRepository
from services.geo.resolver import get_geocoding_resolver
from services.ingest.geocode_worker import GeocodeWorker
from services.ingest.sync_service import SyncService

logger = logging.getLogger(__name__)

COMMANDS = ("sync", "geocode")


async def run_sync() -> bool:
    resolver = get_geocoding_resolver()
    session = get_session_factory()()
    try:
        repository = JobRepository(session)
        service = SyncService(repository, geocode_worker=GeocodeWorker(repository, resolver))
        result = await service.run_sync()
    finally:
        session.close()
        await resolver.close()

    if result.success:
        logger.info(f"동기화 성공: {result.stats.model_dump()}")
    else:
        logger.error(f"동기화 실패: {result.error}")
    return result.success


async def run_geocode() -> bool:
    resolver = get_geocoding_resolver()
    session = get_session_factory()()
    try:
        processed = await GeocodeWorker(JobRepository(session), resolver).geocode_pending()
    finally:
        session.close()
        await resolver.close()

    logger.info(f"좌표 재시도 완료: {processed}곳")
    return True


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    command = args[0] if args else "sync"
    if command not in COMMANDS:
        print(f"usage: python -m scheduler.run [{'|'.join(COMMANDS)}]", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    load_dotenv(".env.jobs")
    load_dotenv()

    init_db()
    try:
        runner = run_sync if command == "sync" else run_geocode
        success = asyncio.run(runner())
    finally:
        dispose_engine()
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
