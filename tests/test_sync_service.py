from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select, update

import services.ingest.sync_service as sync_module
from adapters.db_models import Company, Job, SyncLog
from schemas.jobs import GeocodeStatus
from schemas.sync import SyncStatus
from services.ingest.geocode_worker import GeocodeWorker
from services.ingest.sync_service import SYNC_SOURCE, SyncConfig, SyncService
from services.jobs.facet_cache import FILTER_CACHE_KEY, FacetCache


@pytest.fixture
def records(make_raw):
    return [
        make_raw(rno="1", busplaName="행복나눔복지관", jobNm="사무보조원"),
        make_raw(rno="2", busplaName="행복나눔복지관", jobNm="바리스타"),
        make_raw(rno="3", busplaName="한빛물류", jobNm="포장원", compAddr="경기도 성남시 분당구 판교로 1"),
    ]


@pytest.fixture
def build_service(repository, fake_source_client, fake_resolver):
    def _build(items=None, error=None, resolver=None, facet_cache=None, client_factory=None, **config):
        client = fake_source_client(items or [], error=error)
        resolver = resolver or fake_resolver()
        service = SyncService(
            repository,
            source_client_factory=client_factory or (lambda: client),
            geocode_worker=GeocodeWorker(repository, resolver),
            facet_cache=facet_cache or FacetCache(),
            config=SyncConfig(max_pages=1, record_delay=0, stale_after_minutes=120, **config),
        )
        return service, client, resolver

    return _build


def _count(session, model):
    return session.scalar(select(func.count()).select_from(model))


async def test_first_sync_creates_everything(build_service, records, session, seoul_result, fake_resolver):
    service, client, _ = build_service(records, resolver=fake_resolver(seoul_result))

    result = await service.run_sync()

    assert result.success is True
    assert result.stats.model_dump() == {"total": 3, "created": 3, "updated": 0, "failed": 0}
    assert _count(session, Job) == 3
    assert _count(session, Company) == 2
    assert client.closed is True

    log = session.get(SyncLog, result.sync_log_id)
    assert log.status == SyncStatus.COMPLETED
    assert log.records_created == 3
    assert log.completed_at is not None


async def test_resync_is_idempotent(build_service, records, session):
    service, _, _ = build_service(records)
    await service.run_sync()

    second = await service.run_sync()

    assert second.success is True
    assert second.stats.model_dump() == {"total": 3, "created": 0, "updated": 3, "failed": 0}
    assert _count(session, Job) == 3
    assert _count(session, Company) == 2


async def test_resync_overwrites_job_fields(build_service, make_raw, repository):
    service, client, _ = build_service([make_raw(rno="1", salary="2,000,000")])
    await service.run_sync()

    client.items = [make_raw(rno="1", salary="2,500,000")]
    await service.run_sync()

    assert repository.get_job_by_external_id("1").salary == "2,500,000"


async def test_new_company_is_geocoded_inline(build_service, records, repository, seoul_result, fake_resolver):
    resolver = fake_resolver(seoul_result)
    service, _, _ = build_service(records, resolver=resolver)

    await service.run_sync()

    company = repository.get_company_by_external_id("company-행복나눔복지관")
    assert company.city == "서울특별시"
    assert company.district == "강남구"
    assert company.geocode_status == GeocodeStatus.SUCCESS
    assert (company.latitude, company.longitude) == (37.5, 127.03)
    # 사업장당 1회
    assert len(resolver.calls) == 2


async def test_existing_company_is_not_geocoded_again(build_service, records, fake_resolver, seoul_result):
    resolver = fake_resolver(seoul_result)
    service, _, _ = build_service(records, resolver=resolver)

    await service.run_sync()
    await service.run_sync()

    assert len(resolver.calls) == 2


async def test_unresolved_company_is_not_found_without_coordinates(build_service, records, repository):
    service, _, _ = build_service(records)

    await service.run_sync()

    company = repository.get_company_by_external_id("company-한빛물류")
    assert company.geocode_status == GeocodeStatus.NOT_FOUND
    assert company.latitude is None
    assert company.longitude is None


async def test_resolver_exception_marks_company_failed(build_service, records, repository, fake_resolver):
    service, _, _ = build_service(records, resolver=fake_resolver(error=RuntimeError("provider down")))

    result = await service.run_sync()

    assert result.success is True
    assert result.stats.created == 3
    company = repository.get_company_by_external_id("company-한빛물류")
    assert company.geocode_status == GeocodeStatus.FAILED


async def test_inline_geocode_disabled_leaves_pending(build_service, records, repository, fake_resolver, seoul_result):
    resolver = fake_resolver(seoul_result)
    service, _, _ = build_service(records, resolver=resolver, inline_geocode=False)

    await service.run_sync()

    assert resolver.calls == []
    company = repository.get_company_by_external_id("company-한빛물류")
    assert company.geocode_status == GeocodeStatus.PENDING


async def test_record_failure_is_counted_and_run_continues(build_service, records, make_raw, session, monkeypatch):
    original = sync_module.normalize_job_data

    def flaky(raw):
        if raw.get("jobNm") == "BROKEN":
            raise ValueError("bad record")
        return original(raw)

    monkeypatch.setattr(sync_module, "normalize_job_data", flaky)
    service, _, _ = build_service([*records, make_raw(rno="4", jobNm="BROKEN")])

    result = await service.run_sync()

    assert result.success is True
    assert result.stats.model_dump() == {"total": 4, "created": 3, "updated": 0, "failed": 1}
    log = session.get(SyncLog, result.sync_log_id)
    assert log.status == SyncStatus.COMPLETED
    assert log.records_failed == 1


async def test_total_fetch_failure_fails_run(build_service, session):
    service, client, _ = build_service([], error="Failed to fetch jobs: HTTP 503")

    result = await service.run_sync()

    assert result.success is False
    assert "HTTP 503" in result.error
    log = session.get(SyncLog, result.sync_log_id)
    assert log.status == SyncStatus.FAILED
    assert "HTTP 503" in log.error_message
    assert log.completed_at is not None
    assert client.closed is True


async def test_partial_fetch_still_processes_items(build_service, records, session):
    service, _, _ = build_service(records, error="Failed to fetch jobs: HTTP 500")

    result = await service.run_sync()

    assert result.success is True
    assert result.stats.created == 3
    assert session.get(SyncLog, result.sync_log_id).status == SyncStatus.COMPLETED


async def test_empty_source_completes_with_zero_records(build_service, session):
    service, _, _ = build_service([])

    result = await service.run_sync()

    assert result.success is True
    assert result.stats.total == 0
    assert session.get(SyncLog, result.sync_log_id).status == SyncStatus.COMPLETED


async def test_missing_api_key_fails_run(build_service, session, monkeypatch):
    monkeypatch.delenv("DATA_GO_KR_API_KEY", raising=False)
    service, _, _ = build_service(client_factory=sync_module.DataGoKrClient)

    result = await service.run_sync()

    assert result.success is False
    assert "DATA_GO_KR_API_KEY" in result.error
    assert session.get(SyncLog, result.sync_log_id).status == SyncStatus.FAILED


async def test_concurrent_run_is_rejected(build_service, records, repository, session):
    running = repository.create_sync_log(SYNC_SOURCE)
    service, _, _ = build_service(records)

    result = await service.run_sync()

    assert result.success is False
    assert "이미 진행 중" in result.error
    assert result.sync_log_id is None
    assert _count(session, SyncLog) == 1
    assert _count(session, Job) == 0
    assert session.get(SyncLog, running.id).status == SyncStatus.RUNNING


async def test_stale_running_log_is_abandoned(build_service, records, repository, session):
    stale = repository.create_sync_log(SYNC_SOURCE)
    three_hours_ago = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(hours=3)
    session.execute(update(SyncLog).where(SyncLog.id == stale.id).values(started_at=three_hours_ago))
    session.commit()
    service, _, _ = build_service(records)

    result = await service.run_sync()

    assert result.success is True
    stale_log = session.get(SyncLog, stale.id)
    assert stale_log.status == SyncStatus.FAILED
    assert "abandoned" in stale_log.error_message


async def test_successful_sync_invalidates_filter_cache(build_service, records):
    cache = FacetCache()
    cache.set(FILTER_CACHE_KEY, "stale facets")
    service, _, _ = build_service(records, facet_cache=cache)

    await service.run_sync()

    assert cache.get(FILTER_CACHE_KEY) is None
