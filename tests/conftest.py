"""
테스트 공용 설정

인메모리 SQLite 엔진, 저장소, 원본 레코드 팩토리, 가짜 수집 클라이언트/지오코딩 리졸버
"""

from typing import Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from adapters.data_go_kr_client import SourceFetchResult
from adapters.db_client import init_db
from adapters.job_repository import JobRepository
from schemas.jobs import GeocodeStatus, NormalizedCompany, NormalizedJob
from schemas.sync import GeocodingResult
from services.geo.address_parser import parse_korean_address


def _make_raw(**overrides: Any) -> dict[str, Any]:
    """data.go.kr 원본 레코드 1건"""
    raw = {
        "rno": "1001",
        "busplaName": "행복나눔복지관",
        "jobNm": "사무보조원",
        "empType": "상용직",
        "enterType": "신입",
        "salaryType": "월급",
        "salary": "2,100,000",
        "reqCareer": "무관",
        "reqEduc": "고졸",
        "compAddr": "서울특별시 강남구 테헤란로 123",
        "cntctNo": "02-123-4567",
        "regagnName": "서울지사",
        "offerregDt": "20240301",
        "regDt": "2024-03-02",
        "termDate": "2024-03-01~2024-03-31",
        "envEyesight": "일상적 활동 가능",
    }
    raw.update(overrides)
    return raw


class FakeSourceClient:
    """fetch_all 결과를 고정으로 돌려주는 수집 클라이언트"""

    def __init__(self, items: list[dict[str, Any]], error: str | None = None):
        self.items = items
        self.error = error
        self.closed = False

    async def fetch_all(self, max_pages: int = 10) -> SourceFetchResult:
        return SourceFetchResult(
            items=list(self.items),
            total_count=len(self.items),
            pages_fetched=1 if self.items else 0,
            error=self.error,
        )

    async def close(self) -> None:
        self.closed = True


class FakeResolver:
    """주소별 호출을 기록하고 고정 결과를 반환하는 리졸버"""

    def __init__(self, result: GeocodingResult | None = None, error: Exception | None = None):
        self.result = result
        self.error = error
        self.calls: list[str] = []

    async def resolve(self, address: str | None) -> GeocodingResult | None:
        self.calls.append(address)
        if self.error:
            raise self.error
        return self.result

    async def close(self) -> None:
        pass


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def repository(session):
    return JobRepository(session)


@pytest.fixture
def make_raw():
    return _make_raw


@pytest.fixture
def fake_source_client():
    return FakeSourceClient


@pytest.fixture
def fake_resolver():
    return FakeResolver


@pytest.fixture
def seoul_result():
    return GeocodingResult(latitude=37.5, longitude=127.03, formatted_address="서울 강남구", provider="kakao")


@pytest.fixture
def add_job(repository):
    """사업장 + 채용공고를 바로 저장 (좌표가 주어지면 SUCCESS로 기록)"""

    def _add_job(
        external_id: str,
        title: str = "사무보조원",
        company_name: str | None = None,
        address: str | None = "서울특별시 강남구 테헤란로 1",
        latitude: float | None = None,
        longitude: float | None = None,
        **job_fields: Any,
    ):
        company_external_id = f"company-{company_name or external_id}"
        existing = repository.get_company_by_external_id(company_external_id)
        if existing:
            return repository.create_job(NormalizedJob(external_id=external_id, title=title, **job_fields), existing.id)

        parts = parse_korean_address(address)
        company = repository.create_company(
            NormalizedCompany(
                external_id=company_external_id,
                name=company_name or f"사업장-{external_id}",
                address=address,
            ),
            parts.city,
            parts.district,
        )
        if latitude is not None and longitude is not None:
            repository.update_company_geocode(company.id, GeocodeStatus.SUCCESS, latitude, longitude)
        return repository.create_job(NormalizedJob(external_id=external_id, title=title, **job_fields), company.id)

    return _add_job
