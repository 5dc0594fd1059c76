from datetime import date

import pytest

from schemas.jobs import EmploymentType
from services.ingest.normalizer import (
    build_job_external_id,
    map_employment_type,
    normalize_job_data,
    parse_date,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("정규직", EmploymentType.FULL_TIME),
        ("상용직", EmploymentType.FULL_TIME),
        ("계약직(1년)", EmploymentType.CONTRACT),
        ("기간제 근로자", EmploymentType.CONTRACT),
        ("파트타임", EmploymentType.PART_TIME),
        ("시간제 근무", EmploymentType.PART_TIME),
        ("아르바이트", EmploymentType.PART_TIME),
        ("인턴", EmploymentType.INTERNSHIP),
        ("청년인턴십", EmploymentType.INTERNSHIP),
        ("임시직", EmploymentType.TEMPORARY),
        ("일용직", EmploymentType.TEMPORARY),
        ("기타", EmploymentType.OTHER),
        ("", EmploymentType.OTHER),
        (None, EmploymentType.OTHER),
    ],
)
def test_map_employment_type(raw, expected):
    assert map_employment_type(raw) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2024.03.15", date(2024, 3, 15)),
        ("2024-03-15", date(2024, 3, 15)),
        ("20240315", date(2024, 3, 15)),
        (20240315, date(2024, 3, 15)),
        ("2024-03-01~2024-03-31", date(2024, 3, 31)),
        ("20240301 ~ 20240415", date(2024, 4, 15)),
        (" 2024.03.15 ", date(2024, 3, 15)),
    ],
)
def test_parse_date_formats(value, expected):
    assert parse_date(value) == expected


@pytest.mark.parametrize("value", [None, "", "상시채용", "2024.02.30", "2024/03/15", "2024-03-01~", "2024.3.5"])
def test_parse_date_unparseable_is_none(value):
    assert parse_date(value) is None


def test_normalize_full_record(make_raw):
    record = normalize_job_data(make_raw())

    assert record.company.external_id == "company-행복나눔복지관"
    assert record.company.name == "행복나눔복지관"
    assert record.company.address == "서울특별시 강남구 테헤란로 123"
    assert record.company.phone == "02-123-4567"

    job = record.job
    assert job.external_id == "1001"
    assert job.title == "사무보조원"
    assert job.category == "사무보조원"
    assert job.employment_type == EmploymentType.FULL_TIME
    assert job.salary == "2,100,000"
    assert job.salary_type == "월급"
    assert job.work_location == "서울특별시 강남구 테헤란로 123"
    assert job.deadline == date(2024, 3, 31)
    assert job.posted_at == date(2024, 3, 2)
    assert job.application_phone == "02-123-4567"
    assert job.is_remote_available is False


def test_description_lists_labelled_fields_in_order(make_raw):
    job = normalize_job_data(make_raw()).job
    assert job.description == "[요구경력] 무관\n[요구학력] 고졸\n[입사형태] 신입\n[담당기관] 서울지사"


def test_description_none_when_no_fields(make_raw):
    raw = make_raw(reqCareer=None, reqEduc="", enterType=None, regagnName=None)
    assert normalize_job_data(raw).job.description is None


def test_work_environment_none_when_all_missing(make_raw):
    raw = make_raw(envEyesight=None)
    assert normalize_job_data(raw).job.work_environment is None


def test_work_environment_maps_source_fields(make_raw):
    raw = make_raw(envBothHands="양손작업 가능", envLstnTalk="듣고 말하기 어려움 없음")
    env = normalize_job_data(raw).job.work_environment

    assert env.both_hands == "양손작업 가능"
    assert env.eyesight == "일상적 활동 가능"
    assert env.listen_talk == "듣고 말하기 어려움 없음"
    assert env.stand_walk is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"jobNm": "재택 상담원"},
        {"compAddr": "재택근무 (경기도 수원시)"},
    ],
)
def test_remote_keyword_in_title_or_address(make_raw, overrides):
    assert normalize_job_data(make_raw(**overrides)).job.is_remote_available is True


def test_posted_at_falls_back_to_offer_date(make_raw):
    raw = make_raw(regDt=None, offerregDt="20240301")
    assert normalize_job_data(raw).job.posted_at == date(2024, 3, 1)


def test_external_id_prefers_rno_then_rnum(make_raw):
    assert build_job_external_id(make_raw(rno=None, rnum=77)) == "77"
    assert build_job_external_id(make_raw(rno="5", rnum="77")) == "5"


def test_external_id_composite_when_no_row_number(make_raw):
    raw = make_raw(rno=None, offerregDt="20240301")
    assert build_job_external_id(raw) == "행복나눔복지관-20240301-사무보조원"


def test_external_id_truncated_to_100(make_raw):
    raw = make_raw(rno=None, busplaName="가" * 120)
    external_id = normalize_job_data(raw).job.external_id
    assert len(external_id) == 100
    assert external_id == "가" * 100


def test_missing_company_and_title_use_defaults(make_raw):
    record = normalize_job_data(make_raw(busplaName=None, jobNm="  "))

    assert record.company.name == "미상"
    assert record.company.external_id is None
    assert record.job.title == "채용공고"
    assert record.job.category is None
