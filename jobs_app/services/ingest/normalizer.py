"""공공데이터 원본 레코드 → 사업장/채용공고 정규화 (순수 함수)

원본 필드
    rno / rnum      연번
    offerregDt      구인신청일
    regDt           등록일
    termDate        모집기간 (마감일, "시작~끝" 범위일 수 있음)
    busplaName      사업장명
    jobNm           모집직종
    empType         고용형태
    enterType       입사형태
    salaryType      임금형태
    salary          임금
    reqCareer       요구경력
    reqEduc         요구학력
    compAddr        사업장 주소
    cntctNo         연락처
    regagnName      담당기관
    env*            작업환경 (양손/시력/수작업/들기/듣기·말하기/서기·걷기)
"""

import re
from datetime import date
from typing import Any

from schemas.jobs import (
    WORK_ENVIRONMENT_FIELDS,
    EmploymentType,
    NormalizedCompany,
    NormalizedJob,
    NormalizedRecord,
    WorkEnvironment,
)

EXTERNAL_ID_MAX_LENGTH = 100
COMPANY_EXTERNAL_ID_PREFIX = "company-"
DEFAULT_COMPANY_NAME = "미상"
DEFAULT_JOB_TITLE = "채용공고"
REMOTE_KEYWORD = "재택"

# 먼저 매칭되는 항목 우선
EMPLOYMENT_TYPE_KEYWORDS: list[tuple[str, EmploymentType]] = [
    ("정규직", EmploymentType.FULL_TIME),
    ("상용직", EmploymentType.FULL_TIME),
    ("계약직", EmploymentType.CONTRACT),
    ("기간제", EmploymentType.CONTRACT),
    ("파트타임", EmploymentType.PART_TIME),
    ("시간제", EmploymentType.PART_TIME),
    ("아르바이트", EmploymentType.PART_TIME),
    ("인턴", EmploymentType.INTERNSHIP),
    ("인턴십", EmploymentType.INTERNSHIP),
    ("임시직", EmploymentType.TEMPORARY),
    ("일용직", EmploymentType.TEMPORARY),
]

# (원본 필드, 라벨)
DESCRIPTION_FIELDS = [
    ("reqCareer", "요구경력"),
    ("reqEduc", "요구학력"),
    ("enterType", "입사형태"),
    ("regagnName", "담당기관"),
]

_DASHED_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_COMPACT_DATE = re.compile(r"^(\d{4})(\d{2})(\d{2})$")


def _clean(value: Any) -> str | None:
    """공백/빈 값 → None, 숫자 → 문자열"""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def map_employment_type(raw: str | None) -> EmploymentType:
    """고용형태 원문 → EmploymentType (부분 문자열 매칭)"""
    if not raw:
        return EmploymentType.OTHER
    for keyword, employment_type in EMPLOYMENT_TYPE_KEYWORDS:
        if keyword in raw:
            return employment_type
    return EmploymentType.OTHER


def parse_date(value: Any) -> date | None:
    """날짜 문자열 파싱 (YYYY.MM.DD / YYYY-MM-DD / YYYYMMDD / 시작~끝)

    범위는 끝 날짜를 사용한다. 해석할 수 없으면 None.
    """
    text = _clean(value)
    if not text:
        return None

    if "~" in text:
        end = text.split("~", 1)[1].strip()
        return parse_date(end) if end else None

    match = _DASHED_DATE.match(text.replace(".", "-")) or _COMPACT_DATE.match(text)
    if not match:
        return None

    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None


def build_description(raw: dict[str, Any]) -> str | None:
    lines = []
    for field_name, label in DESCRIPTION_FIELDS:
        value = _clean(raw.get(field_name))
        if value:
            lines.append(f"[{label}] {value}")
    return "\n".join(lines) if lines else None


def build_work_environment(raw: dict[str, Any]) -> WorkEnvironment | None:
    values = {name: _clean(raw.get(source)) for name, source in WORK_ENVIRONMENT_FIELDS.items()}
    if not any(values.values()):
        return None
    return WorkEnvironment(**values)


def is_remote_available(raw: dict[str, Any]) -> bool:
    """주소 또는 직종명에 '재택'이 들어가면 재택 가능으로 간주 (약한 휴리스틱)"""
    address = _clean(raw.get("compAddr")) or ""
    job_name = _clean(raw.get("jobNm")) or ""
    return REMOTE_KEYWORD in address or REMOTE_KEYWORD in job_name


def build_job_external_id(raw: dict[str, Any]) -> str:
    """연번이 있으면 연번, 없으면 사업장명-신청일-직종 조합 (100자 제한)"""
    row_id = _clean(raw.get("rno")) or _clean(raw.get("rnum"))
    if row_id:
        external_id = row_id
    else:
        parts = [_clean(raw.get(key)) or "" for key in ("busplaName", "offerregDt", "jobNm")]
        external_id = "-".join(parts)
    return external_id[:EXTERNAL_ID_MAX_LENGTH]


def build_company_external_id(raw: dict[str, Any]) -> str | None:
    name = _clean(raw.get("busplaName"))
    return f"{COMPANY_EXTERNAL_ID_PREFIX}{name}" if name else None


def normalize_job_data(raw: dict[str, Any]) -> NormalizedRecord:
    """원본 레코드 1건 정규화"""
    address = _clean(raw.get("compAddr"))
    phone = _clean(raw.get("cntctNo"))
    job_name = _clean(raw.get("jobNm"))

    company = NormalizedCompany(
        external_id=build_company_external_id(raw),
        name=_clean(raw.get("busplaName")) or DEFAULT_COMPANY_NAME,
        address=address,
        phone=phone,
    )

    job = NormalizedJob(
        external_id=build_job_external_id(raw),
        title=job_name or DEFAULT_JOB_TITLE,
        description=build_description(raw),
        category=job_name,
        employment_type=map_employment_type(_clean(raw.get("empType"))),
        salary=_clean(raw.get("salary")),
        salary_type=_clean(raw.get("salaryType")),
        work_environment=build_work_environment(raw),
        is_remote_available=is_remote_available(raw),
        work_location=address,
        deadline=parse_date(raw.get("termDate")),
        posted_at=parse_date(raw.get("regDt")) or parse_date(raw.get("offerregDt")),
        application_phone=phone,
    )

    return NormalizedRecord(company=company, job=job)
