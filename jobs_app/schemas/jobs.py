"""채용공고 관련 스키마"""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EmploymentType(str, Enum):
    """고용 형태"""

    FULL_TIME = "FULL_TIME"
    CONTRACT = "CONTRACT"
    PART_TIME = "PART_TIME"
    INTERNSHIP = "INTERNSHIP"
    TEMPORARY = "TEMPORARY"
    OTHER = "OTHER"


class JobStatus(str, Enum):
    """채용공고 상태"""

    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"
    EXPIRED = "EXPIRED"


class GeocodeStatus(str, Enum):
    """좌표 변환 상태"""

    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    NOT_FOUND = "NOT_FOUND"
    FAILED = "FAILED"


class SortField(str, Enum):
    """정렬 기준"""

    UPDATED_AT = "updated_at"
    CREATED_AT = "created_at"
    DEADLINE = "deadline"
    DISTANCE = "distance"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# 작업환경 필드 (스키마 필드명 → 공공데이터 원본 필드명)
WORK_ENVIRONMENT_FIELDS = {
    "both_hands": "envBothHands",
    "eyesight": "envEyesight",
    "handwork": "envHandwork",
    "lift_power": "envLiftPower",
    "listen_talk": "envLstnTalk",
    "stand_walk": "envStndWalk",
}


# ============== 정규화 결과 ==============


class WorkEnvironment(BaseModel):
    """작업환경 (신체 조건 요구사항)"""

    both_hands: str | None = Field(default=None, description="양손 사용")
    eyesight: str | None = Field(default=None, description="시력")
    handwork: str | None = Field(default=None, description="수작업")
    lift_power: str | None = Field(default=None, description="들기")
    listen_talk: str | None = Field(default=None, description="듣기/말하기")
    stand_walk: str | None = Field(default=None, description="서기/걷기")


class NormalizedCompany(BaseModel):
    """정규화된 사업장 정보"""

    external_id: str | None = Field(default=None, description="외부 식별자 (company-사업장명)")
    name: str = Field(..., description="사업장명")
    address: str | None = Field(default=None, description="사업장 주소")
    phone: str | None = Field(default=None, description="연락처")
    email: str | None = Field(default=None, description="이메일")
    website: str | None = Field(default=None, description="홈페이지")


class NormalizedJob(BaseModel):
    """정규화된 채용공고 정보"""

    external_id: str = Field(..., max_length=100, description="외부 식별자")
    title: str = Field(..., description="모집직종")
    description: str | None = Field(default=None, description="상세 설명")
    category: str | None = Field(default=None, description="직종 카테고리")
    employment_type: EmploymentType = Field(default=EmploymentType.OTHER, description="고용형태")
    salary: str | None = Field(default=None, description="임금")
    salary_type: str | None = Field(default=None, description="임금형태")
    work_environment: WorkEnvironment | None = Field(default=None, description="작업환경")
    is_remote_available: bool = Field(default=False, description="재택근무 가능 여부")
    work_location: str | None = Field(default=None, description="근무지")
    deadline: date | None = Field(default=None, description="마감일")
    posted_at: date | None = Field(default=None, description="등록일")
    application_url: str | None = Field(default=None)
    application_email: str | None = Field(default=None)
    application_phone: str | None = Field(default=None)


class NormalizedRecord(BaseModel):
    """원본 레코드 1건의 정규화 결과"""

    company: NormalizedCompany
    job: NormalizedJob


# ============== 조회 모델 ==============


class CompanyResponse(BaseModel):
    """사업장 응답"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str | None = None
    city: str | None = None
    district: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    geocode_status: GeocodeStatus
    phone: str | None = None
    email: str | None = None
    website: str | None = None


class JobResponse(BaseModel):
    """채용공고 응답 (거리 포함)"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    external_id: str | None = None
    title: str
    description: str | None = None
    category: str | None = None
    employment_type: EmploymentType
    salary: str | None = None
    salary_type: str | None = None
    work_environment: WorkEnvironment | None = None
    is_remote_available: bool = False
    work_location: str | None = None
    deadline: date | None = None
    application_url: str | None = None
    application_email: str | None = None
    application_phone: str | None = None
    status: JobStatus
    posted_at: date | None = None
    created_at: datetime
    updated_at: datetime
    company: CompanyResponse
    distance: float | None = Field(default=None, description="사용자 위치로부터의 거리 (km)")


class PaginationInfo(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class FilterFacets(BaseModel):
    """필터 선택지"""

    categories: list[str] = Field(default_factory=list)
    cities: list[str] = Field(default_factory=list)
    employment_types: list[EmploymentType] = Field(default_factory=list)
    salary_types: list[str] = Field(default_factory=list)
    work_environments: dict[str, list[str]] = Field(default_factory=dict, description="작업환경 필드별 선택지")


class JobListResponse(BaseModel):
    jobs: list[JobResponse]
    pagination: PaginationInfo
    filters: FilterFacets


class MapMarker(BaseModel):
    """지도 마커 데이터"""

    id: int
    lat: float
    lng: float
    title: str
    company: str


# ============== 요청 모델 ==============


class JobFilters(BaseModel):
    """채용공고 필터"""

    is_remote_available: bool | None = None
    category: str | None = None
    employment_type: EmploymentType | None = None
    salary_type: str | None = None
    city: str | None = None
    district: str | None = None
    query: str | None = None
    work_environment: WorkEnvironment | None = None


class JobQueryParams(BaseModel):
    """채용공고 목록 조회 파라미터"""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
    sort_field: SortField = SortField.UPDATED_AT
    sort_order: SortOrder = SortOrder.DESC
    filters: JobFilters = Field(default_factory=JobFilters)
    user_lat: float | None = None
    user_lng: float | None = None
    max_distance: float | None = Field(default=None, description="최대 거리 (km)")
