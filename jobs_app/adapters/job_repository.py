"""채용공고 저장소 - 사업장/채용공고/동기화 로그 CRUD 및 집계 쿼리"""

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Select, func, or_, select, update
from sqlalchemy.orm import Session

from adapters.db_models import Company, Job, SyncLog
from schemas.jobs import (
    WORK_ENVIRONMENT_FIELDS,
    EmploymentType,
    GeocodeStatus,
    JobFilters,
    JobStatus,
    NormalizedCompany,
    NormalizedJob,
    SortField,
    SortOrder,
)
from schemas.sync import SyncStats, SyncStatus

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _job_values(job: NormalizedJob) -> dict[str, Any]:
    """정규화 결과 → jobs 테이블 컬럼 값 (동기화 시 덮어쓰는 필드만)"""
    env = job.work_environment
    values: dict[str, Any] = {
        "title": job.title,
        "description": job.description,
        "category": job.category,
        "employment_type": job.employment_type,
        "salary": job.salary,
        "salary_type": job.salary_type,
        "is_remote_available": job.is_remote_available,
        "work_location": job.work_location,
        "deadline": job.deadline,
        "posted_at": job.posted_at,
        "application_url": job.application_url,
        "application_email": job.application_email,
        "application_phone": job.application_phone,
    }
    for name in WORK_ENVIRONMENT_FIELDS:
        values[f"env_{name}"] = getattr(env, name) if env else None
    return values


class JobRepository:
    """SQLAlchemy 세션 기반 저장소

    쓰기 메서드는 각각 commit 한다. 실패 시 호출자가 rollback() 후 다음 작업을 계속한다.
    """

    def __init__(self, session: Session):
        self.session = session

    def rollback(self) -> None:
        self.session.rollback()

    # ---------- 사업장 ----------

    def get_company_by_external_id(self, external_id: str) -> Company | None:
        return self.session.scalar(select(Company).where(Company.external_id == external_id))

    def get_company(self, company_id: int) -> Company | None:
        return self.session.get(Company, company_id)

    def create_company(
        self,
        company: NormalizedCompany,
        city: str | None,
        district: str | None,
    ) -> Company:
        row = Company(
            external_id=company.external_id,
            name=company.name,
            address=company.address,
            city=city,
            district=district,
            phone=company.phone,
            email=company.email,
            website=company.website,
            geocode_status=GeocodeStatus.PENDING,
        )
        self.session.add(row)
        self.session.commit()
        return row

    def update_company_geocode(
        self,
        company_id: int,
        status: GeocodeStatus,
        latitude: float | None = None,
        longitude: float | None = None,
    ) -> None:
        """좌표 갱신 - SUCCESS가 아니면 좌표는 항상 NULL로 기록"""
        if status != GeocodeStatus.SUCCESS:
            latitude = longitude = None
        elif latitude is None or longitude is None:
            raise ValueError("SUCCESS 상태에는 위도/경도가 모두 필요합니다.")

        row = self.session.get(Company, company_id)
        if row is None:
            raise LookupError(f"사업장을 찾을 수 없습니다: {company_id}")
        row.geocode_status = status
        row.latitude = latitude
        row.longitude = longitude
        row.updated_at = _utcnow()
        self.session.commit()

    def find_pending_geocode_companies(self, limit: int) -> list[Company]:
        stmt = (
            select(Company)
            .where(Company.geocode_status == GeocodeStatus.PENDING, Company.address.is_not(None))
            .order_by(Company.id)
            .limit(limit)
        )
        return list(self.session.scalars(stmt))

    def find_companies_missing_coordinates(self, limit: int) -> list[Company]:
        stmt = (
            select(Company)
            .where(
                or_(Company.latitude.is_(None), Company.longitude.is_(None)),
                Company.address.is_not(None),
            )
            .order_by(Company.id)
            .limit(limit)
        )
        return list(self.session.scalars(stmt))

    def reset_all_coordinates(self) -> int:
        result = self.session.execute(
            update(Company).values(latitude=None, longitude=None, geocode_status=GeocodeStatus.PENDING)
        )
        self.session.commit()
        # 세션에 남아 있는 인스턴스도 DB 값으로 다시 읽도록
        self.session.expire_all()
        return result.rowcount

    def count_companies(self, with_coordinates: bool | None = None) -> int:
        stmt = select(func.count()).select_from(Company)
        if with_coordinates is True:
            stmt = stmt.where(Company.latitude.is_not(None), Company.longitude.is_not(None))
        elif with_coordinates is False:
            stmt = stmt.where(or_(Company.latitude.is_(None), Company.longitude.is_(None)))
        return self.session.scalar(stmt) or 0

    # ---------- 채용공고 ----------

    def get_job(self, job_id: int) -> Job | None:
        return self.session.get(Job, job_id)

    def get_job_by_external_id(self, external_id: str) -> Job | None:
        return self.session.scalar(select(Job).where(Job.external_id == external_id))

    def create_job(self, job: NormalizedJob, company_id: int) -> Job:
        row = Job(external_id=job.external_id, company_id=company_id, status=JobStatus.ACTIVE, **_job_values(job))
        self.session.add(row)
        self.session.commit()
        return row

    def update_job(self, job_id: int, job: NormalizedJob) -> None:
        """가변 필드 전체 덮어쓰기 (status / company_id는 건드리지 않음)"""
        row = self.session.get(Job, job_id)
        if row is None:
            raise LookupError(f"채용공고를 찾을 수 없습니다: {job_id}")
        for key, value in _job_values(job).items():
            setattr(row, key, value)
        row.updated_at = _utcnow()
        self.session.commit()

    def _filtered_jobs(self, filters: JobFilters) -> Select:
        stmt = select(Job).join(Job.company).where(Job.status == JobStatus.ACTIVE)

        if filters.is_remote_available:
            stmt = stmt.where(Job.is_remote_available.is_(True))
        if filters.category:
            stmt = stmt.where(Job.category == filters.category)
        if filters.employment_type:
            stmt = stmt.where(Job.employment_type == filters.employment_type)
        if filters.salary_type:
            stmt = stmt.where(Job.salary_type == filters.salary_type)
        if filters.city:
            stmt = stmt.where(Company.city == filters.city)
        if filters.district:
            stmt = stmt.where(Company.district == filters.district)
        if filters.work_environment:
            for name in WORK_ENVIRONMENT_FIELDS:
                value = getattr(filters.work_environment, name)
                if value:
                    stmt = stmt.where(getattr(Job, f"env_{name}") == value)
        if filters.query:
            # 사용자가 입력한 % / _ 는 와일드카드가 아닌 문자 그대로 비교
            stmt = stmt.where(
                or_(
                    Job.title.icontains(filters.query, autoescape=True),
                    Job.description.icontains(filters.query, autoescape=True),
                    Company.name.icontains(filters.query, autoescape=True),
                )
            )
        return stmt

    def find_jobs(
        self,
        filters: JobFilters,
        sort_field: SortField | None = None,
        sort_order: SortOrder = SortOrder.DESC,
        skip: int | None = None,
        limit: int | None = None,
    ) -> list[Job]:
        """필터/정렬/페이지네이션 조회 (sort_field가 None이면 정렬 없이 전체)"""
        stmt = self._filtered_jobs(filters)

        if sort_field is not None:
            column = {
                SortField.DEADLINE: Job.deadline,
                SortField.CREATED_AT: Job.created_at,
            }.get(sort_field, Job.updated_at)
            ordering = column.asc() if sort_order == SortOrder.ASC else column.desc()
            stmt = stmt.order_by(ordering, Job.id)

        if skip:
            stmt = stmt.offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.scalars(stmt).unique())

    def count_jobs(self, filters: JobFilters | None = None) -> int:
        if filters is None:
            return self.session.scalar(select(func.count()).select_from(Job)) or 0
        subquery = self._filtered_jobs(filters).with_only_columns(Job.id).subquery()
        return self.session.scalar(select(func.count()).select_from(subquery)) or 0

    # ---------- 필터 선택지 ----------

    def distinct_job_values(self, column_name: str) -> list[Any]:
        """ACTIVE 채용공고의 컬럼별 고유값 (NULL/빈 문자열 제외)"""
        column = getattr(Job, column_name)
        stmt = (
            select(column)
            .where(Job.status == JobStatus.ACTIVE, column.is_not(None))
            .distinct()
            .order_by(column)
        )
        return [v for v in self.session.scalars(stmt) if v != ""]

    def distinct_cities(self) -> list[str]:
        stmt = select(Company.city).where(Company.city.is_not(None)).distinct().order_by(Company.city)
        return list(self.session.scalars(stmt))

    def distinct_employment_types(self) -> list[EmploymentType]:
        return self.distinct_job_values("employment_type")

    # ---------- 동기화 로그 ----------

    def create_sync_log(self, source: str) -> SyncLog:
        log = SyncLog(source=source, status=SyncStatus.RUNNING, started_at=_utcnow())
        self.session.add(log)
        self.session.commit()
        return log

    def complete_sync_log(self, log_id: int, stats: SyncStats) -> None:
        self._finish_sync_log(log_id, SyncStatus.COMPLETED, stats)

    def fail_sync_log(self, log_id: int, error_message: str, stats: SyncStats | None = None) -> None:
        self._finish_sync_log(log_id, SyncStatus.FAILED, stats, error_message=error_message)

    def _finish_sync_log(
        self,
        log_id: int,
        status: SyncStatus,
        stats: SyncStats | None,
        error_message: str | None = None,
    ) -> None:
        log = self.session.get(SyncLog, log_id)
        if log is None:
            raise LookupError(f"동기화 로그를 찾을 수 없습니다: {log_id}")
        log.status = status
        log.completed_at = _utcnow()
        if error_message is not None:
            log.error_message = error_message
        if stats is not None:
            log.records_total = stats.total
            log.records_created = stats.created
            log.records_updated = stats.updated
            log.records_failed = stats.failed
        self.session.commit()

    def find_running_sync_logs(self, source: str) -> list[SyncLog]:
        stmt = (
            select(SyncLog)
            .where(SyncLog.source == source, SyncLog.status == SyncStatus.RUNNING)
            .order_by(SyncLog.started_at.desc())
        )
        return list(self.session.scalars(stmt))

    def get_latest_sync_log(self) -> SyncLog | None:
        stmt = select(SyncLog).order_by(SyncLog.started_at.desc(), SyncLog.id.desc()).limit(1)
        return self.session.scalar(stmt)

    def sum_sync_records(self) -> tuple[int, int]:
        """전체 동기화 로그의 (생성 합계, 갱신 합계)"""
        row = self.session.execute(
            select(
                func.coalesce(func.sum(SyncLog.records_created), 0),
                func.coalesce(func.sum(SyncLog.records_updated), 0),
            )
        ).one()
        return int(row[0]), int(row[1])
