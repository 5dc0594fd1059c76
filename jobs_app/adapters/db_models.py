"""SQLAlchemy ORM 모델 - 사업장 / 채용공고 / 동기화 로그"""

from datetime import date, datetime, timezone

from sqlalchemy import Boolean, Date, DateTime, Enum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from schemas.jobs import WORK_ENVIRONMENT_FIELDS, EmploymentType, GeocodeStatus, JobStatus
from schemas.sync import SyncStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass


class Company(Base):
    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    external_id: Mapped[str | None] = mapped_column(String(255), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255))
    address: Mapped[str | None] = mapped_column(Text)
    city: Mapped[str | None] = mapped_column(String(50), index=True)
    district: Mapped[str | None] = mapped_column(String(50), index=True)
    latitude: Mapped[float | None] = mapped_column(Float)
    longitude: Mapped[float | None] = mapped_column(Float)
    geocode_status: Mapped[GeocodeStatus] = mapped_column(
        Enum(GeocodeStatus, native_enum=False), default=GeocodeStatus.PENDING, index=True
    )
    phone: Mapped[str | None] = mapped_column(String(50))
    email: Mapped[str | None] = mapped_column(String(255))
    website: Mapped[str | None] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, onupdate=_utcnow)

    jobs: Mapped[list["Job"]] = relationship(back_populates="company")


class Job(Base):
    __tablename__ = "jobs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    external_id: Mapped[str | None] = mapped_column(String(100), unique=True, index=True)
    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id"), index=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text)
    category: Mapped[str | None] = mapped_column(String(255), index=True)
    employment_type: Mapped[EmploymentType] = mapped_column(
        Enum(EmploymentType, native_enum=False), default=EmploymentType.OTHER
    )
    salary: Mapped[str | None] = mapped_column(String(255))
    salary_type: Mapped[str | None] = mapped_column(String(50))
    env_both_hands: Mapped[str | None] = mapped_column(String(100))
    env_eyesight: Mapped[str | None] = mapped_column(String(100))
    env_handwork: Mapped[str | None] = mapped_column(String(100))
    env_lift_power: Mapped[str | None] = mapped_column(String(100))
    env_listen_talk: Mapped[str | None] = mapped_column(String(100))
    env_stand_walk: Mapped[str | None] = mapped_column(String(100))
    is_remote_available: Mapped[bool] = mapped_column(Boolean, default=False)
    work_location: Mapped[str | None] = mapped_column(Text)
    deadline: Mapped[date | None] = mapped_column(Date)
    application_url: Mapped[str | None] = mapped_column(String(500))
    application_email: Mapped[str | None] = mapped_column(String(255))
    application_phone: Mapped[str | None] = mapped_column(String(50))
    status: Mapped[JobStatus] = mapped_column(Enum(JobStatus, native_enum=False), default=JobStatus.ACTIVE, index=True)
    posted_at: Mapped[date | None] = mapped_column(Date)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, onupdate=_utcnow)

    company: Mapped[Company] = relationship(back_populates="jobs", lazy="joined")

    @property
    def work_environment(self) -> dict[str, str] | None:
        """작업환경 컬럼 묶음 (전부 비어 있으면 None)"""
        values = {name: getattr(self, f"env_{name}") for name in WORK_ENVIRONMENT_FIELDS}
        if all(v is None for v in values.values()):
            return None
        return values


class SyncLog(Base):
    __tablename__ = "sync_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    source: Mapped[str] = mapped_column(String(50))
    status: Mapped[SyncStatus] = mapped_column(Enum(SyncStatus, native_enum=False), index=True)
    records_total: Mapped[int] = mapped_column(Integer, default=0)
    records_created: Mapped[int] = mapped_column(Integer, default=0)
    records_updated: Mapped[int] = mapped_column(Integer, default=0)
    records_failed: Mapped[int] = mapped_column(Integer, default=0)
    error_message: Mapped[str | None] = mapped_column(Text)
    started_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime)
