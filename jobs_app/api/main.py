import os

from api.endpoints import geocode_router, health_router, jobs_router, sync_router
from adapters.db_client import dispose_engine, init_db
from dotenv import load_dotenv
from fastapi import FastAPI
from middleware.otel_lgtm_metrics import install_lgtm_metrics
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_fastapi_instrumentator import Instrumentator
from services.geo.resolver import get_geocoding_resolver

# .env.jobs가 있으면 먼저 로드 (배포 환경 용), 없으면 기본 .env 로드
load_dotenv(".env.jobs")
load_dotenv()

# OpenTelemetry 트레이서 프로바이더 설정 (엔드포인트가 있을 때만 OTLP HTTP로 전송)
_otlp_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
_provider = TracerProvider()
if _otlp_endpoint:
    _provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=_otlp_endpoint)))
trace.set_tracer_provider(_provider)

app = FastAPI(
    title="Disability Jobs Platform",
    description="data.go.kr 장애인 구인정보 수집 / 지오코딩 / 조회 서비스",
    version="0.1.0",
)

# LGTM 대시보드 호환 커스텀 메트릭 추가
install_lgtm_metrics(app)

# Prometheus 메트릭 계측 (/api/metrics 엔드포인트 자동 생성)
Instrumentator(
    should_group_status_codes=False,  # 200, 201 등 개별 status code 유지
    should_ignore_untemplated=True,  # 등록되지 않은 경로 무시
    excluded_handlers=["/health", "/api/health", "/api/metrics"],  # health/metrics는 집계 제외
    inprogress_name="jobs_inprogress_requests",
    inprogress_labels=True,
).instrument(app).expose(app, endpoint="/api/metrics", include_in_schema=False)


# Root health check for CD/monitoring
@app.get("/health")
async def root_health():
    """Simple health check at root level for deployment monitoring"""
    return {"status": "ok"}


@app.on_event("startup")
async def create_tables():
    """테이블이 없으면 생성"""
    init_db()


@app.on_event("shutdown")
async def close_clients():
    """지오코딩 HTTP 클라이언트 / DB 커넥션 풀 정리"""
    await get_geocoding_resolver().close()
    dispose_engine()


app.include_router(health_router.router, prefix="/api", tags=["Health"])
app.include_router(jobs_router.router, prefix="/api")
app.include_router(sync_router.router, prefix="/api")
app.include_router(geocode_router.router, prefix="/api")

# FastAPI 자동 트레이싱 (otel-collector → Tempo)
FastAPIInstrumentor.instrument_app(app)
