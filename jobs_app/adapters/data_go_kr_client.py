"""공공데이터포털(data.go.kr) 장애인 구인 실시간 현황 API 클라이언트

한국장애인고용공단_장애인 구인 실시간 현황
https://www.data.go.kr/data/15117692/openapi.do

응답은 JSON 또는 XML 문자열로 올 수 있다. 두 경우 모두 items.item을 항상 리스트로 다룬다.
"""

import asyncio
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import unquote

import httpx
from bs4 import BeautifulSoup
from opentelemetry import trace

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

DEFAULT_BASE_URL = "https://apis.data.go.kr/B552583/job/job_list"

# API마다 성공 코드 표기가 다르다
SUCCESS_RESULT_CODES = frozenset({"00", "0", "0000"})


class SourceFetchError(Exception):
    """외부 API 호출 실패"""


class SourceConfigError(SourceFetchError):
    """필수 설정(서비스 키) 누락"""


class SourceMalformedResponseError(SourceFetchError):
    """응답 본문을 해석할 수 없음"""


class SourceResultCodeError(SourceFetchError):
    """API가 실패 결과 코드를 반환"""

    def __init__(self, code: str, message: str):
        super().__init__(f"API Error: {message} (code: {code})")
        self.code = code
        self.message = message


@dataclass
class SourceClientConfig:
    """data.go.kr 클라이언트 설정"""

    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0
    page_size: int = 100
    page_delay: float = 0.5  # 페이지 요청 간 대기 (초)


@dataclass
class SourcePage:
    items: list[dict[str, Any]]
    total_count: int


@dataclass
class SourceFetchResult:
    items: list[dict[str, Any]] = field(default_factory=list)
    total_count: int = 0
    pages_fetched: int = 0
    error: str | None = None  # 페이지 실패로 중단된 경우 마지막 오류


def _as_list(value: Any) -> list[Any]:
    """단건 응답은 dict, 다건은 list로 오는 경우를 통일"""
    if not value:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _to_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _check_result_code(code: Any, message: str | None) -> None:
    code_str = str(code).strip() if code is not None else ""
    if code_str not in SUCCESS_RESULT_CODES:
        raise SourceResultCodeError(code_str or "UNKNOWN", message or "결과 메시지 없음")


def parse_json_body(data: Any) -> SourcePage:
    """JSON 응답 → SourcePage"""
    if not isinstance(data, dict) or not isinstance(data.get("response"), dict):
        raise SourceMalformedResponseError("response 객체가 없는 JSON 응답")

    response = data["response"]
    header = response.get("header") or {}
    _check_result_code(header.get("resultCode"), header.get("resultMsg"))

    body = response.get("body") or {}
    items_node = body.get("items")
    items = _as_list(items_node.get("item")) if isinstance(items_node, dict) else []

    return SourcePage(
        items=[item for item in items if isinstance(item, dict)],
        total_count=_to_int(body.get("totalCount")),
    )


def parse_xml_body(text: str) -> SourcePage:
    """XML 응답 → SourcePage

    <item> 요소는 1건이어도 리스트로 수집한다.
    """
    soup = BeautifulSoup(text, "xml")

    # 게이트웨이 오류 (인증키 오류, 트래픽 초과 등)
    gateway_header = soup.find("cmmMsgHeader")
    if gateway_header is not None:
        code = gateway_header.find("returnReasonCode")
        message = gateway_header.find("returnAuthMsg") or gateway_header.find("errMsg")
        raise SourceResultCodeError(
            code.get_text(strip=True) if code else "UNKNOWN",
            message.get_text(strip=True) if message else "게이트웨이 오류",
        )

    response = soup.find("response")
    if response is None:
        raise SourceMalformedResponseError("response 요소가 없는 XML 응답")

    header = response.find("header")
    code = header.find("resultCode") if header else None
    message = header.find("resultMsg") if header else None
    _check_result_code(
        code.get_text(strip=True) if code else None,
        message.get_text(strip=True) if message else None,
    )

    body = response.find("body")
    items: list[dict[str, Any]] = []
    total_count = 0
    if body is not None:
        items_node = body.find("items")
        if items_node is not None:
            for item in items_node.find_all("item", recursive=False):
                items.append({child.name: child.get_text(strip=True) for child in item.find_all(recursive=False)})
        total_node = body.find("totalCount")
        total_count = _to_int(total_node.get_text(strip=True)) if total_node else 0

    return SourcePage(items=items, total_count=total_count)


def parse_response_body(text: str) -> SourcePage:
    """본문 형식 감지 후 파싱"""
    stripped = text.lstrip()
    if not stripped:
        raise SourceMalformedResponseError("빈 응답 본문")

    if stripped.startswith("<"):
        return parse_xml_body(stripped)

    try:
        data = json.loads(stripped)
    except json.JSONDecodeError as e:
        raise SourceMalformedResponseError(f"JSON/XML 어느 쪽으로도 해석할 수 없는 응답: {e}") from e
    return parse_json_body(data)


class DataGoKrClient:
    """장애인 구인 현황 API 클라이언트"""

    def __init__(
        self,
        api_key: str | None = None,
        config: SourceClientConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        api_key = api_key or os.getenv("DATA_GO_KR_API_KEY")
        if not api_key:
            raise SourceConfigError("DATA_GO_KR_API_KEY 환경변수가 설정되지 않았습니다.")

        # 포털의 "인코딩" 키를 그대로 넣어도 이중 인코딩되지 않도록 한 번 디코딩
        self.api_key = unquote(api_key.strip())
        self.config = config or SourceClientConfig(base_url=os.getenv("DATA_GO_KR_BASE_URL", DEFAULT_BASE_URL))
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """HTTP 클라이언트 (lazy init)"""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout)
        return self._client

    async def fetch_page(self, page_no: int = 1, num_of_rows: int | None = None) -> SourcePage:
        """한 페이지 조회 - 실패 시 SourceFetchError 계열 예외"""
        num_of_rows = num_of_rows or self.config.page_size
        client = await self._get_client()
        params = {"serviceKey": self.api_key, "pageNo": page_no, "numOfRows": num_of_rows}

        logger.info(f"data.go.kr 조회: page={page_no}, rows={num_of_rows}")
        try:
            with tracer.start_as_current_span("data_go_kr_fetch_page"):
                response = await client.get(self.config.base_url, params=params, timeout=self.config.timeout)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SourceFetchError(f"Failed to fetch jobs: HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise SourceFetchError(f"Failed to fetch jobs: {e!r}") from e

        return parse_response_body(response.text)

    async def fetch_all(self, max_pages: int = 10) -> SourceFetchResult:
        """전체 페이지 조회

        마지막 페이지가 가득 차 있고 max_pages 이내인 동안 계속한다.
        페이지 하나가 실패하면 거기서 멈추고 지금까지 모은 결과를 반환한다 (예외 없음).
        """
        result = SourceFetchResult()
        page_no = 1
        page_size = self.config.page_size

        while page_no <= max_pages:
            try:
                page = await self.fetch_page(page_no, page_size)
            except SourceFetchError as e:
                logger.error(f"페이지 {page_no} 조회 실패, 수집 중단: {e}")
                result.error = str(e)
                break

            result.items.extend(page.items)
            result.total_count = page.total_count or result.total_count
            result.pages_fetched += 1
            logger.info(f"페이지 {page_no}: {len(page.items)}건 수집")

            if len(page.items) < page_size:
                break

            page_no += 1
            if page_no <= max_pages:
                await asyncio.sleep(self.config.page_delay)

        logger.info(f"총 {len(result.items)}건 수집 (pages={result.pages_fetched})")
        return result

    async def close(self) -> None:
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None
