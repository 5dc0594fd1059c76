"""지오코더 기본 클래스"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass

import httpx

from schemas.sync import GeocodingResult

logger = logging.getLogger(__name__)


@dataclass
class GeocoderConfig:
    """지오코더 설정"""

    base_url: str = ""
    timeout: float = 10.0
    rate_limit_delay: float = 0.0  # 요청 간 최소 간격 (초)


class BaseGeocoder(ABC):
    """주소 → 좌표 변환 제공자

    geocode()는 예외를 던지지 않는다. 네트워크/응답 오류는 로그만 남기고 None을 반환해
    상위 체인이 다음 제공자로 넘어가게 한다.
    """

    name: str = "base"

    def __init__(self, config: GeocoderConfig | None = None, client: httpx.AsyncClient | None = None):
        self.config = config or GeocoderConfig()
        self._client = client
        self._owns_client = client is None
        self._last_request_time: float = 0

    @property
    def is_configured(self) -> bool:
        """필요한 인증 정보가 갖춰졌는지 (False면 체인에서 건너뜀)"""
        return True

    async def _get_client(self) -> httpx.AsyncClient:
        """HTTP 클라이언트 (lazy init)"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.config.timeout,
                headers=self._get_default_headers(),
            )
        return self._client

    def _get_default_headers(self) -> dict[str, str]:
        return {"Accept-Language": "ko-KR,ko;q=0.9"}

    async def _rate_limit(self) -> None:
        """Rate limiting 적용"""
        elapsed = time.time() - self._last_request_time
        wait_time = self.config.rate_limit_delay - elapsed
        if wait_time > 0:
            await asyncio.sleep(wait_time)
        self._last_request_time = time.time()

    async def geocode(self, address: str) -> GeocodingResult | None:
        """주소 → 좌표 (실패 시 None)"""
        try:
            await self._rate_limit()
            return await self._geocode(address)
        except httpx.TimeoutException:
            logger.warning(f"{self.name} 지오코딩 타임아웃: {address}")
        except httpx.HTTPStatusError as e:
            logger.warning(f"{self.name} 지오코딩 HTTP 오류 ({e.response.status_code}): {address}")
        except httpx.HTTPError as e:
            logger.warning(f"{self.name} 지오코딩 요청 실패: {e}")
        except (ValueError, KeyError, TypeError, IndexError, AttributeError) as e:
            logger.warning(f"{self.name} 지오코딩 응답 파싱 실패: {e}")
        return None

    @abstractmethod
    async def _geocode(self, address: str) -> GeocodingResult | None:
        """제공자별 구현 (네트워크 예외는 geocode()에서 처리)"""
        pass

    async def close(self) -> None:
        """클라이언트 정리"""
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None
