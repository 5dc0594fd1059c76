"""카카오 로컬 API 지오코더"""

import os

import httpx
from opentelemetry import trace

from adapters.geocoders.base_geocoder import BaseGeocoder, GeocoderConfig
from schemas.sync import GeocodingResult

tracer = trace.get_tracer(__name__)


class KakaoGeocoder(BaseGeocoder):
    """카카오 주소 검색 (REST API 키 필요)"""

    name = "kakao"

    def __init__(
        self,
        api_key: str | None = None,
        config: GeocoderConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        if config is None:
            config = GeocoderConfig(base_url="https://dapi.kakao.com/v2/local/search/address.json")
        super().__init__(config, client)
        self.api_key = api_key if api_key is not None else os.getenv("KAKAO_REST_API_KEY", "")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _geocode(self, address: str) -> GeocodingResult | None:
        client = await self._get_client()

        with tracer.start_as_current_span("kakao_geocode"):
            response = await client.get(
                self.config.base_url,
                params={"query": address},
                headers={"Authorization": f"KakaoAK {self.api_key}"},
                timeout=self.config.timeout,
            )
            response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, dict):
            return None
        documents = payload.get("documents")
        if not isinstance(documents, list) or not documents:
            return None

        doc = documents[0]
        return GeocodingResult(
            latitude=float(doc["y"]),
            longitude=float(doc["x"]),
            formatted_address=doc.get("address_name"),
            provider=self.name,
        )
