"""OpenStreetMap Nominatim 지오코더 (무료, 요청 제한 있음)"""

import os

import httpx
from opentelemetry import trace

from adapters.geocoders.base_geocoder import BaseGeocoder, GeocoderConfig
from schemas.sync import GeocodingResult

tracer = trace.get_tracer(__name__)

DEFAULT_USER_AGENT = "DisabilityJobsPlatform/1.0 (contact@example.com)"


class NominatimGeocoder(BaseGeocoder):
    name = "nominatim"

    def __init__(self, config: GeocoderConfig | None = None, client: httpx.AsyncClient | None = None):
        if config is None:
            config = GeocoderConfig(base_url="https://nominatim.openstreetmap.org/search")
        super().__init__(config, client)
        self.user_agent = os.getenv("NOMINATIM_USER_AGENT", DEFAULT_USER_AGENT)

    def _get_default_headers(self) -> dict[str, str]:
        # Nominatim 이용 정책상 식별 가능한 User-Agent 필수
        return {**super()._get_default_headers(), "User-Agent": self.user_agent}

    async def _geocode(self, address: str) -> GeocodingResult | None:
        client = await self._get_client()

        with tracer.start_as_current_span("nominatim_geocode"):
            response = await client.get(
                self.config.base_url,
                params={
                    "q": f"{address}, South Korea",
                    "format": "json",
                    "limit": 1,
                    "countrycodes": "kr",
                },
                headers={"User-Agent": self.user_agent},
                timeout=self.config.timeout,
            )
            response.raise_for_status()

        results = response.json()
        if not isinstance(results, list) or not results:
            return None

        first = results[0]
        return GeocodingResult(
            latitude=float(first["lat"]),
            longitude=float(first["lon"]),
            formatted_address=first.get("display_name"),
            provider=self.name,
        )
