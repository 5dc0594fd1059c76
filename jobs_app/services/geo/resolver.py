"""지오코딩 리졸버 - 제공자 체인 오케스트레이션

순서: 카카오(키 설정 시) → Nominatim(고정 대기 후) → 시/도 중심 좌표
"""

import asyncio
import logging

from adapters.geocoders.base_geocoder import BaseGeocoder
from adapters.geocoders.kakao_geocoder import KakaoGeocoder
from adapters.geocoders.nominatim_geocoder import NominatimGeocoder
from schemas.sync import GeocodingResult
from services.geo.city_coordinates import CityCenterGeocoder

logger = logging.getLogger(__name__)

# Nominatim 이용 정책 (초당 1회 이하) 대응
NOMINATIM_DELAY_SECONDS = 0.5


class GeocodingResolver:
    """주소 → 좌표 변환 (모든 전략 실패 시 None)"""

    def __init__(
        self,
        primary: BaseGeocoder | None = None,
        secondary: BaseGeocoder | None = None,
        city_fallback: CityCenterGeocoder | None = None,
        secondary_delay: float = NOMINATIM_DELAY_SECONDS,
    ):
        self.primary = primary or KakaoGeocoder()
        self.secondary = secondary or NominatimGeocoder()
        self.city_fallback = city_fallback or CityCenterGeocoder()
        self.secondary_delay = secondary_delay

    async def resolve(self, address: str | None) -> GeocodingResult | None:
        if not address or not address.strip():
            return None
        address = address.strip()

        if self.primary.is_configured:
            result = await self.primary.geocode(address)
            if result:
                return result
        else:
            logger.debug(f"{self.primary.name} 키 미설정, 건너뜀")

        if self.secondary.is_configured:
            await asyncio.sleep(self.secondary_delay)
            result = await self.secondary.geocode(address)
            if result:
                return result

        result = self.city_fallback.geocode(address)
        if result:
            logger.info(f"시/도 단위 좌표로 대체: {address} → {result.formatted_address}")
        else:
            logger.info(f"좌표 변환 실패: {address}")
        return result

    async def close(self) -> None:
        await self.primary.close()
        await self.secondary.close()


# 싱글톤
_resolver: GeocodingResolver | None = None


def get_geocoding_resolver() -> GeocodingResolver:
    """GeocodingResolver 싱글톤"""
    global _resolver
    if _resolver is None:
        _resolver = GeocodingResolver()
    return _resolver
