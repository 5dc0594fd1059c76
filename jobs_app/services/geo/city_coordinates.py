"""시/도 중심 좌표 - 지오코딩 최종 fallback"""

import random

from schemas.sync import GeocodingResult
from services.geo.address_parser import parse_korean_address

# (lat, lng)
_SEOUL = (37.5665, 126.9780)
_BUSAN = (35.1796, 129.0756)
_DAEGU = (35.8714, 128.6014)
_INCHEON = (37.4563, 126.7052)
_GWANGJU = (35.1595, 126.8526)
_DAEJEON = (36.3504, 127.3845)
_ULSAN = (35.5384, 129.3114)
_SEJONG = (36.4800, 127.2890)
_GYEONGGI = (37.4138, 127.5183)
_GANGWON = (37.8228, 128.1555)
_CHUNGBUK = (36.6357, 127.4917)
_CHUNGNAM = (36.6588, 126.6728)
_JEONBUK = (35.8203, 127.1089)
_JEONNAM = (34.8161, 126.4629)
_GYEONGBUK = (36.5760, 128.5056)
_GYEONGNAM = (35.4606, 128.2132)
_JEJU = (33.4996, 126.5312)

# 주소에 포함 여부로 매칭하므로 긴 표기가 먼저 와야 한다
KOREAN_CITY_COORDINATES: dict[str, tuple[float, float]] = {
    "서울특별시": _SEOUL,
    "서울시": _SEOUL,
    "서울": _SEOUL,
    "부산광역시": _BUSAN,
    "부산시": _BUSAN,
    "부산": _BUSAN,
    "대구광역시": _DAEGU,
    "대구시": _DAEGU,
    "대구": _DAEGU,
    "인천광역시": _INCHEON,
    "인천시": _INCHEON,
    "인천": _INCHEON,
    "광주광역시": _GWANGJU,
    "광주시": _GWANGJU,
    "광주": _GWANGJU,
    "대전광역시": _DAEJEON,
    "대전시": _DAEJEON,
    "대전": _DAEJEON,
    "울산광역시": _ULSAN,
    "울산시": _ULSAN,
    "울산": _ULSAN,
    "세종특별자치시": _SEJONG,
    "세종시": _SEJONG,
    "세종": _SEJONG,
    "경기도": _GYEONGGI,
    "경기": _GYEONGGI,
    "강원특별자치도": _GANGWON,
    "강원도": _GANGWON,
    "강원": _GANGWON,
    "충청북도": _CHUNGBUK,
    "충북": _CHUNGBUK,
    "충청남도": _CHUNGNAM,
    "충남": _CHUNGNAM,
    "전북특별자치도": _JEONBUK,
    "전라북도": _JEONBUK,
    "전북": _JEONBUK,
    "전라남도": _JEONNAM,
    "전남": _JEONNAM,
    "경상북도": _GYEONGBUK,
    "경북": _GYEONGBUK,
    "경상남도": _GYEONGNAM,
    "경남": _GYEONGNAM,
    "제주특별자치도": _JEJU,
    "제주도": _JEJU,
    "제주": _JEJU,
}

# 같은 도시의 마커가 한 점에 겹치지 않도록 ±0.01도 흔들기
JITTER_DEGREES = 0.01


class CityCenterGeocoder:
    """주소에 포함된 시/도명으로 대략적인 좌표 반환"""

    name = "city_center"

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    def _offset(self) -> float:
        return (self._rng.random() - 0.5) * 2 * JITTER_DEGREES

    def _find_city(self, address: str) -> str | None:
        # 주소 앞부분의 시/도를 우선 ("경기도 광주시"는 광주광역시가 아니라 경기도)
        city = parse_korean_address(address).city
        if city in KOREAN_CITY_COORDINATES:
            return city
        return next((name for name in KOREAN_CITY_COORDINATES if name in address), None)

    def geocode(self, address: str) -> GeocodingResult | None:
        city = self._find_city(address)
        if city is None:
            return None

        lat, lng = KOREAN_CITY_COORDINATES[city]
        return GeocodingResult(
            latitude=lat + self._offset(),
            longitude=lng + self._offset(),
            formatted_address=city,
            provider=self.name,
        )
