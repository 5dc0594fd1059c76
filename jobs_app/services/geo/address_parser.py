"""한국 주소 파서 - 시/도, 시/군/구 추출"""

import re
from dataclasses import dataclass

# 시/도 패턴 (긴 표기부터 매칭해야 "서울"이 "서울특별시"를 먼저 잡지 않는다)
CITY_PATTERNS = [
    re.compile(r"^(서울특별시|서울시|서울)"),
    re.compile(r"^(부산광역시|부산시|부산)"),
    re.compile(r"^(대구광역시|대구시|대구)"),
    re.compile(r"^(인천광역시|인천시|인천)"),
    re.compile(r"^(광주광역시|광주시|광주)"),
    re.compile(r"^(대전광역시|대전시|대전)"),
    re.compile(r"^(울산광역시|울산시|울산)"),
    re.compile(r"^(세종특별자치시|세종시|세종)"),
    re.compile(r"^(경기도|경기)"),
    re.compile(r"^(강원특별자치도|강원도|강원)"),
    re.compile(r"^(충청북도|충북)"),
    re.compile(r"^(충청남도|충남)"),
    re.compile(r"^(전북특별자치도|전라북도|전북)"),
    re.compile(r"^(전라남도|전남)"),
    re.compile(r"^(경상북도|경북)"),
    re.compile(r"^(경상남도|경남)"),
    re.compile(r"^(제주특별자치도|제주도|제주)"),
]

# 시/군/구 (예: 강남구, 성남시, 양평군)
DISTRICT_PATTERN = re.compile(r"^(\S+(?:구|군|시))(?:\s|$)")


@dataclass(frozen=True)
class AddressParts:
    city: str | None = None
    district: str | None = None


def parse_korean_address(address: str | None) -> AddressParts:
    """주소 문자열에서 시/도와 시/군/구 추출

    예) "서울특별시 강남구 테헤란로 123" → ("서울특별시", "강남구")
        "경기도 성남시 분당구 판교로 123" → ("경기도", "성남시")
    """
    if not address or not address.strip():
        return AddressParts()

    city: str | None = None
    remaining = address.strip()

    for pattern in CITY_PATTERNS:
        match = pattern.match(remaining)
        if match:
            city = match.group(1)
            remaining = remaining[match.end() :].strip()
            break

    district_match = DISTRICT_PATTERN.match(remaining)
    district = district_match.group(1) if district_match else None

    return AddressParts(city=city, district=district)
