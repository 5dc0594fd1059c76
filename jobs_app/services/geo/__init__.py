"""주소 파싱 / 좌표 변환 / 거리 계산"""

from services.geo.address_parser import AddressParts, parse_korean_address
from services.geo.city_coordinates import CityCenterGeocoder
from services.geo.distance import calculate_distance
from services.geo.resolver import GeocodingResolver, get_geocoding_resolver

__all__ = [
    "AddressParts",
    "parse_korean_address",
    "CityCenterGeocoder",
    "calculate_distance",
    "GeocodingResolver",
    "get_geocoding_resolver",
]
