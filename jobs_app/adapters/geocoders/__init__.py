"""지오코딩 제공자 어댑터"""

from adapters.geocoders.base_geocoder import BaseGeocoder, GeocoderConfig
from adapters.geocoders.kakao_geocoder import KakaoGeocoder
from adapters.geocoders.nominatim_geocoder import NominatimGeocoder

__all__ = [
    "BaseGeocoder",
    "GeocoderConfig",
    "KakaoGeocoder",
    "NominatimGeocoder",
]
