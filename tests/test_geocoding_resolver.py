import random

import httpx
import pytest

from adapters.geocoders.base_geocoder import GeocoderConfig
from adapters.geocoders.kakao_geocoder import KakaoGeocoder
from adapters.geocoders.nominatim_geocoder import NominatimGeocoder
from services.geo.city_coordinates import JITTER_DEGREES, CityCenterGeocoder
from services.geo.resolver import GeocodingResolver

KAKAO_URL = "https://kakao.example.test/v2/local/search/address.json"
NOMINATIM_URL = "https://nominatim.example.test/search"


class Recorder:
    """요청을 기록하고 준비된 응답을 돌려주는 MockTransport 핸들러"""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error:
            raise self.error
        return self.response


def _kakao(recorder, api_key="test-key"):
    return KakaoGeocoder(
        api_key=api_key,
        config=GeocoderConfig(base_url=KAKAO_URL),
        client=httpx.AsyncClient(transport=httpx.MockTransport(recorder)),
    )


def _nominatim(recorder):
    return NominatimGeocoder(
        config=GeocoderConfig(base_url=NOMINATIM_URL),
        client=httpx.AsyncClient(transport=httpx.MockTransport(recorder)),
    )


def _resolver(kakao, nominatim, seed=42):
    return GeocodingResolver(
        primary=kakao,
        secondary=nominatim,
        city_fallback=CityCenterGeocoder(rng=random.Random(seed)),
        secondary_delay=0,
    )


KAKAO_HIT = httpx.Response(
    200,
    json={"documents": [{"address_name": "서울 강남구 테헤란로 123", "x": "127.0286", "y": "37.4979"}]},
)
NOMINATIM_HIT = httpx.Response(
    200,
    json=[{"lat": "37.4980", "lon": "127.0276", "display_name": "테헤란로, 강남구, 서울"}],
)


async def test_kakao_hit_short_circuits_chain():
    kakao = Recorder(KAKAO_HIT)
    nominatim = Recorder(NOMINATIM_HIT)

    result = await _resolver(_kakao(kakao), _nominatim(nominatim)).resolve("서울특별시 강남구 테헤란로 123")

    assert result.provider == "kakao"
    assert result.latitude == pytest.approx(37.4979)
    assert result.longitude == pytest.approx(127.0286)
    assert kakao.requests[0].headers["Authorization"] == "KakaoAK test-key"
    assert kakao.requests[0].url.params["query"] == "서울특별시 강남구 테헤란로 123"
    assert nominatim.requests == []


async def test_unconfigured_kakao_is_skipped():
    kakao = Recorder(KAKAO_HIT)
    nominatim = Recorder(NOMINATIM_HIT)

    result = await _resolver(_kakao(kakao, api_key=""), _nominatim(nominatim)).resolve("서울특별시 강남구 테헤란로 123")

    assert result.provider == "nominatim"
    assert kakao.requests == []
    params = nominatim.requests[0].url.params
    assert params["q"] == "서울특별시 강남구 테헤란로 123, South Korea"
    assert params["countrycodes"] == "kr"
    assert params["format"] == "json"
    assert "User-Agent" in nominatim.requests[0].headers


async def test_provider_errors_fall_through_to_next():
    kakao = Recorder(httpx.Response(500, json={"message": "internal"}))
    nominatim = Recorder(NOMINATIM_HIT)

    result = await _resolver(_kakao(kakao), _nominatim(nominatim)).resolve("서울특별시 강남구 테헤란로 123")

    assert result.provider == "nominatim"
    assert len(kakao.requests) == 1


async def test_network_error_and_empty_result_reach_city_fallback():
    kakao = Recorder(error=httpx.ConnectTimeout("timed out"))
    nominatim = Recorder(httpx.Response(200, json=[]))

    result = await _resolver(_kakao(kakao), _nominatim(nominatim)).resolve("부산광역시 해운대구 센텀로 1")

    assert result.provider == "city_center"
    assert result.formatted_address == "부산광역시"
    assert abs(result.latitude - 35.1796) <= JITTER_DEGREES
    assert abs(result.longitude - 129.0756) <= JITTER_DEGREES


async def test_malformed_provider_payload_is_not_fatal():
    kakao = Recorder(httpx.Response(200, json={"documents": [{"address_name": "x"}]}))
    nominatim = Recorder(httpx.Response(200, text="<html>rate limited</html>"))

    result = await _resolver(_kakao(kakao), _nominatim(nominatim)).resolve("대전광역시 유성구 대학로 1")

    assert result.provider == "city_center"


@pytest.mark.parametrize("payload", [[], None, "service unavailable", {"documents": None}])
async def test_unexpected_kakao_payload_falls_through_to_nominatim(payload):
    kakao = Recorder(httpx.Response(200, json=payload))
    nominatim = Recorder(NOMINATIM_HIT)

    result = await _resolver(_kakao(kakao), _nominatim(nominatim)).resolve("서울특별시 강남구 테헤란로 123")

    assert result.provider == "nominatim"
    assert len(kakao.requests) == 1


async def test_non_list_nominatim_payload_reaches_city_fallback():
    kakao = Recorder(httpx.Response(200, json={"documents": []}))
    nominatim = Recorder(httpx.Response(200, json={"error": "Unable to geocode"}))

    result = await _resolver(_kakao(kakao), _nominatim(nominatim)).resolve("광주광역시 북구 용봉로 77")

    assert result.provider == "city_center"


async def test_unresolvable_address_returns_none():
    nominatim = Recorder(httpx.Response(200, json=[]))

    result = await _resolver(_kakao(Recorder(), api_key=""), _nominatim(nominatim)).resolve("Atlantis 1")

    assert result is None


@pytest.mark.parametrize("address", [None, "", "   "])
async def test_blank_address_makes_no_calls(address):
    kakao = Recorder(KAKAO_HIT)
    nominatim = Recorder(NOMINATIM_HIT)

    result = await _resolver(_kakao(kakao), _nominatim(nominatim)).resolve(address)

    assert result is None
    assert kakao.requests == []
    assert nominatim.requests == []


def test_city_center_jitter_is_deterministic_with_seed():
    first = CityCenterGeocoder(rng=random.Random(7)).geocode("서울 종로구")
    second = CityCenterGeocoder(rng=random.Random(7)).geocode("서울 종로구")
    assert (first.latitude, first.longitude) == (second.latitude, second.longitude)


@pytest.mark.parametrize(
    "address, expected",
    [
        ("경기도 광주시 오포읍 1", "경기도"),
        ("광주광역시 북구 용봉로 1", "광주광역시"),
        ("대한민국 부산 해운대구", "부산"),
        ("전북특별자치도 전주시 완산구", "전북특별자치도"),
    ],
)
def test_city_center_lookup(address, expected):
    result = CityCenterGeocoder(rng=random.Random(0)).geocode(address)
    assert result.formatted_address == expected
