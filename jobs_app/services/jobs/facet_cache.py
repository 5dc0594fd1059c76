"""필터 선택지 캐시 - 프로세스 단위 TTL 캐시"""

import time
from collections.abc import Callable
from typing import Any, TypeVar

T = TypeVar("T")

FILTER_CACHE_KEY = "filter-options"
DEFAULT_TTL_SECONDS = 5 * 60


class FacetCache:
    """key → (value, 만료시각) 저장소

    동시 요청 간 동기화는 하지 않는다 (마지막 쓰기 우선, 만료 직후 잠깐 오래된 값을 읽을 수 있음).
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._store: dict[str, tuple[Any, float]] = {}

    def get(self, key: str) -> Any | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at <= self._clock():
            self._store.pop(key, None)
            return None
        return value

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        self._store[key] = (value, self._clock() + ttl)

    def get_or_load(self, key: str, loader: Callable[[], T], ttl_seconds: float | None = None) -> T:
        """캐시에 있으면 반환, 없거나 만료됐으면 loader 결과를 저장 후 반환"""
        value = self.get(key)
        if value is not None:
            return value
        value = loader()
        self.set(key, value, ttl_seconds)
        return value

    def invalidate(self, key: str) -> None:
        self._store.pop(key, None)

    def invalidate_all(self) -> None:
        self._store.clear()


# 싱글톤
_facet_cache: FacetCache | None = None


def get_facet_cache() -> FacetCache:
    """프로세스 공용 FacetCache"""
    global _facet_cache
    if _facet_cache is None:
        _facet_cache = FacetCache()
    return _facet_cache
