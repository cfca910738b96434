"""
인메모리 캐시
TTL 기반 캐싱 구현 (만료 항목은 조회 시점에 제거)
"""
import asyncio
import time
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


class CacheEntry(Generic[T]):
    """캐시 엔트리"""

    def __init__(self, value: T, timestamp: Optional[float] = None) -> None:
        self.value = value
        self.timestamp = time.time() if timestamp is None else timestamp

    def is_expired(self, ttl_seconds: float) -> bool:
        """만료 여부 확인 (now - timestamp < ttl 동안만 유효)"""
        return time.time() - self.timestamp >= ttl_seconds


class InMemoryCache:
    """
    인메모리 TTL 캐시

    인스턴스마다 독립된 저장소를 가지며 서비스 간에 공유하지 않는다.
    """

    def __init__(self, ttl_seconds: float) -> None:
        self._cache: Dict[str, CacheEntry[Any]] = {}
        self._lock = asyncio.Lock()
        self.ttl_seconds = ttl_seconds

    async def get(self, key: str) -> Optional[Any]:
        """캐시 조회"""
        async with self._lock:
            entry = self._cache.get(key)

            if entry is None:
                return None

            if entry.is_expired(self.ttl_seconds):
                del self._cache[key]
                return None

            return entry.value

    async def set(self, key: str, value: Any) -> None:
        """캐시 저장"""
        async with self._lock:
            self._cache[key] = CacheEntry(value)

    def __len__(self) -> int:
        return len(self._cache)
