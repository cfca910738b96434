"""
요청 간격 제한 + 캐시 래퍼
과금되는 리테일러 API(Amazon) 호출을 최소 간격으로 직렬화하고 결과를 캐싱
"""
import asyncio
import json
import logging
import time
from typing import Any, Dict, List, Optional, Protocol

from needfully.models.product import Retailer, SearchResult
from needfully.services.cache import InMemoryCache

logger = logging.getLogger(__name__)


class RetailerSearch(Protocol):
    """검색 가능한 리테일러 클라이언트"""

    @property
    def retailer(self) -> Retailer: ...

    async def search(self, query: str, location: str, limit: int) -> List[SearchResult]: ...


class RequestSpacer:
    """
    요청 간격 제어

    마지막 호출 시각 하나만 보관한다. 대기는 락 안에서만 하므로 동시에 들어온
    호출은 순서대로 간격을 두고 나가며, 대기 중 취소된 호출은 시각을 갱신하지 않아
    다음 호출의 순서를 밀어내지 않는다.
    """

    def __init__(self, min_interval_seconds: float) -> None:
        self.min_interval_seconds = min_interval_seconds
        self._last_call: Optional[float] = None
        self._lock = asyncio.Lock()

    async def wait(self) -> None:
        """직전 호출 후 최소 간격이 지날 때까지 대기하고 이번 호출 시각을 기록"""
        async with self._lock:
            if self._last_call is not None:
                delay = self._last_call + self.min_interval_seconds - time.monotonic()
                if delay > 0:
                    logger.debug(f"요청 간격 유지를 위해 {delay * 1000:.0f}ms 대기")
                    await asyncio.sleep(delay)
            self._last_call = time.monotonic()


class RateLimitedSearch:
    """
    리테일러 클라이언트 하나를 감싸는 간격 제한 + 캐시 래퍼

    캐시 적중 시 간격 제한과 네트워크 호출을 모두 건너뛴다.
    빈 결과도 캐싱한다.
    """

    def __init__(
        self,
        client: RetailerSearch,
        cache: InMemoryCache,
        min_interval_seconds: float = 1.0,
    ) -> None:
        self._client = client
        self._cache = cache
        self._spacer = RequestSpacer(min_interval_seconds)

    @property
    def retailer(self) -> Retailer:
        return self._client.retailer

    @property
    def cache(self) -> InMemoryCache:
        return self._cache

    @staticmethod
    def make_key(query: str, options: Dict[str, Any]) -> str:
        """캐시 키 생성 (소문자 검색어 + 직렬화된 옵션)"""
        return f"{query.lower()}:{json.dumps(options, sort_keys=True)}"

    async def search(
        self,
        query: str,
        location: str,
        limit: int,
        timeout: Optional[float] = None,
    ) -> List[SearchResult]:
        """
        캐시 조회 후 없으면 간격을 지켜 실제 검색

        Args:
            timeout: 실제 API 호출에만 적용하는 타임아웃 (간격 대기 시간은 제외)

        Raises:
            asyncio.TimeoutError: 호출이 timeout 안에 끝나지 않음 (캐싱하지 않음)
        """
        key = self.make_key(query, {"location": location, "limit": limit})

        cached = await self._cache.get(key)
        if cached is not None:
            logger.info(f"{self.retailer.value} 캐시 적중 ({query!r}): {len(cached)}개 상품")
            return list(cached)

        await self._spacer.wait()
        call = self._client.search(query, location, limit)
        if timeout is None:
            results = await call
        else:
            results = await asyncio.wait_for(call, timeout=timeout)
        await self._cache.set(key, results)
        return list(results)
