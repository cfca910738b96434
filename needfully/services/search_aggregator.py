"""
멀티 리테일러 상품 검색 집계기
모든 리테일러를 동시에 검색하고 리테일러별 타임아웃을 적용하여 결과를 합침
"""
import asyncio
import logging
import math
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from needfully.config import get_settings
from needfully.models.product import Pagination, Retailer, SearchResult
from needfully.services.rate_limiter import RetailerSearch
from needfully.services.retailers.base import RetailerAPIError
from needfully.services.retailers.registry import get_retailer_clients
from needfully.utils.query_optimizer import optimize_query

logger = logging.getLogger(__name__)


@dataclass
class RetailerSource:
    """집계 대상 리테일러 (클라이언트 + 타임아웃)"""

    client: RetailerSearch
    timeout_seconds: float

    @property
    def retailer(self) -> Retailer:
        return self.client.retailer


class ProductSearchAggregator:
    """멀티 리테일러 검색 집계기"""

    def __init__(
        self,
        sources: Sequence[RetailerSource],
        location: Optional[str] = None,
        limit_per_retailer: Optional[int] = None,
        max_results: Optional[int] = None,
        query_max_tokens: Optional[int] = None,
    ) -> None:
        settings = get_settings()
        self._sources = list(sources)
        self._location = location or settings.default_location
        self._limit_per_retailer = limit_per_retailer or settings.search_limit_per_retailer
        self._max_results = max_results or settings.max_search_results
        self._query_max_tokens = query_max_tokens or settings.query_max_tokens

    @property
    def retailers(self) -> List[Retailer]:
        """설정된 리테일러 목록"""
        return [source.retailer for source in self._sources]

    async def search(
        self,
        query: str,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
    ) -> List[SearchResult]:
        """
        전체 리테일러 검색

        검색어는 팬아웃 전에 한 번만 최적화되어 모든 리테일러에 동일하게 전달된다.
        실패하거나 시간 초과된 리테일러는 결과 0개로 취급한다.

        Args:
            query: 원문 검색어
            min_price: 최소 가격 (달러, 포함)
            max_price: 최대 가격 (달러, 포함)

        Returns:
            가격 필터 적용 후 섞어서 최대 max_results개로 자른 SearchResult 리스트
        """
        if not query or not query.strip():
            raise ValueError("검색어가 필요합니다")
        if min_price is not None and max_price is not None and min_price > max_price:
            raise ValueError("최소 가격이 최대 가격보다 큽니다")

        optimized = optimize_query(query, self._query_max_tokens)
        logger.info(f"상품 검색 시작: {query!r} → {optimized!r} ({len(self._sources)}개 리테일러)")

        batches = await asyncio.gather(
            *(self._search_source(source, optimized) for source in self._sources)
        )

        combined = [
            result
            for batch in batches
            for result in batch
            if _in_price_range(result, min_price, max_price)
        ]
        random.shuffle(combined)

        logger.info(f"상품 검색 완료: {optimized!r} 총 {len(combined)}개")
        return combined[: self._max_results]

    async def _search_source(self, source: RetailerSource, query: str) -> List[SearchResult]:
        """리테일러 한 곳 검색 (타임아웃/오류 시 빈 리스트)"""
        try:
            return await asyncio.wait_for(
                source.client.search(query, self._location, self._limit_per_retailer),
                timeout=source.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"{source.retailer.value} 검색 시간 초과 ({source.timeout_seconds}s): {query!r}"
            )
        except RetailerAPIError as e:
            logger.warning(f"{source.retailer.value} 결과 제외: {e}")
        except Exception as e:
            logger.error(f"{source.retailer.value} 검색 중 오류: {e}")
        return []


def _in_price_range(
    result: SearchResult,
    min_price: Optional[float],
    max_price: Optional[float],
) -> bool:
    """가격 필터 (필터가 있으면 숫자 가격이 없는 상품은 제외)"""
    if min_price is None and max_price is None:
        return True
    if result.price_value is None:
        return False
    if min_price is not None and result.price_value < min_price:
        return False
    if max_price is not None and result.price_value > max_price:
        return False
    return True


def paginate(
    results: Sequence[SearchResult],
    page: int,
    per_page: int,
) -> Tuple[List[SearchResult], Pagination]:
    """
    검색 결과 페이지 나누기

    Args:
        results: 전체 결과
        page: 1부터 시작하는 페이지 번호
        per_page: 페이지당 결과 수

    Returns:
        (해당 페이지 결과, 페이지 정보)
    """
    total = len(results)
    start = (page - 1) * per_page
    end = start + per_page

    return list(results[start:end]), Pagination(
        current_page=page,
        total_pages=max(1, math.ceil(total / per_page)),
        has_next_page=end < total,
        has_previous_page=page > 1,
        total_results=total,
        results_per_page=per_page,
    )


# 싱글톤 인스턴스
_aggregator: Optional[ProductSearchAggregator] = None


def get_search_aggregator() -> ProductSearchAggregator:
    """검색 집계기 싱글톤 반환"""
    global _aggregator
    if _aggregator is None:
        settings = get_settings()
        sources = [
            RetailerSource(
                client=client,
                timeout_seconds=(
                    settings.slow_retailer_timeout_seconds
                    if retailer == Retailer.AMAZON
                    else settings.fast_retailer_timeout_seconds
                ),
            )
            for retailer, client in get_retailer_clients().items()
        ]
        _aggregator = ProductSearchAggregator(sources)
    return _aggregator
