"""
위시리스트 품목 가격 조회 서비스
빠른 리테일러(Walmart/Target)와 느린 리테일러(Amazon)를 나누어 품목별 가격을 조회
"""
import asyncio
import logging
from typing import Dict, List, Mapping, Optional, Sequence

from needfully.config import get_settings
from needfully.models.product import ItemPricing, Retailer, RetailerPrice, SearchResult
from needfully.models.wishlist import WishlistItem
from needfully.services.cache import InMemoryCache
from needfully.services.rate_limiter import RateLimitedSearch, RetailerSearch
from needfully.services.retailers.base import RetailerAPIError
from needfully.services.retailers.registry import get_retailer_clients
from needfully.utils.query_optimizer import optimize_query

logger = logging.getLogger(__name__)

FAST_RETAILERS = (Retailer.WALMART, Retailer.TARGET)
SLOW_RETAILERS = (Retailer.AMAZON,)
ALL_RETAILERS = FAST_RETAILERS + SLOW_RETAILERS

# 가격이 없는 첫 결과를 건너뛸 수 있도록 몇 개 더 조회
PRICING_SEARCH_LIMIT = 3


class PricingService:
    """품목 가격 조회 서비스"""

    def __init__(
        self,
        clients: Mapping[Retailer, RetailerSearch],
        cache: Optional[InMemoryCache] = None,
        fast_timeout_seconds: Optional[float] = None,
        slow_timeout_seconds: Optional[float] = None,
        location: Optional[str] = None,
    ) -> None:
        settings = get_settings()
        self._clients = dict(clients)
        self._cache = cache or InMemoryCache(settings.pricing_cache_ttl_seconds)
        self._fast_timeout = fast_timeout_seconds or settings.fast_retailer_timeout_seconds
        self._slow_timeout = slow_timeout_seconds or settings.slow_retailer_timeout_seconds
        self._location = location or settings.default_location
        self._query_max_tokens = settings.query_max_tokens

    async def fast_wave(self, items: Sequence[WishlistItem]) -> Dict[str, ItemPricing]:
        """1차: Walmart/Target 가격 (짧은 타임아웃)"""
        return await self.price_items(items, FAST_RETAILERS)

    async def slow_wave(self, items: Sequence[WishlistItem]) -> Dict[str, ItemPricing]:
        """2차: Amazon 가격 (긴 타임아웃)"""
        return await self.price_items(items, SLOW_RETAILERS)

    async def price_item(self, item: WishlistItem) -> ItemPricing:
        """단일 품목의 전체 리테일러 가격"""
        result = await self.price_items([item], ALL_RETAILERS)
        return result[str(item.id)]

    async def price_items(
        self,
        items: Sequence[WishlistItem],
        retailers: Sequence[Retailer] = ALL_RETAILERS,
    ) -> Dict[str, ItemPricing]:
        """
        품목 × 리테일러 가격을 동시에 조회

        설정되지 않은 리테일러는 결과에서 빠진다.

        Returns:
            {"<item_id>": ItemPricing(pricing={retailer: RetailerPrice})}
        """
        active = [retailer for retailer in retailers if retailer in self._clients]
        lookups = [(item, retailer) for item in items for retailer in active]

        prices = await asyncio.gather(
            *(self._lookup(item, retailer) for item, retailer in lookups)
        )

        result: Dict[str, ItemPricing] = {str(item.id): ItemPricing() for item in items}
        for (item, retailer), price in zip(lookups, prices):
            result[str(item.id)].pricing[retailer] = price

        logger.info(
            f"가격 조회 완료: {len(items)}개 품목, "
            f"리테일러 {[retailer.value for retailer in active]}"
        )
        return result

    def _timeout_for(self, retailer: Retailer) -> float:
        return self._slow_timeout if retailer in SLOW_RETAILERS else self._fast_timeout

    async def _lookup(self, item: WishlistItem, retailer: Retailer) -> RetailerPrice:
        """품목 하나의 리테일러 가격 (시간 초과, API 오류 결과는 캐싱하지 않음)"""
        key = f"{retailer.value}:{item.id}"
        cached = await self._cache.get(key)
        if cached is not None:
            return cached

        query = optimize_query(item.title, self._query_max_tokens)
        timeout = self._timeout_for(retailer)

        client = self._clients[retailer]
        try:
            if isinstance(client, RateLimitedSearch):
                # 간격 대기열에서 기다리는 시간은 타임아웃에 포함하지 않음
                results = await client.search(
                    query, self._location, PRICING_SEARCH_LIMIT, timeout=timeout
                )
            else:
                results = await asyncio.wait_for(
                    client.search(query, self._location, PRICING_SEARCH_LIMIT),
                    timeout=timeout,
                )
        except asyncio.TimeoutError:
            logger.warning(f"{retailer.value} 가격 조회 시간 초과 ({timeout}s): 품목 {item.id}")
            return RetailerPrice(available=False)
        except RetailerAPIError as e:
            logger.warning(f"{retailer.value} 가격 조회 실패 (품목 {item.id}), 다음 요청에서 재시도: {e}")
            return RetailerPrice(available=False)
        except Exception as e:
            logger.error(f"{retailer.value} 가격 조회 중 오류 (품목 {item.id}): {e}")
            return RetailerPrice(available=False)

        price = self._to_retailer_price(results)
        await self._cache.set(key, price)
        return price

    @staticmethod
    def _to_retailer_price(results: List[SearchResult]) -> RetailerPrice:
        """검색 결과 중 가격이 있는 첫 상품을 가격 정보로 변환"""
        for result in results:
            if result.price_value is not None:
                return RetailerPrice(
                    available=True,
                    price=result.price,
                    link=result.link or None,
                    image=result.image_url or None,
                )

        if results:
            first = results[0]
            return RetailerPrice(
                available=False,
                link=first.link or None,
                image=first.image_url or None,
            )
        return RetailerPrice(available=False)


# 싱글톤 인스턴스
_pricing_service: Optional[PricingService] = None


def get_pricing_service() -> PricingService:
    """가격 조회 서비스 싱글톤 반환"""
    global _pricing_service
    if _pricing_service is None:
        _pricing_service = PricingService(get_retailer_clients())
    return _pricing_service
