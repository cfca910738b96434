"""
Amazon 검색 클라이언트 (RainforestAPI)
https://docs.trajectdata.com/rainforestapi/product-data-api/parameters/search
"""
from typing import Any, Dict, List

from needfully.models.product import Retailer, SearchResult
from needfully.models.retailer import RainforestSearchItem
from needfully.services.retailers.base import BaseRetailerClient
from needfully.utils.price_parser import (
    display_price,
    extract_product_id,
    fallback_product_id,
    parse_price,
)


class AmazonSearchClient(BaseRetailerClient):
    """Amazon 검색 클라이언트 (호출당 과금)"""

    BASE_URL = "https://api.rainforestapi.com/request"

    @property
    def retailer(self) -> Retailer:
        return Retailer.AMAZON

    def _build_params(self, query: str, location: str, limit: int) -> Dict[str, Any]:
        # RainforestAPI 검색은 위치 힌트를 사용하지 않음
        return {
            "api_key": self._api_key,
            "type": "search",
            "amazon_domain": "amazon.com",
            "search_term": query,
        }

    def _parse_items(self, data: Dict[str, Any], limit: int) -> List[RainforestSearchItem]:
        items = self._validate_items(RainforestSearchItem, data.get("search_results", []))
        return items[:limit]

    def _normalize(self, item: RainforestSearchItem) -> SearchResult:
        raw_price = item.price
        if raw_price is None and item.prices:
            raw_price = item.prices[0]

        product_id = (
            item.asin
            or extract_product_id(item.link, Retailer.AMAZON)
            or fallback_product_id(Retailer.AMAZON, item.title)
        )
        price_value = parse_price(raw_price)

        return SearchResult(
            product_id=product_id,
            title=item.title,
            price=display_price(raw_price),
            price_value=price_value if price_value and price_value > 0 else None,
            image_url=item.image or "",
            link=item.link,
            retailer=Retailer.AMAZON,
            rating=item.rating,
            ratings_count=item.ratings_total,
        )
