"""
Walmart 검색 클라이언트 (SerpAPI walmart 엔진)
https://serpapi.com/walmart-search-api
"""
from typing import Any, Dict, List

from needfully.models.product import Retailer, SearchResult
from needfully.models.retailer import WalmartOrganicResult
from needfully.services.retailers.base import BaseRetailerClient
from needfully.utils.price_parser import (
    display_price,
    extract_product_id,
    fallback_product_id,
    parse_price,
)


class WalmartSearchClient(BaseRetailerClient):
    """Walmart 검색 클라이언트"""

    BASE_URL = "https://serpapi.com/search.json"

    @property
    def retailer(self) -> Retailer:
        return Retailer.WALMART

    def _build_params(self, query: str, location: str, limit: int) -> Dict[str, Any]:
        return {
            "api_key": self._api_key,
            "engine": "walmart",
            "query": query,
            "location": location,
            "device": "desktop",
        }

    def _parse_items(self, data: Dict[str, Any], limit: int) -> List[WalmartOrganicResult]:
        items = self._validate_items(WalmartOrganicResult, data.get("organic_results", []))
        return items[:limit]

    def _normalize(self, item: WalmartOrganicResult) -> SearchResult:
        # 대표 판매가 > 최저가 > 기본 가격 순
        raw_price: Any = item.price
        if item.primary_offer is not None:
            raw_price = item.primary_offer.offer_price or item.primary_offer.min_price or raw_price

        link = item.product_page_url or item.link or ""
        supplied_id = item.us_item_id or item.product_id
        product_id = (
            (str(supplied_id) if supplied_id else None)
            or extract_product_id(link, Retailer.WALMART)
            or fallback_product_id(Retailer.WALMART, item.title)
        )
        price_value = parse_price(raw_price)

        return SearchResult(
            product_id=product_id,
            title=item.title,
            price=display_price(raw_price),
            price_value=price_value if price_value and price_value > 0 else None,
            image_url=item.thumbnail or item.image or "",
            link=link,
            retailer=Retailer.WALMART,
            rating=item.rating,
            ratings_count=item.reviews,
            brand=item.brand or None,
        )
