"""
Target 검색 클라이언트 (SerpAPI google 엔진, site:target.com)
Target은 공개 검색 API가 없어 구글 검색 결과에서 상품 페이지만 추려낸다.
"""
from typing import Any, Dict, List, Optional

from needfully.models.product import Retailer, SearchResult
from needfully.models.retailer import GoogleOrganicResult
from needfully.services.retailers.base import BaseRetailerClient
from needfully.utils.price_parser import (
    display_price,
    extract_product_id,
    fallback_product_id,
    parse_price,
)

# Target 상품 페이지 URL 패턴 (/A-<TCIN>이 TCIN 형식)
_PRODUCT_PATH_MARKERS = ("/p/", "/product/", "/A-")


class TargetSearchClient(BaseRetailerClient):
    """Target 검색 클라이언트"""

    BASE_URL = "https://serpapi.com/search.json"

    @property
    def retailer(self) -> Retailer:
        return Retailer.TARGET

    def _build_params(self, query: str, location: str, limit: int) -> Dict[str, Any]:
        return {
            "api_key": self._api_key,
            "engine": "google",
            "q": f'"{query}" site:target.com',
            "location": location,
            "device": "desktop",
            # 필터링 후에도 충분한 결과가 남도록 여유 있게 요청
            "num": limit * 2,
        }

    @staticmethod
    def _is_product_page(item: GoogleOrganicResult) -> bool:
        """Target 상품 페이지 여부"""
        if not item.link or "target.com" not in item.link:
            return False
        if any(marker in item.link for marker in _PRODUCT_PATH_MARKERS):
            return True
        return len(item.title) > 10

    def _parse_items(self, data: Dict[str, Any], limit: int) -> List[GoogleOrganicResult]:
        items = self._validate_items(GoogleOrganicResult, data.get("organic_results", []))
        return [item for item in items if self._is_product_page(item)][:limit]

    def _normalize(self, item: GoogleOrganicResult) -> SearchResult:
        extensions = item.detected_extensions
        raw_price: Optional[Any] = extensions.price if extensions else None

        product_id = extract_product_id(item.link, Retailer.TARGET) or fallback_product_id(
            Retailer.TARGET, item.title
        )
        price_value = parse_price(raw_price)

        return SearchResult(
            product_id=product_id,
            title=item.title,
            price=display_price(raw_price),
            price_value=price_value if price_value and price_value > 0 else None,
            image_url=item.thumbnail or "",
            link=item.link,
            retailer=Retailer.TARGET,
            rating=extensions.rating if extensions else None,
            ratings_count=extensions.reviews if extensions else None,
        )
