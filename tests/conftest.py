"""
pytest 공통 fixture
"""
import asyncio
import time
from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from needfully.main import app
from needfully.models.product import Retailer, SearchResult
from needfully.models.wishlist import Wishlist, WishlistItem


class FakeRetailerClient:
    """호출 기록을 남기는 가짜 리테일러 클라이언트"""

    def __init__(
        self,
        retailer: Retailer,
        results: Optional[List[SearchResult]] = None,
        delay: float = 0.0,
        error: Optional[Exception] = None,
    ) -> None:
        self._retailer = retailer
        self.results = results or []
        self.delay = delay
        self.error = error
        self.calls: List[tuple] = []
        self.call_times: List[float] = []

    @property
    def retailer(self) -> Retailer:
        return self._retailer

    async def search(self, query: str, location: str, limit: int) -> List[SearchResult]:
        self.calls.append((query, location, limit))
        self.call_times.append(time.monotonic())
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.results)


class FakeSession:
    """위시리스트 조회용 가짜 DB 세션"""

    def __init__(self, wishlists: List[Wishlist], items: List[WishlistItem]) -> None:
        self._wishlists = {wishlist.id: wishlist for wishlist in wishlists}
        self._items = {item.id: item for item in items}

    async def get(self, model, ident):
        if model is Wishlist:
            return self._wishlists.get(ident)
        if model is WishlistItem:
            return self._items.get(ident)
        return None

    async def execute(self, statement):
        # 품목 조회 쿼리만 사용하므로 미후원 품목을 그대로 반환
        result = MagicMock()
        result.scalars.return_value.all.return_value = [
            item for item in self._items.values() if not item.is_fulfilled
        ]
        return result


def make_result(
    retailer: Retailer,
    title: str,
    price_value: Optional[float] = 10.0,
    product_id: Optional[str] = None,
) -> SearchResult:
    """테스트용 SearchResult 생성"""
    return SearchResult(
        product_id=product_id or f"{retailer.value}-{title}",
        title=title,
        price=f"${price_value:.2f}" if price_value is not None else "Price varies",
        price_value=price_value,
        image_url=f"https://img.example.com/{retailer.value}/{title}.jpg",
        link=f"https://www.{retailer.value}.com/{title}",
        retailer=retailer,
    )


@pytest.fixture
def fake_client():
    """가짜 리테일러 클라이언트 클래스"""
    return FakeRetailerClient


@pytest.fixture
def result_factory():
    """SearchResult 팩토리"""
    return make_result


@pytest.fixture
def wishlist_items() -> List[WishlistItem]:
    """샘플 위시리스트 품목 (1개는 후원 완료)"""
    return [
        WishlistItem(id=1, wishlist_id=7, title="Twin size fleece blanket", is_fulfilled=False),
        WishlistItem(id=2, wishlist_id=7, title="Size 4 diapers", is_fulfilled=False),
        WishlistItem(id=3, wishlist_id=7, title="Baby formula", is_fulfilled=True),
    ]


@pytest.fixture
def fake_session(wishlist_items) -> FakeSession:
    """샘플 위시리스트가 들어있는 가짜 세션"""
    wishlist = Wishlist(id=7, user_id="user-1", title="Winter essentials")
    return FakeSession([wishlist], wishlist_items)


@pytest.fixture
def client():
    """테스트 클라이언트"""
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_rainforest_response() -> Dict:
    """RainforestAPI 검색 응답 샘플"""
    return {
        "request_info": {"success": True},
        "search_results": [
            {
                "position": 1,
                "asin": "B07XJ8C8F5",
                "title": "Fleece Throw Blanket, Twin",
                "link": "https://www.amazon.com/dp/B07XJ8C8F5",
                "image": "https://m.media-amazon.com/images/I/blanket.jpg",
                "rating": 4.7,
                "ratings_total": 15230,
                "price": {"symbol": "$", "value": 19.99, "currency": "USD", "raw": "$19.99"},
            },
            {
                "position": 2,
                "title": "Sherpa Blanket",
                "link": "https://www.amazon.com/Sherpa-Blanket/dp/B08ABCDE12/ref=sr_1_2",
                "prices": [{"value": 24.5, "raw": "$24.50"}],
            },
            {
                "position": 3,
                "asin": "B000000003",
                "title": "Weighted Blanket",
                "link": "https://www.amazon.com/dp/B000000003",
            },
        ],
    }


@pytest.fixture
def sample_walmart_response() -> Dict:
    """SerpAPI walmart 엔진 응답 샘플"""
    return {
        "search_metadata": {"status": "Success"},
        "organic_results": [
            {
                "us_item_id": 123456789,
                "product_id": "4PLQ1S7V",
                "title": "Mainstays Fleece Blanket",
                "thumbnail": "https://i5.walmartimages.com/blanket.jpeg",
                "product_page_url": "https://www.walmart.com/ip/Mainstays-Fleece-Blanket/123456789",
                "rating": 4.4,
                "reviews": 812,
                "primary_offer": {"offer_price": 12.5, "currency": "USD"},
            },
            {
                "title": "Plush Blanket",
                "product_page_url": "https://www.walmart.com/ip/Plush-Blanket/987654321",
                "primary_offer": {"min_price": "$8.00"},
            },
        ],
    }


@pytest.fixture
def sample_google_target_response() -> Dict:
    """SerpAPI google 엔진(site:target.com) 응답 샘플"""
    return {
        "search_metadata": {"status": "Success"},
        "organic_results": [
            {
                "title": "Fleece Throw Blanket - Room Essentials",
                "link": "https://www.target.com/p/fleece-throw-blanket-room-essentials/-/A-53193654",
                "thumbnail": "https://target.scene7.com/blanket.jpg",
                "rich_snippet": {
                    "top": {
                        "detected_extensions": {"price": "$24.99", "currency": "$", "rating": 4.5, "reviews": 321}
                    }
                },
            },
            {
                "title": "Blankets",
                "link": "https://www.target.com/c/blankets-throws/-/N-5xtnt",
            },
            {
                "title": "Fleece blanket review",
                "link": "https://www.example.com/fleece-blanket-review",
            },
        ],
    }
