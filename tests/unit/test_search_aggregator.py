"""
멀티 리테일러 검색 집계기 유닛 테스트
"""
import itertools
import time

import pytest

from needfully.models.product import Retailer
from needfully.services import search_aggregator
from needfully.services.retailers.base import RetailerAPIError
from needfully.services.search_aggregator import (
    ProductSearchAggregator,
    RetailerSource,
    paginate,
)

RETAILERS = [Retailer.AMAZON, Retailer.WALMART, Retailer.TARGET]


def _build(fake_client, result_factory, failing=(), per_retailer=2, timeout=1.0):
    """리테일러 3곳 집계기 생성 (failing은 예외를 던지는 리테일러)"""
    clients = {}
    for retailer in RETAILERS:
        results = [result_factory(retailer, f"item-{i}") for i in range(per_retailer)]
        error = RuntimeError(f"{retailer.value} down") if retailer in failing else None
        clients[retailer] = fake_client(retailer, results, error=error)

    aggregator = ProductSearchAggregator(
        [RetailerSource(client, timeout) for client in clients.values()],
        location="60602",
        limit_per_retailer=20,
        max_results=60,
    )
    return aggregator, clients


class TestProductSearchAggregator:
    """집계기 테스트"""

    @pytest.mark.parametrize(
        "failing",
        [set(combo) for n in range(len(RETAILERS) + 1) for combo in itertools.combinations(RETAILERS, n)],
    )
    @pytest.mark.asyncio
    async def test_partial_failure_tolerance(self, fake_client, result_factory, failing):
        """실패한 리테일러를 제외한 결과만 반환 (예외 전파 없음)"""
        aggregator, _ = _build(fake_client, result_factory, failing=failing)

        results = await aggregator.search("fleece blanket")

        assert len(results) == 2 * (len(RETAILERS) - len(failing))
        assert {r.retailer for r in results} == set(RETAILERS) - failing

    @pytest.mark.asyncio
    async def test_slow_retailer_is_cut_off(self, fake_client, result_factory):
        """가장 긴 타임아웃 안에 응답하고 느린 리테일러는 결과 0개"""
        fast = fake_client(Retailer.WALMART, [result_factory(Retailer.WALMART, "blanket")])
        slow = fake_client(Retailer.AMAZON, [result_factory(Retailer.AMAZON, "blanket")], delay=5.0)
        aggregator = ProductSearchAggregator(
            [RetailerSource(fast, 0.2), RetailerSource(slow, 0.3)],
            location="60602",
        )

        started = time.monotonic()
        results = await aggregator.search("blanket")
        elapsed = time.monotonic() - started

        assert elapsed < 1.0
        assert [r.retailer for r in results] == [Retailer.WALMART]

    @pytest.mark.asyncio
    async def test_results_are_capped(self, fake_client, result_factory):
        """전체 결과는 최대 60개"""
        aggregator, _ = _build(fake_client, result_factory, per_retailer=25)

        results = await aggregator.search("blanket")

        assert len(results) == 60

    @pytest.mark.asyncio
    async def test_same_optimized_query_for_every_retailer(self, fake_client, result_factory):
        """검색어는 한 번만 최적화되어 모든 리테일러에 동일하게 전달"""
        aggregator, clients = _build(fake_client, result_factory)

        await aggregator.search("We need some warm blankets for the kids")

        for client in clients.values():
            assert client.calls == [("warm blankets kids", "60602", 20)]

    @pytest.mark.asyncio
    async def test_all_failed_returns_empty(self, fake_client, result_factory):
        aggregator, _ = _build(fake_client, result_factory, failing=set(RETAILERS))
        assert await aggregator.search("blanket") == []

    @pytest.mark.parametrize("query", ["", "   "])
    @pytest.mark.asyncio
    async def test_blank_query_rejected(self, fake_client, result_factory, query):
        aggregator, clients = _build(fake_client, result_factory)

        with pytest.raises(ValueError):
            await aggregator.search(query)
        assert all(not client.calls for client in clients.values())

    @pytest.mark.asyncio
    async def test_api_error_source_is_skipped(self, fake_client, result_factory):
        """API 오류를 낸 리테일러는 결과 0개"""
        broken = fake_client(Retailer.AMAZON, error=RetailerAPIError("API 오류: 503"))
        walmart = fake_client(Retailer.WALMART, [result_factory(Retailer.WALMART, "blanket")])
        aggregator = ProductSearchAggregator(
            [RetailerSource(broken, 1.0), RetailerSource(walmart, 1.0)],
            location="60602",
        )

        results = await aggregator.search("blanket")

        assert [r.retailer for r in results] == [Retailer.WALMART]

class TestPriceFilter:
    """가격 범위 필터 테스트"""

    @pytest.fixture
    def aggregator(self, fake_client, result_factory):
        walmart = fake_client(
            Retailer.WALMART,
            [
                result_factory(Retailer.WALMART, "cheap", 5.0),
                result_factory(Retailer.WALMART, "mid", 20.0),
                result_factory(Retailer.WALMART, "unpriced", None),
            ],
        )
        target = fake_client(Retailer.TARGET, [result_factory(Retailer.TARGET, "pricey", 50.0)])
        return ProductSearchAggregator(
            [RetailerSource(walmart, 1.0), RetailerSource(target, 1.0)],
            location="60602",
        )

    @pytest.mark.asyncio
    async def test_no_filter_keeps_unpriced(self, aggregator):
        results = await aggregator.search("blanket")
        assert len(results) == 4

    @pytest.mark.asyncio
    async def test_bounds_are_inclusive(self, aggregator):
        """경계값 포함, 가격 없는 상품 제외"""
        results = await aggregator.search("blanket", min_price=5.0, max_price=20.0)
        assert sorted(r.title for r in results) == ["cheap", "mid"]

    @pytest.mark.asyncio
    async def test_min_price_only(self, aggregator):
        results = await aggregator.search("blanket", min_price=10)
        assert sorted(r.title for r in results) == ["mid", "pricey"]

    @pytest.mark.asyncio
    async def test_max_price_only(self, aggregator):
        results = await aggregator.search("blanket", max_price=10)
        assert [r.title for r in results] == ["cheap"]

    @pytest.mark.asyncio
    async def test_min_above_max_rejected(self, aggregator):
        with pytest.raises(ValueError):
            await aggregator.search("blanket", min_price=30, max_price=10)

    @pytest.mark.asyncio
    async def test_filter_applies_before_cap(self, fake_client, result_factory):
        """상한 자르기 전에 필터링하므로 범위 안 상품이 밀려나지 않음"""
        results = [result_factory(Retailer.WALMART, f"cheap-{i}", 1.0) for i in range(10)]
        results.append(result_factory(Retailer.WALMART, "target-price", 25.0))
        walmart = fake_client(Retailer.WALMART, results)
        aggregator = ProductSearchAggregator(
            [RetailerSource(walmart, 1.0)], location="60602", max_results=3
        )

        found = await aggregator.search("blanket", min_price=20)

        assert [r.title for r in found] == ["target-price"]


class TestPaginate:
    """페이지 나누기 테스트"""

    @pytest.fixture
    def results(self, result_factory):
        return [result_factory(Retailer.WALMART, f"item-{i}") for i in range(25)]

    def test_first_page(self, results):
        page, info = paginate(results, 1, 10)

        assert [r.title for r in page] == [f"item-{i}" for i in range(10)]
        assert info.model_dump() == {
            "current_page": 1,
            "total_pages": 3,
            "has_next_page": True,
            "has_previous_page": False,
            "total_results": 25,
            "results_per_page": 10,
        }

    def test_middle_page(self, results):
        page, info = paginate(results, 2, 10)

        assert page[0].title == "item-10"
        assert info.has_next_page is True
        assert info.has_previous_page is True

    def test_last_page_is_partial(self, results):
        page, info = paginate(results, 3, 10)

        assert len(page) == 5
        assert info.has_next_page is False

    def test_page_past_end_is_empty(self, results):
        page, info = paginate(results, 9, 10)

        assert page == []
        assert info.total_pages == 3
        assert info.has_next_page is False

    def test_empty_results(self):
        page, info = paginate([], 1, 20)

        assert page == []
        assert info.total_pages == 1
        assert info.total_results == 0
        assert info.has_next_page is False



class TestGetSearchAggregator:
    """집계기 싱글톤 구성 테스트"""

    def test_amazon_gets_slow_timeout(self, monkeypatch, fake_client):
        clients = {retailer: fake_client(retailer) for retailer in RETAILERS}
        monkeypatch.setattr(search_aggregator, "_aggregator", None)
        monkeypatch.setattr(search_aggregator, "get_retailer_clients", lambda: clients)

        aggregator = search_aggregator.get_search_aggregator()

        timeouts = {source.retailer: source.timeout_seconds for source in aggregator._sources}
        assert timeouts[Retailer.AMAZON] == 8.0
        assert timeouts[Retailer.WALMART] == timeouts[Retailer.TARGET] == 3.0
        assert search_aggregator.get_search_aggregator() is aggregator
