"""
점진적 가격 로더 (API 클라이언트)
1차(Walmart/Target)와 2차(Amazon) 배치 가격을 따로 요청하고
도착하는 순서대로 품목별 가격 맵에 병합
"""
import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

import httpx

from needfully.utils.price_parser import best_price

logger = logging.getLogger(__name__)

# {"<item_id>": {"pricing": {"amazon": {...}, "walmart": {...}, "target": {...}}}}
PricingMap = Dict[str, Dict[str, Any]]

FAST_WAVE_RETAILERS = ("walmart", "target")
SLOW_WAVE_RETAILERS = ("amazon",)


def merge_pricing(pricing_map: Mapping[str, Mapping[str, Any]], results: Mapping[str, Any]) -> PricingMap:
    """
    가격 응답을 가격 맵에 필드 단위로 병합

    기존 품목 항목을 통째로 덮어쓰지 않으므로 나중에 도착한 응답이
    먼저 반영된 리테일러 가격을 지우지 않는다.

    Returns:
        병합된 새 가격 맵 (입력은 변경하지 않음)
    """
    merged: PricingMap = {item_id: dict(entry) for item_id, entry in pricing_map.items()}

    for item_id, entry in results.items():
        key = str(item_id)
        existing = merged.get(key, {})
        new_pricing = (entry or {}).get("pricing") or {}
        merged[key] = {
            **existing,
            "pricing": {**(existing.get("pricing") or {}), **new_pricing},
        }

    return merged


class ProgressivePricingLoader:
    """
    위시리스트 점진적 가격 로더

    Example:
        async with httpx.AsyncClient(base_url="https://needfully.org") as client:
            loader = ProgressivePricingLoader(client, on_update=render)
            await loader.load(wishlist_id, [item.id for item in items])
            loader.best_price(items[0].id)
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        on_update: Optional[Callable[[PricingMap], None]] = None,
        fast_wave_timeout: float = 10.0,
        slow_wave_timeout: float = 30.0,
        item_timeout: float = 15.0,
    ) -> None:
        self._client = client
        self._on_update = on_update
        self._fast_wave_timeout = fast_wave_timeout
        self._slow_wave_timeout = slow_wave_timeout
        self._item_timeout = item_timeout
        self.pricing: PricingMap = {}

    def has_pricing(self, item_ids: Iterable[Any]) -> bool:
        """모든 품목에 pricing 객체가 있는지 확인"""
        return all(
            self.pricing.get(str(item_id), {}).get("pricing") is not None
            for item_id in item_ids
        )

    def apply(self, results: Mapping[str, Any]) -> None:
        """응답 병합 후 on_update 호출"""
        self.pricing = merge_pricing(self.pricing, results)
        if self._on_update is not None:
            self._on_update(self.pricing)

    def best_price(self, item_id: Any) -> Optional[str]:
        """품목의 최저가 (가격 정보가 없으면 None)"""
        entry = self.pricing.get(str(item_id))
        if not entry or not entry.get("pricing"):
            return None
        return best_price(entry["pricing"])

    async def load(self, wishlist_id: Any, item_ids: Sequence[Any]) -> PricingMap:
        """
        위시리스트 가격 로드

        모든 품목의 가격이 이미 있으면 요청하지 않는다.
        1차 요청을 먼저 시작한 뒤 2차 요청을 시작하고, 두 요청은 서로 기다리지 않는다.

        Args:
            wishlist_id: 위시리스트 ID
            item_ids: 가격을 채울 품목 ID 목록

        Returns:
            현재 가격 맵
        """
        ids = [str(item_id) for item_id in item_ids]
        if self.has_pricing(ids):
            logger.debug(f"위시리스트 {wishlist_id} 가격이 이미 있어 조회를 건너뜁니다")
            return self.pricing

        fast_wave = asyncio.create_task(
            self._run_wave(
                f"/api/wishlist/{wishlist_id}/pricing",
                {"progressive": "true"},
                self._fast_wave_timeout,
                ids,
                FAST_WAVE_RETAILERS,
            )
        )
        slow_wave = asyncio.create_task(
            self._run_wave(
                f"/api/wishlist/{wishlist_id}/amazon-pricing",
                None,
                self._slow_wave_timeout,
                ids,
                SLOW_WAVE_RETAILERS,
            )
        )
        await asyncio.gather(fast_wave, slow_wave)
        return self.pricing

    async def _run_wave(
        self,
        url: str,
        params: Optional[Dict[str, str]],
        timeout: float,
        item_ids: List[str],
        retailers: Sequence[str],
    ) -> None:
        """배치 요청 한 번 (실패 시 품목별 요청으로 대체)"""
        try:
            response = await self._client.get(url, params=params, timeout=timeout)
            response.raise_for_status()
            data = response.json()
            if not isinstance(data, dict):
                raise ValueError("가격 응답 형식 오류")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"배치 가격 조회 실패 ({url}): {e}, 품목별 조회로 전환")
            await self._fetch_missing_items(item_ids, retailers)
            return

        self.apply(data)

    def _is_missing(self, item_id: str, retailers: Sequence[str]) -> bool:
        pricing = self.pricing.get(item_id, {}).get("pricing") or {}
        return any(retailer not in pricing for retailer in retailers)

    async def _fetch_missing_items(self, item_ids: List[str], retailers: Sequence[str]) -> None:
        """가격이 빠진 품목만 순차적으로 단건 조회 (실패는 로그만 남김)"""
        for item_id in item_ids:
            if not self._is_missing(item_id, retailers):
                continue

            try:
                response = await self._client.get(
                    f"/api/item/{item_id}/pricing",
                    timeout=self._item_timeout,
                )
                response.raise_for_status()
                data = response.json()
                if not isinstance(data, dict):
                    raise ValueError("가격 응답 형식 오류")
            except (httpx.HTTPError, ValueError) as e:
                logger.warning(f"품목 {item_id} 가격 조회 실패: {e}")
                continue

            self.apply({item_id: data})
