"""
품목 가격 API 엔드포인트
1차(Walmart/Target) / 2차(Amazon) 배치 가격 조회 및 단일 품목 가격 조회
"""
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from needfully.database import get_db
from needfully.models.product import ItemPricing
from needfully.models.wishlist import Wishlist, WishlistItem
from needfully.services.pricing import PricingService, get_pricing_service

router = APIRouter(tags=["Pricing"])


async def _get_wishlist_items(db: AsyncSession, wishlist_id: int) -> List[WishlistItem]:
    """위시리스트의 미후원 품목 조회 (위시리스트가 없으면 404)"""
    wishlist = await db.get(Wishlist, wishlist_id)
    if wishlist is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Wishlist not found",
        )

    result = await db.execute(
        select(WishlistItem)
        .where(
            and_(
                WishlistItem.wishlist_id == wishlist_id,
                WishlistItem.is_fulfilled.is_(False),
            )
        )
        .order_by(WishlistItem.id.asc())
    )
    return list(result.scalars().all())


@router.get("/wishlist/{wishlist_id}/pricing", response_model=Dict[str, ItemPricing])
async def get_wishlist_pricing(
    wishlist_id: int,
    progressive: bool = Query(False, description="true이면 Walmart/Target만 조회"),
    db: AsyncSession = Depends(get_db),
    pricing_service: PricingService = Depends(get_pricing_service),
):
    """
    위시리스트 배치 가격 조회

    progressive=true: 빠른 리테일러(1차)만, 아니면 전체 리테일러
    """
    items = await _get_wishlist_items(db, wishlist_id)
    if progressive:
        return await pricing_service.fast_wave(items)
    return await pricing_service.price_items(items)


@router.get("/wishlist/{wishlist_id}/amazon-pricing", response_model=Dict[str, ItemPricing])
async def get_wishlist_amazon_pricing(
    wishlist_id: int,
    db: AsyncSession = Depends(get_db),
    pricing_service: PricingService = Depends(get_pricing_service),
):
    """위시리스트 Amazon 가격 조회 (2차)"""
    items = await _get_wishlist_items(db, wishlist_id)
    return await pricing_service.slow_wave(items)


@router.get("/item/{item_id}/pricing", response_model=ItemPricing)
async def get_item_pricing(
    item_id: int,
    db: AsyncSession = Depends(get_db),
    pricing_service: PricingService = Depends(get_pricing_service),
):
    """단일 품목 가격 조회 (배치 실패 시 대체 경로)"""
    item = await db.get(WishlistItem, item_id)
    if item is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Item not found",
        )

    return await pricing_service.price_item(item)
