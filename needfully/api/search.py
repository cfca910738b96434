"""
상품 검색 API 엔드포인트
Amazon / Walmart / Target 통합 검색
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from needfully.config import get_settings
from needfully.models.product import ErrorResponse, SearchResponse
from needfully.services.search_aggregator import (
    ProductSearchAggregator,
    get_search_aggregator,
    paginate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])


@router.get(
    "/search",
    response_model=SearchResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def search_products(
    query: Optional[str] = Query(None, description="검색어"),
    min_price: Optional[float] = Query(None, ge=0, description="최소 가격 (달러)"),
    max_price: Optional[float] = Query(None, ge=0, description="최대 가격 (달러)"),
    page: int = Query(1, ge=1, description="페이지 번호"),
    limit: Optional[int] = Query(None, ge=1, le=100, description="페이지당 결과 수 (기본: 전체)"),
    aggregator: ProductSearchAggregator = Depends(get_search_aggregator),
) -> SearchResponse:
    """
    멀티 리테일러 상품 검색

    일부 리테일러가 실패하거나 시간 초과되어도 200과 함께 모인 결과만 반환한다.
    결과가 0개인 경우도 200이다.
    페이지는 한 번의 검색 결과(최대 60개)를 나눈 것이며 요청마다 새로 검색한다.
    """
    if query is None or not query.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Search query is required",
        )

    if min_price is not None and max_price is not None and min_price > max_price:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="min_price cannot exceed max_price",
        )

    try:
        results = await aggregator.search(query, min_price=min_price, max_price=max_price)
    except Exception as e:
        logger.exception(f"상품 검색 실패 ({query!r}): {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to search products",
        )

    page_results, pagination = paginate(
        results, page, limit or get_settings().max_search_results
    )
    return SearchResponse(data=page_results, pagination=pagination)
