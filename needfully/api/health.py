"""
헬스체크 엔드포인트
서버 및 리테일러 API 설정 상태 확인
"""
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel

from needfully.config import get_settings
from needfully.models.product import Retailer
from needfully.services.rate_limiter import RateLimitedSearch
from needfully.services.retailers.registry import get_retailer_clients

router = APIRouter()


class HealthResponse(BaseModel):
    """헬스체크 응답"""

    status: Literal["healthy", "degraded", "unhealthy"]
    amazon_api: Literal["configured", "unconfigured"]
    serpapi: Literal["configured", "unconfigured"]
    amazon_cache_entries: int


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    서버 상태 확인

    Returns:
        HealthResponse: 리테일러 API 설정 여부 및 Amazon 캐시 항목 수
    """
    settings = get_settings()

    # Amazon 캐시 항목 수
    amazon_cache_entries = 0
    amazon = get_retailer_clients().get(Retailer.AMAZON)
    if isinstance(amazon, RateLimitedSearch):
        amazon_cache_entries = len(amazon.cache)

    # 전체 상태 결정
    if settings.amazon_configured and settings.serpapi_configured:
        status = "healthy"
    elif settings.amazon_configured or settings.serpapi_configured:
        status = "degraded"
    else:
        status = "unhealthy"

    return HealthResponse(
        status=status,
        amazon_api="configured" if settings.amazon_configured else "unconfigured",
        serpapi="configured" if settings.serpapi_configured else "unconfigured",
        amazon_cache_entries=amazon_cache_entries,
    )
