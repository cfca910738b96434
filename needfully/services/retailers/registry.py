"""
리테일러 클라이언트 구성
API 키가 설정된 리테일러만 생성하고, 과금되는 Amazon은 간격 제한 + 캐시 래퍼로 감쌈
"""
import logging
from typing import Dict, Optional

from needfully.config import get_settings
from needfully.models.product import Retailer
from needfully.services.cache import InMemoryCache
from needfully.services.rate_limiter import RateLimitedSearch, RetailerSearch
from needfully.services.retailers.amazon import AmazonSearchClient
from needfully.services.retailers.target import TargetSearchClient
from needfully.services.retailers.walmart import WalmartSearchClient

logger = logging.getLogger(__name__)


def build_retailer_clients() -> Dict[Retailer, RetailerSearch]:
    """설정 기반 리테일러 클라이언트 생성"""
    settings = get_settings()
    clients: Dict[Retailer, RetailerSearch] = {}

    if settings.amazon_configured:
        amazon = AmazonSearchClient(settings.rainforest_api_key, settings.http_timeout_seconds)
        clients[Retailer.AMAZON] = RateLimitedSearch(
            amazon,
            InMemoryCache(settings.amazon_cache_ttl_seconds),
            min_interval_seconds=settings.amazon_min_interval_seconds,
        )
    else:
        logger.warning("RAINFOREST_API_KEY가 없어 Amazon 검색을 제외합니다")

    if settings.serpapi_configured:
        clients[Retailer.WALMART] = WalmartSearchClient(
            settings.serpapi_key, settings.http_timeout_seconds
        )
        clients[Retailer.TARGET] = TargetSearchClient(
            settings.serpapi_key, settings.http_timeout_seconds
        )
    else:
        logger.warning("SERPAPI_KEY가 없어 Walmart/Target 검색을 제외합니다")

    return clients


# 싱글톤 인스턴스 (Amazon 요청 간격 상태는 프로세스당 하나)
_retailer_clients: Optional[Dict[Retailer, RetailerSearch]] = None


def get_retailer_clients() -> Dict[Retailer, RetailerSearch]:
    """리테일러 클라이언트 싱글톤 반환"""
    global _retailer_clients
    if _retailer_clients is None:
        _retailer_clients = build_retailer_clients()
    return _retailer_clients
