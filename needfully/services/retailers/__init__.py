"""
리테일러 상품 검색 클라이언트
"""

from needfully.services.retailers.amazon import AmazonSearchClient
from needfully.services.retailers.base import BaseRetailerClient, RetailerAPIError
from needfully.services.retailers.target import TargetSearchClient
from needfully.services.retailers.walmart import WalmartSearchClient

__all__ = [
    "AmazonSearchClient",
    "BaseRetailerClient",
    "RetailerAPIError",
    "TargetSearchClient",
    "WalmartSearchClient",
]
