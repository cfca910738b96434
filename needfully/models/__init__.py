# Pydantic Models
from needfully.models.product import (
    Retailer,
    SearchResult,
    Pagination,
    SearchResponse,
    RetailerPrice,
    ItemPricing,
    ErrorResponse,
)
from needfully.models.retailer import (
    RainforestSearchItem,
    WalmartOrganicResult,
    GoogleOrganicResult,
    RawRetailerItem,
)

__all__ = [
    # Product models
    "Retailer",
    "SearchResult",
    "Pagination",
    "SearchResponse",
    "RetailerPrice",
    "ItemPricing",
    "ErrorResponse",
    # Raw retailer models
    "RainforestSearchItem",
    "WalmartOrganicResult",
    "GoogleOrganicResult",
    "RawRetailerItem",
]
