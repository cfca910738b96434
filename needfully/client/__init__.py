"""
Needfully API 클라이언트
"""

from needfully.client.pricing_loader import (
    ProgressivePricingLoader,
    PricingMap,
    merge_pricing,
)

__all__ = ["ProgressivePricingLoader", "PricingMap", "merge_pricing"]
