"""
리테일러 원본 응답 모델
외부 API 응답을 어댑터 경계에서만 사용하는 태그드 모델로 파싱
"""
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class _RawModel(BaseModel):
    """외부 API 응답 공통 설정 (모르는 필드는 무시)"""

    model_config = {"extra": "ignore"}


# ==================== RainforestAPI (Amazon) ====================
class RainforestSearchItem(_RawModel):
    """RainforestAPI search_results 항목"""

    source: Literal["rainforest"] = "rainforest"
    asin: Optional[str] = None
    title: str = ""
    link: str = ""
    image: Optional[str] = None
    rating: Optional[float] = None
    ratings_total: Optional[int] = None
    # {"value": 19.99, "currency": "USD", "raw": "$19.99"} 형태가 일반적
    price: Optional[Any] = None
    prices: List[Dict[str, Any]] = Field(default_factory=list)


# ==================== SerpAPI (Walmart) ====================
class WalmartOffer(_RawModel):
    """Walmart 대표 판매 정보"""

    offer_price: Optional[Any] = None
    min_price: Optional[Any] = None


class WalmartOrganicResult(_RawModel):
    """SerpAPI walmart 엔진 organic_results 항목"""

    source: Literal["walmart"] = "walmart"
    us_item_id: Optional[Union[str, int]] = None
    product_id: Optional[Union[str, int]] = None
    title: str = ""
    thumbnail: Optional[str] = None
    image: Optional[str] = None
    product_page_url: Optional[str] = None
    link: Optional[str] = None
    rating: Optional[float] = None
    reviews: Optional[int] = None
    brand: Optional[str] = None
    primary_offer: Optional[WalmartOffer] = None
    price: Optional[Any] = None


# ==================== SerpAPI (Google → Target) ====================
class GoogleDetectedExtensions(_RawModel):
    """구글 리치 스니펫 추출 값"""

    price: Optional[Any] = None
    currency: Optional[str] = None
    rating: Optional[float] = None
    reviews: Optional[int] = None


class GoogleRichSnippetBlock(_RawModel):
    detected_extensions: Optional[GoogleDetectedExtensions] = None


class GoogleRichSnippet(_RawModel):
    top: Optional[GoogleRichSnippetBlock] = None
    bottom: Optional[GoogleRichSnippetBlock] = None


class GoogleOrganicResult(_RawModel):
    """SerpAPI google 엔진 organic_results 항목"""

    source: Literal["google"] = "google"
    title: str = ""
    link: str = ""
    snippet: Optional[str] = None
    thumbnail: Optional[str] = None
    rich_snippet: Optional[GoogleRichSnippet] = None

    @property
    def detected_extensions(self) -> Optional[GoogleDetectedExtensions]:
        """상단/하단 리치 스니펫 중 먼저 발견된 추출 값"""
        if self.rich_snippet is None:
            return None
        for block in (self.rich_snippet.top, self.rich_snippet.bottom):
            if block is not None and block.detected_extensions is not None:
                return block.detected_extensions
        return None


# 어댑터 경계에서 다루는 원본 항목 (source 필드로 구분)
RawRetailerItem = Annotated[
    Union[RainforestSearchItem, WalmartOrganicResult, GoogleOrganicResult],
    Field(discriminator="source"),
]
