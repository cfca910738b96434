"""
상품 모델 정의
리테일러 공통 검색 결과 및 가격 정보 모델
"""
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class Retailer(str, Enum):
    """리테일러"""

    AMAZON = "amazon"  # RainforestAPI (과금)
    WALMART = "walmart"  # SerpAPI
    TARGET = "target"  # SerpAPI (구글 검색)


class SearchResult(BaseModel):
    """
    리테일러 공통 검색 결과

    어댑터가 생성하며 retailer 값은 항상 생성한 어댑터가 채운다.
    JSON 응답은 camelCase(imageUrl, ratingsCount 등)로 직렬화된다.
    """

    product_id: str = Field(..., description="상품 ID (리테일러 제공 또는 URL에서 추출)")
    title: str = Field(..., description="상품명")
    price: str = Field(..., description="표시용 가격 ('$19.99' 또는 'Price varies')")
    price_value: Optional[float] = Field(None, ge=0, description="숫자 가격 (달러)")
    image_url: str = Field(default="", description="썸네일 이미지 URL")
    link: str = Field(..., description="상품 상세 URL")
    retailer: Retailer = Field(..., description="결과를 생성한 리테일러")
    rating: Optional[float] = Field(None, ge=0, description="평점")
    ratings_count: Optional[int] = Field(None, ge=0, description="평가 수")
    brand: Optional[str] = Field(None, description="브랜드")

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "productId": "B07XJ8C8F5",
                "title": "Fleece Throw Blanket",
                "price": "$19.99",
                "priceValue": 19.99,
                "imageUrl": "https://m.media-amazon.com/images/I/blanket.jpg",
                "link": "https://www.amazon.com/dp/B07XJ8C8F5",
                "retailer": "amazon",
                "rating": 4.7,
                "ratingsCount": 15230,
            }
        },
    }


class Pagination(BaseModel):
    """검색 결과 페이지 정보"""

    current_page: int = Field(..., ge=1, description="현재 페이지")
    total_pages: int = Field(..., ge=1, description="전체 페이지 수")
    has_next_page: bool
    has_previous_page: bool
    total_results: int = Field(..., ge=0, description="필터 적용 후 전체 결과 수")
    results_per_page: int = Field(..., ge=1, description="페이지당 결과 수")


class SearchResponse(BaseModel):
    """상품 검색 응답"""

    data: List[SearchResult] = Field(default_factory=list)
    pagination: Pagination


class RetailerPrice(BaseModel):
    """리테일러별 가격 정보"""

    available: bool = Field(..., description="가격 확인 가능 여부")
    price: Optional[str] = Field(None, description="표시용 가격")
    link: Optional[str] = Field(None, description="구매 링크")
    image: Optional[str] = Field(None, description="이미지 URL")


class ItemPricing(BaseModel):
    """품목별 리테일러 가격 묶음"""

    pricing: Dict[Retailer, RetailerPrice] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """에러 응답"""

    detail: str = Field(..., description="에러 메시지")
