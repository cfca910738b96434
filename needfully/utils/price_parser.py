"""
가격 파싱 유틸리티
리테일러마다 다른 가격 형태(숫자, 문자열, 중첩 객체)를 단일 표시 문자열로 변환
"""
import hashlib
import math
import re
from typing import Any, Mapping, Optional

from needfully.models.product import Retailer

PRICE_NOT_AVAILABLE = "Price not available"
PRICE_VARIES = "Price varies"

# 중첩 가격 객체에서 값을 찾는 순서
_PRICE_KEYS = ("value", "amount", "offer_price", "price", "min_price", "raw")

# "$1,299.00", "19.99", "USD 5" 등에서 첫 번째 금액
_AMOUNT_PATTERN = re.compile(r"\d[\d,]*(?:\.\d+)?|\.\d+")

# URL 기반 상품 ID 패턴
_PRODUCT_ID_PATTERNS = {
    Retailer.TARGET: re.compile(r"/A-(\d+)"),
    Retailer.WALMART: re.compile(r"/ip/(?:[^/?#]+/)?(\d+)"),
    Retailer.AMAZON: re.compile(r"/(?:dp|gp/product)/([A-Z0-9]{10})"),
}


def parse_price(raw: Any) -> Optional[float]:
    """
    가격 원본 값을 달러 단위 숫자로 변환

    지원 형태:
    - 숫자: 150, 19.99
    - 문자열: "19.99", "$19.99", "$1,299.00"
    - 객체: {"value": 5, "currency": "USD"}, {"amount": "5.00"}, {"raw": "$5.00"}

    Args:
        raw: 리테일러 응답의 가격 값

    Returns:
        숫자 가격 또는 None (추출 불가)
    """
    if raw is None or isinstance(raw, bool):
        return None

    if isinstance(raw, (int, float)):
        value = float(raw)
        return value if math.isfinite(value) else None

    if isinstance(raw, str):
        match = _AMOUNT_PATTERN.search(raw)
        if not match:
            return None
        try:
            return float(match.group(0).replace(",", ""))
        except ValueError:
            return None

    if isinstance(raw, Mapping):
        for key in _PRICE_KEYS:
            value = parse_price(raw.get(key))
            if value is not None:
                return value

    return None


def format_price(raw: Any, fallback: str = PRICE_NOT_AVAILABLE) -> str:
    """
    가격을 '$<금액 소수점 2자리>' 형태로 포맷

    0 이하이거나 숫자를 추출할 수 없으면 fallback 문자열을 반환한다.
    입력에 이미 통화 기호가 있어도 '$'는 한 번만 붙는다.
    """
    amount = parse_price(raw)
    if amount is None or amount <= 0:
        return fallback
    return f"${amount:.2f}"


def display_price(raw: Any) -> str:
    """검색 결과 표시용 가격 (숫자 없으면 'Price varies')"""
    return format_price(raw, fallback=PRICE_VARIES)


def best_price(pricing: Mapping[str, Any]) -> Optional[str]:
    """
    리테일러별 가격 중 최저가 선택

    available이 True이고 price가 있는 리테일러만 비교한다.

    Args:
        pricing: {"amazon": {"available": True, "price": "$20.00", ...}, ...}

    Returns:
        '$15.50' 형태의 최저가 또는 None
    """
    candidates = []
    for entry in pricing.values():
        if not entry or not entry.get("available"):
            continue
        amount = parse_price(entry.get("price"))
        if amount is not None and amount > 0:
            candidates.append(amount)

    if not candidates:
        return None
    return f"${min(candidates):.2f}"


def extract_product_id(url: Optional[str], retailer: Retailer) -> Optional[str]:
    """상품 URL에서 리테일러 상품 ID 추출 (Target TCIN, Walmart item ID, ASIN)"""
    if not url:
        return None
    match = _PRODUCT_ID_PATTERNS[retailer].search(url)
    return match.group(1) if match else None


def fallback_product_id(retailer: Retailer, title: str) -> str:
    """
    안정적인 ID를 얻지 못했을 때의 대체 ID

    리테일러와 정규화된 상품명의 해시이므로 같은 상품은 호출마다 같은 ID를 갖는다.
    """
    normalized = " ".join(title.lower().split())
    digest = hashlib.sha1(f"{retailer.value}:{normalized}".encode()).hexdigest()
    return f"{retailer.value}-{digest[:12]}"
