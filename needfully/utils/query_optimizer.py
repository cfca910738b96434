"""
검색어 최적화 유틸리티
리테일러 검색 품질을 위해 불용어를 제거하고 앞쪽 핵심 단어만 남김
"""
import re

# 상품 매칭에 기여하지 않는 단어
STOP_WORDS = frozenset(
    {
        "a",
        "an",
        "and",
        "any",
        "are",
        "as",
        "at",
        "be",
        "by",
        "for",
        "from",
        "i",
        "in",
        "is",
        "it",
        "me",
        "my",
        "need",
        "needed",
        "needs",
        "of",
        "on",
        "or",
        "our",
        "please",
        "some",
        "that",
        "the",
        "this",
        "to",
        "us",
        "want",
        "we",
        "with",
    }
)

# 단어 사이의 . ' - 는 토큰에 남김 (3.2 fl oz, baby's)
_TOKEN_PATTERN = re.compile(r"\w+(?:[.'\u2019\-]\w+)*")


def optimize_query(query: str, max_tokens: int = 6) -> str:
    """
    검색어 최적화

    같은 입력에는 항상 같은 결과를 반환한다.

    Args:
        query: 원문 검색어
        max_tokens: 유지할 최대 단어 수

    Returns:
        최적화된 검색어 (남는 단어가 없으면 공백 정리된 원문)
    """
    tokens = [
        token
        for token in _TOKEN_PATTERN.findall(query)
        if token.lower() not in STOP_WORDS
    ]

    if not tokens:
        return " ".join(query.split())

    return " ".join(tokens[:max_tokens])
