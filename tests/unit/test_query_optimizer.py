"""
검색어 최적화 유닛 테스트
"""
import pytest

from needfully.utils.query_optimizer import optimize_query


class TestOptimizeQuery:
    """검색어 최적화 테스트"""

    @pytest.mark.parametrize(
        "query,expected",
        [
            ("We need some warm blankets for the kids", "warm blankets kids"),
            ("Size 4 diapers", "Size 4 diapers"),
            ("The Twin-size fleece blanket", "Twin-size fleece blanket"),
            ("baby's first winter coat", "baby's first winter coat"),
        ],
    )
    def test_removes_stop_words(self, query: str, expected: str):
        """불용어 제거, 원래 대소문자 유지"""
        assert optimize_query(query) == expected

    def test_limits_token_count(self):
        """앞쪽 단어만 유지"""
        query = "heavy duty winter gloves adult large black waterproof"
        assert optimize_query(query) == "heavy duty winter gloves adult large"
        assert optimize_query(query, max_tokens=2) == "heavy duty"

    def test_only_stop_words_keeps_query(self):
        """남는 단어가 없으면 공백만 정리한 원문"""
        assert optimize_query("  for   the ") == "for the"

    def test_deterministic(self):
        """같은 입력에는 같은 결과"""
        query = "Please send us some canned soup and crackers"
        assert optimize_query(query) == optimize_query(query) == "send canned soup crackers"

    @pytest.mark.parametrize(
        "query",
        [
            "Children's Tylenol 3.2 fl oz",
            "café crème",
            "Pañales talla 4",
        ],
    )
    def test_keeps_decimals_and_accented_words(self, query: str):
        """소수점 수치와 비 ASCII 문자는 그대로 유지"""
        assert optimize_query(query) == query
