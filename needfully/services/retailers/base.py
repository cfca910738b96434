"""
리테일러 검색 클라이언트 베이스 클래스
외부 상품 검색 API 호출 및 공통 결과(SearchResult) 변환
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from needfully.models.product import Retailer, SearchResult
from needfully.models.retailer import RawRetailerItem

logger = logging.getLogger(__name__)

RawT = TypeVar("RawT", bound=BaseModel)

# 요청이 서버에 도달하지 않은 연결 실패만 재시도 (과금 중복 방지)
_CONNECT_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout)


class RetailerAPIError(Exception):
    """리테일러 API 에러"""

    pass


class BaseRetailerClient(ABC):
    """
    리테일러 검색 클라이언트 베이스 클래스

    통신/응답 오류는 로그를 남긴 뒤 RetailerAPIError로 올린다.
    호출하는 쪽(집계기, 가격 조회)이 잡아서 결과 0개로 처리하며,
    실패한 호출은 캐시에 남지 않는다.
    """

    BASE_URL: str = ""

    def __init__(self, api_key: str, http_timeout: float = 10.0) -> None:
        if not api_key:
            raise ValueError(f"{self.retailer.value} 검색에는 API 키가 필요합니다")
        self._api_key = api_key
        self._http_timeout = http_timeout

    @property
    @abstractmethod
    def retailer(self) -> Retailer:
        """리테일러 식별자"""
        pass

    @abstractmethod
    def _build_params(self, query: str, location: str, limit: int) -> Dict[str, Any]:
        """API 요청 파라미터 생성"""
        pass

    @abstractmethod
    def _parse_items(self, data: Dict[str, Any], limit: int) -> List[RawRetailerItem]:
        """API 응답에서 원본 상품 항목 추출"""
        pass

    @abstractmethod
    def _normalize(self, item: RawRetailerItem) -> SearchResult:
        """원본 상품 항목을 SearchResult로 변환"""
        pass

    async def search(self, query: str, location: str, limit: int) -> List[SearchResult]:
        """
        상품 검색

        Args:
            query: 검색어
            location: 우편번호 등 위치 힌트 (필요한 API만 사용)
            limit: 최대 결과 수

        Returns:
            SearchResult 리스트

        Raises:
            RetailerAPIError: 통신 실패, 비정상 응답 코드, 응답 형식 오류
        """
        try:
            data = await self._request(self._build_params(query, location, limit))
            results = [self._normalize(item) for item in self._parse_items(data, limit)]
        except RetailerAPIError as e:
            logger.error(f"{self.retailer.value} 검색 실패 ({query!r}): {e}")
            raise
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"{self.retailer.value} 검색 실패 ({query!r}): {e}")
            raise RetailerAPIError(f"{self.retailer.value} 요청 실패: {e}") from e

        logger.info(f"{self.retailer.value} 검색 완료 ({query!r}): {len(results)}개 상품")
        return results

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=1),
        retry=retry_if_exception_type(_CONNECT_ERRORS),
        reraise=True,
    )
    async def _request(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """API GET 요청 (JSON 객체 응답)"""
        async with httpx.AsyncClient(timeout=self._http_timeout) as client:
            response = await client.get(self.BASE_URL, params=params)

            if response.status_code == 429:
                raise RetailerAPIError("API 호출 한도 초과")
            elif response.status_code == 401:
                raise RetailerAPIError("API 인증 실패")
            elif response.status_code != 200:
                raise RetailerAPIError(f"API 오류: {response.status_code}")

            data = response.json()

        if not isinstance(data, dict):
            raise RetailerAPIError("API 응답 형식 오류")
        if data.get("error"):
            raise RetailerAPIError(f"API 오류: {data['error']}")
        return data

    def _validate_items(
        self,
        model: Type[RawT],
        raw_items: Any,
    ) -> List[RawT]:
        """원본 항목을 하나씩 검증 (형식이 깨진 항목은 건너뜀)"""
        if not isinstance(raw_items, Sequence) or isinstance(raw_items, (str, bytes)):
            return []

        items: List[RawT] = []
        for raw in raw_items:
            try:
                items.append(model.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"{self.retailer.value} 응답 항목 무시: {e.error_count()}개 필드 오류")
        return items
