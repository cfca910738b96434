"""
환경변수 설정 모듈
Pydantic Settings를 사용하여 환경변수를 관리합니다.
모든 설정은 .env 파일에서 가져옵니다.
"""

from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """애플리케이션 설정"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========== 리테일러 API 설정 ==========
    # Amazon (RainforestAPI, 호출당 과금)
    rainforest_api_key: str = ""
    # Walmart / Target (SerpAPI)
    serpapi_key: str = ""

    # ========== 검색 설정 ==========
    default_location: str = "60602"
    search_limit_per_retailer: int = 20
    max_search_results: int = 60
    query_max_tokens: int = 6

    # 빠른 리테일러(Walmart/Target)와 느린 리테일러(Amazon)의 타임아웃
    fast_retailer_timeout_seconds: float = 3.0
    slow_retailer_timeout_seconds: float = 8.0

    # 외부 API HTTP 타임아웃
    http_timeout_seconds: float = 10.0

    # ========== 캐시/요청 간격 설정 ==========
    amazon_cache_ttl_seconds: int = 1800
    amazon_min_interval_seconds: float = 1.0
    pricing_cache_ttl_seconds: int = 600

    # ========== 서버 설정 ==========
    api_host: str = ""
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    @property
    def server_port(self) -> int:
        """PORT 환경변수 우선 사용"""
        return self.port

    # ========== CORS 설정 ==========
    cors_origins: str = ""

    @property
    def cors_origins_list(self) -> List[str]:
        """CORS origins를 리스트로 변환"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ========== 데이터베이스 설정 ==========
    postgres_user: str = ""
    postgres_password: str = ""
    postgres_host: str = ""
    postgres_port: int = 5432
    postgres_db: str = ""

    @property
    def database_url(self) -> str:
        """PostgreSQL 비동기 연결 URL"""
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def database_url_sync(self) -> str:
        """PostgreSQL 동기 연결 URL (Alembic용)"""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def amazon_configured(self) -> bool:
        return bool(self.rainforest_api_key)

    @property
    def serpapi_configured(self) -> bool:
        return bool(self.serpapi_key)


@lru_cache()
def get_settings() -> Settings:
    """캐싱된 설정 인스턴스 반환"""
    return Settings()
