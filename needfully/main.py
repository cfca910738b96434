"""
FastAPI 메인 애플리케이션
Needfully 상품 검색 / 가격 조회 백엔드
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from needfully.api import health, pricing, search
from needfully.config import get_settings
from needfully.database import close_db
from needfully.services.retailers.registry import get_retailer_clients


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """애플리케이션 생명주기 관리"""
    # 시작 시 초기화 (Amazon 요청 간격 상태는 여기서 한 번만 생성)
    clients = get_retailer_clients()
    retailers = ", ".join(retailer.value for retailer in clients) or "없음"
    print(f"🛒 Needfully 서버 시작 (리테일러: {retailers})")

    yield

    # 종료 시 정리
    await close_db()
    print("🛒 Needfully 서버 종료")


def create_app() -> FastAPI:
    """FastAPI 앱 팩토리"""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="Needfully Product Search API",
        description="필요 목록 품목의 멀티 리테일러(Amazon, Walmart, Target) 검색 및 가격 조회 API",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # CORS 설정
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 라우터 등록
    app.include_router(health.router, prefix="/api", tags=["Health"])
    app.include_router(search.router, prefix="/api")
    app.include_router(pricing.router, prefix="/api")

    # 로드밸런서 헬스체크용 루트 레벨 헬스체크
    @app.get("/health")
    async def root_health():
        return {"status": "ok"}

    return app


# 앱 인스턴스
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "needfully.main:app",
        host=settings.api_host,
        port=settings.server_port,
        reload=settings.debug,
    )
