"""
데이터베이스 연결
가격 조회에 필요한 위시리스트 품목을 읽기 위한 비동기 세션만 제공
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from needfully.config import get_settings

settings = get_settings()


class Base(DeclarativeBase):
    """위시리스트 ORM 모델 베이스"""

    pass


# 조회 전용이므로 작은 풀로 충분
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
    pool_size=5,
    max_overflow=5,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """요청 단위 읽기 세션 (커밋하지 않음, 종료 시 자동 close)"""
    async with async_session_factory() as session:
        yield session


async def close_db() -> None:
    """엔진 연결 풀 정리 (앱 종료 시)"""
    await engine.dispose()
