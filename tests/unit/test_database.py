"""
데이터베이스 세션 유닛 테스트
"""
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from needfully import database


class TestGetDb:
    """요청 단위 세션 테스트"""

    @pytest.mark.asyncio
    async def test_yields_session_bound_to_engine(self):
        sessions = database.get_db()

        session = await sessions.__anext__()

        assert isinstance(session, AsyncSession)
        assert session.bind is database.engine
        await sessions.aclose()

    @pytest.mark.asyncio
    async def test_new_session_per_request(self):
        first = [session async for session in database.get_db()]
        second = [session async for session in database.get_db()]

        assert len(first) == len(second) == 1
        assert first[0] is not second[0]


def test_session_factory_keeps_loaded_attributes():
    """읽은 품목이 세션 종료 후에도 만료되지 않음"""
    assert database.async_session_factory.kw["expire_on_commit"] is False
    assert database.async_session_factory.kw["autoflush"] is False
