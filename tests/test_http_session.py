import pytest

from core.constants import HTTP_USER_AGENT
from core.http.session import SessionState, cleanup_session, get_session


@pytest.mark.asyncio
async def test_session_reuse_and_cleanup() -> None:
    session_a = await get_session()
    session_b = await get_session()

    assert session_a is session_b

    await cleanup_session()
    assert session_a.closed

    session_c = await get_session()
    assert session_c is not session_a

    await cleanup_session()


@pytest.mark.asyncio
async def test_session_identifies_client() -> None:
    session = await get_session()
    try:
        assert session.headers["User-Agent"] == HTTP_USER_AGENT
        assert session.headers["Accept"] == "application/json"
    finally:
        await cleanup_session()


@pytest.mark.asyncio
async def test_session_from_another_process_is_replaced() -> None:
    session_a = await get_session()
    SessionState.session_owner_pid = -1

    session_b = await get_session()

    assert session_b is not session_a
    assert session_a.closed
    await cleanup_session()
