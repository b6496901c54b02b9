"""Tests for the HTTP client against the fake API."""

import asyncio

import httpx
import pytest

from bananint.client import AuthorityClient
from bananint.errors import RejectedError, TransportError
from bananint.models import SyncRequest, UpgradeTier

from fake_authority import BASE_URL, failing_client


def mock_client(handler):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AuthorityClient(BASE_URL, 1.0, http=http)


def test_init_mints_session(authority):
    async def scenario():
        async with authority.connect() as client:
            return await client.init(None)

    response = asyncio.run(scenario())
    assert response.sessionId in authority.sessions
    assert response.gameState.bananasPerClick == 1
    assert {u.type for u in response.upgrades} >= {UpgradeTier.CLICK, UpgradeTier.AUTO}


def test_sync_round_trip(authority):
    state = authority.create_session()

    async def scenario():
        async with authority.connect() as client:
            return await client.sync(SyncRequest(
                sessionId=state.sessionId, pendingClicks=3, clientBananas=3, lastSyncTime=state.lastSyncTime,
            ))

    response = asyncio.run(scenario())
    assert response.success
    assert response.gameState.bananas == 3
    assert authority.sync_requests[0].pendingClicks == 3


def test_http_exception_detail_is_a_rejection(authority):
    state = authority.create_session()

    async def scenario():
        async with authority.connect() as client:
            await client.buy_skin(state.sessionId, "pixel")

    with pytest.raises(RejectedError) as excinfo:
        asyncio.run(scenario())
    assert excinfo.value.message == "Not enough bananas"
    assert excinfo.value.status_code == 400


def test_connection_error_is_transport_error():
    async def scenario():
        async with failing_client() as client:
            await client.init(None)

    with pytest.raises(TransportError):
        asyncio.run(scenario())


def test_timeout_is_transport_error():
    async def scenario():
        async with failing_client(httpx.ReadTimeout("too slow")) as client:
            await client.reset("session-1")

    with pytest.raises(TransportError, match="timed out"):
        asyncio.run(scenario())


def test_server_error_is_transport_error():
    async def scenario():
        async with mock_client(lambda request: httpx.Response(502, text="Bad Gateway")) as client:
            await client.prestige("session-1")

    with pytest.raises(TransportError, match="502"):
        asyncio.run(scenario())


def test_invalid_payload_is_transport_error():
    async def scenario():
        async with mock_client(lambda request: httpx.Response(200, json={"unexpected": True})) as client:
            await client.upgrade("session-1", "click_1")

    with pytest.raises(TransportError):
        asyncio.run(scenario())


def test_skins_catalog(authority):
    async def scenario():
        async with authority.connect() as client:
            return await client.skins()

    skins = asyncio.run(scenario())
    assert skins["pixel"].cost == 50000


def test_closed_client_raises_transport_error():
    async def scenario():
        client = AuthorityClient(BASE_URL, 1.0)
        await client.close()
        assert client.closed
        await client.init(None)

    with pytest.raises(TransportError):
        asyncio.run(scenario())


def test_closed_shared_client_refuses_requests(authority):
    async def scenario():
        client = authority.connect()
        await client.close()
        await client.init(None)

    with pytest.raises(TransportError):
        asyncio.run(scenario())
    assert authority.calls == []
