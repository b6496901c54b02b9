"""End-to-end tests for a client session against the fake API."""

import asyncio

from bananint.__main__ import status_report
from bananint.config import ClientConfig
from bananint.session import GameSession
from bananint.sync import SyncOutcome

from fake_authority import BASE_URL, failing_client


def make_session(authority, clock, identity, config=None, client=None, run_timers=False):
    return GameSession(
        config or ClientConfig(api_base_url=BASE_URL),
        client=client or authority.connect(),
        identity=identity,
        clock=clock,
        run_timers=run_timers,
    )


def test_start_mints_and_persists_session(authority, clock, identity):
    session = make_session(authority, clock, identity)

    async def scenario():
        await session.start()
        await session.close()

    asyncio.run(scenario())
    assert not session.loading
    assert identity.resolve() == session.state.sessionId
    assert session.state.sessionId in authority.sessions
    assert "click_1" in session.engine.upgrades
    assert "pixel" in session.engine.skins
    assert session.offline_report.earned == 0


def test_start_restores_session_with_offline_earnings(authority, clock, identity):
    state = authority.create_session()
    authority.upgrades[state.sessionId]["auto_2"].owned = 1  # 5 bananas/sec
    state.lastSyncTime = clock() - 2 * 60 * 60 * 1000
    identity.remember(state.sessionId)
    session = make_session(authority, clock, identity)

    async def scenario():
        report = await session.start()
        await session.close()
        return report

    report = asyncio.run(scenario())
    assert session.state.sessionId == state.sessionId
    assert report.earned == 36000
    assert session.state.bananas == 36000
    assert session.state.bananasPerSecond == 5


def test_ten_clicks_then_authoritative_sync(authority, clock, identity):
    session = make_session(authority, clock, identity)

    async def scenario():
        await session.start()
        authority.missed_clicks = 1
        for _ in range(10):
            assert session.click()
            clock.advance(100)
        optimistic = session.state.bananas
        await session.scheduler.drain()
        await session.close()
        return optimistic

    optimistic = asyncio.run(scenario())
    assert optimistic == 10
    assert session.state.bananas == 9
    assert session.governor.pending == 0
    assert authority.calls == ["init", "sync"]


def test_click_during_cooldown_is_dropped(authority, clock, identity):
    session = make_session(authority, clock, identity)

    async def scenario():
        await session.start()
        first = session.click()
        cooling = session.click_cooldown
        second = session.click()
        await session.close()
        return first, cooling, second

    first, cooling, second = asyncio.run(scenario())
    assert first and cooling and not second
    assert session.state.bananas == 1
    assert session.governor.pending == 1


def test_start_falls_back_when_api_is_down(clock, identity):
    session = GameSession(ClientConfig(api_base_url=BASE_URL), client=failing_client(),
                          identity=identity, clock=clock, run_timers=False)

    async def scenario():
        await session.start()
        accepted = session.click()
        await session.close()
        return accepted

    assert asyncio.run(scenario())
    assert session.state.sessionId.startswith("session-")
    assert set(session.engine.upgrades) == {"click_1", "auto_1", "click_2", "auto_2"}
    assert session.state.bananas == 1
    assert identity.resolve() is None
    assert session.engine.skins == {}


def test_switch_session_discards_local_state(authority, clock, identity):
    other = authority.create_session(bananas=77, totalBananasEarned=77)
    session = make_session(authority, clock, identity)

    async def scenario():
        await session.start()
        first_id = session.state.sessionId
        session.click()
        await session.switch_session(other.sessionId)
        await session.close()
        return first_id

    first_id = asyncio.run(scenario())
    assert first_id != other.sessionId
    assert session.state.sessionId == other.sessionId
    assert session.state.bananas == 77
    assert session.governor.pending == 0
    assert identity.resolve() == other.sessionId


def test_new_session(authority, clock, identity):
    session = make_session(authority, clock, identity)

    async def scenario():
        await session.start()
        first_id = session.state.sessionId
        await session.new_session()
        await session.close()
        return first_id

    first_id = asyncio.run(scenario())
    assert session.state.sessionId != first_id
    assert identity.resolve() == session.state.sessionId


def test_timers_run_until_close(authority, clock, identity):
    state = authority.create_session()
    authority.upgrades[state.sessionId]["auto_1"].owned = 2
    identity.remember(state.sessionId)
    config = ClientConfig(api_base_url=BASE_URL, tick_interval_seconds=0.01)

    async def scenario():
        async with make_session(authority, clock, identity, config=config, run_timers=True) as session:
            await asyncio.sleep(0.06)
        after_close = session.state.bananas
        await asyncio.sleep(0.03)
        return session, after_close

    session, after_close = asyncio.run(scenario())
    assert after_close > 0
    assert session.state.bananas == after_close
    assert session.scheduler.closed


def test_derived_values(authority, clock, identity):
    session = make_session(authority, clock, identity)

    async def scenario():
        await session.start()
        await session.close()

    asyncio.run(scenario())
    click_1 = session.engine.upgrades["click_1"]
    assert session.upgrade_cost(click_1) == 10
    assert not session.can_afford(click_1)
    assert not session.can_prestige()
    assert session.prestige_dna_reward() == 0
    clock.advance_seconds(12)
    assert session.seconds_since_sync() == 12


def test_status_report(authority, clock, identity):
    session = make_session(authority, clock, identity)

    async def scenario():
        await session.start()
        for _ in range(3):
            session.click()
            clock.advance(100)
        await session.submit_score("Kong")
        await session.close()

    asyncio.run(scenario())
    report = status_report(session)
    assert session.state.sessionId in report
    assert "Bananas: 3" in report
    assert "1. Kong: 3" in report


def test_periodic_sync_runs_until_close(authority, clock, identity):
    config = ClientConfig(api_base_url=BASE_URL, sync_interval_seconds=0.02,
                          sync_staleness_floor_seconds=0)

    async def scenario():
        async with make_session(authority, clock, identity, config=config, run_timers=True):
            await asyncio.sleep(0.11)
        synced = authority.calls.count("sync")
        await asyncio.sleep(0.06)
        return synced

    synced = asyncio.run(scenario())
    assert synced >= 2
    assert authority.calls.count("sync") == synced


def test_second_start_is_ignored(authority, clock, identity):
    state = authority.create_session()
    authority.upgrades[state.sessionId]["auto_1"].owned = 1
    identity.remember(state.sessionId)
    session = make_session(authority, clock, identity, run_timers=True)

    async def scenario():
        first = await session.start()
        second = await session.start()
        session.ticker.tick()
        await session.close()
        return first, second

    first, second = asyncio.run(scenario())
    assert first is second
    assert authority.calls.count("init") == 1
    assert session.state.bananas == 1


def test_intents_after_close_report_network_error(authority, clock, identity):
    session = make_session(authority, clock, identity)

    async def scenario():
        await session.start()
        await session.close()
        return await session.submit_score("Kong"), await session.sync_now()

    result, outcome = asyncio.run(scenario())
    assert not result.success
    assert result.message == "Network error"
    assert outcome is SyncOutcome.FAILED
    assert authority.calls == ["init"]
