"""
Banana Clicker - headless client

Starts a session against the API, optionally clicks a few times,
syncs and prints where the economy stands.
"""

import argparse
import asyncio
import logging
from typing import List, Optional

from .config import ClientConfig
from .economy import format_number
from .session import GameSession


def status_report(session: GameSession) -> str:
    state = session.state
    report = [
        f"\n{'='*70}",
        f"BANANA CLICKER - {state.sessionId}",
        f"{'='*70}",
        f"  Bananas: {format_number(state.bananas)}",
        f"  Bananas/Click: {format_number(state.bananasPerClick)}",
        f"  Bananas/Second: {format_number(state.bananasPerSecond)}",
        f"  Total Clicks: {state.totalClicks:,}",
        f"  Lifetime Bananas: {format_number(state.totalBananasEarned)}",
        f"  Banana DNA: {state.bananaDNA} (prestiges: {state.prestigeCount})",
    ]

    offline = session.offline_report
    if offline and offline.earned > 0:
        report.append(f"  Earned while away: {format_number(offline.earned)}")

    if session.engine.leaderboard:
        report.append("")
        report.append("LEADERBOARD:")
        for rank, entry in enumerate(session.engine.leaderboard[:5], start=1):
            report.append(f"  {rank}. {entry.name}: {format_number(entry.score)}")

    report.append(f"{'='*70}\n")
    return "\n".join(report)


async def run(args: argparse.Namespace) -> None:
    config = ClientConfig.from_env(api_base_url=args.url, storage_path=args.storage)
    session = GameSession(config, run_timers=False)
    if args.new:
        session.identity.create_fresh()
    elif args.session:
        session.identity.switch_to(args.session)

    try:
        await session.start()
        for _ in range(args.clicks):
            session.click()
            await asyncio.sleep(config.click_cooldown_ms / 1000)
        await session.scheduler.drain()
        await session.sync_now()
        print(status_report(session))
    finally:
        await session.close()


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="bananint", description="Banana Clicker headless client")
    parser.add_argument("--url", help="API base URL (default: BANANINT_API_URL or bananint.fr)")
    parser.add_argument("--storage", help="Path of the local storage file")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--session", help="Switch to this session id")
    group.add_argument("--new", action="store_true", help="Start a brand-new session")
    parser.add_argument("--clicks", type=int, default=0, help="Clicks to perform before syncing")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    asyncio.run(run(args))


if __name__ == "__main__":
    main()
