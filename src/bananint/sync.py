"""
Banana Clicker - Sync reconciliation

Keeps the optimistic local ledger converging on the API's ledger:
clicks are batched into periodic /sync calls, purchases and other
high-stakes actions go out as single direct requests, and every
successful answer replaces local state wholesale.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from . import economy
from .client import AuthorityClient
from .config import ClientConfig
from .errors import RejectedError, TransportError
from .governor import ClickGovernor
from .identity import SessionIdentity
from .models import GameState, SyncRequest, Currency
from .scheduler import Clock, SessionScheduler, now_ms
from .state import GameEngine

logger = logging.getLogger(__name__)

NETWORK_ERROR = "Network error"


class SyncOutcome(Enum):
    SYNCED = "synced"
    SKIPPED = "skipped"      # nothing pending and synced recently
    IN_FLIGHT = "in_flight"  # another attempt is outstanding
    FAILED = "failed"


@dataclass
class ActionResult:
    """What a direct request did, for the caller to show"""
    success: bool
    message: Optional[str] = None
    value: Any = None


class SyncProtocol:
    def __init__(self,
                 engine: GameEngine,
                 governor: ClickGovernor,
                 client: AuthorityClient,
                 config: Optional[ClientConfig] = None,
                 identity: Optional[SessionIdentity] = None,
                 clock: Clock = now_ms):
        self.engine = engine
        self.governor = governor
        self.client = client
        self.config = config or ClientConfig()
        self.identity = identity
        self.clock = clock
        self.last_sync_at = clock()
        self._attempt: Optional[asyncio.Future] = None

    @property
    def in_flight(self) -> bool:
        return self._attempt is not None

    async def wait_in_flight(self) -> None:
        """Wait until the outstanding sync attempt, if any, has been answered"""
        while self._attempt is not None:
            await asyncio.shield(self._attempt)

    # Batched sync

    def should_sync(self) -> bool:
        """Enough clicks are waiting to justify a sync right away"""
        return self.governor.pending >= self.config.sync_click_threshold

    def is_stale(self) -> bool:
        floor_ms = self.config.sync_staleness_floor_seconds * 1000
        return self.clock() - self.last_sync_at >= floor_ms

    def request_sync(self, scheduler: SessionScheduler) -> Optional[asyncio.Task]:
        """Fire a sync in the background unless one is already out"""
        if self.in_flight:
            logger.debug("Sync already in flight, dropping trigger")
            return None
        if scheduler.closed:
            return None
        return scheduler.spawn(self.sync(), name="click-sync")

    def start(self, scheduler: SessionScheduler) -> asyncio.Task:
        """Sync every sync_interval_seconds for the life of the scheduler"""
        return scheduler.every(self.config.sync_interval_seconds, self.sync, name="periodic-sync")

    async def sync(self, force: bool = False) -> SyncOutcome:
        """
        Send pending clicks and adopt the API's state.

        Skipped when nothing is pending and the last sync is recent, unless
        forced. Failures leave local state and the pending count alone; the
        next trigger simply tries again.
        """
        if self.in_flight:
            logger.debug("Sync already in flight")
            return SyncOutcome.IN_FLIGHT

        if not force and self.governor.pending == 0 and not self.is_stale():
            return SyncOutcome.SKIPPED

        state = self.engine.state
        request = SyncRequest(
            sessionId=state.sessionId,
            pendingClicks=self.governor.pending,
            clientBananas=state.bananas,
            lastSyncTime=state.lastSyncTime,
        )

        attempt = asyncio.get_running_loop().create_future()
        self._attempt = attempt
        try:
            response = await self.client.sync(request)
        except TransportError as e:
            logger.warning(f"❌ Sync error: {e}")
            return SyncOutcome.FAILED
        except RejectedError as e:
            logger.info(f"❌ Sync rejected: {e.message}")
            return SyncOutcome.FAILED
        finally:
            self._attempt = None
            attempt.set_result(None)

        if not response.success:
            logger.info(f"❌ Sync refused: {response.message or 'unknown reason'}")
            return SyncOutcome.FAILED

        self._adopt(response.gameState)
        if response.achievements is not None:
            self.engine.apply_achievements(response.achievements)
        if response.activeEvents is not None:
            self.engine.set_events(response.activeEvents)
        if response.leaderboard is not None:
            self.engine.set_leaderboard(response.leaderboard)
        return SyncOutcome.SYNCED

    # Direct requests

    async def buy_upgrade(self, upgrade_id: str) -> ActionResult:
        """Purchase an upgrade (click multiplier, generator, prestige perk...)"""
        upgrade = self.engine.upgrades.get(upgrade_id)
        if upgrade is None:
            return ActionResult(False, "Upgrade not found")

        if not economy.can_afford_upgrade(self.engine.state, upgrade):
            currency = "DNA" if upgrade.type.currency is Currency.DNA else "bananas"
            return ActionResult(False, f"Not enough {currency}")

        await self._flush_pending()

        try:
            response = await self.client.upgrade(self.engine.session_id, upgrade_id)
        except TransportError as e:
            logger.warning(f"❌ Upgrade error: {e}")
            return ActionResult(False, NETWORK_ERROR)
        except RejectedError as e:
            return ActionResult(False, e.message)

        if not response.success:
            return ActionResult(False, response.message)

        self._adopt(response.gameState)
        self.engine.merge_upgrades(response.upgrades)
        if response.achievements is not None:
            self.engine.apply_achievements(response.achievements)
        if response.leaderboard is not None:
            self.engine.set_leaderboard(response.leaderboard)
        return ActionResult(True, response.message, upgrade_id)

    async def prestige(self) -> ActionResult:
        """Ascend: trade progress for Banana DNA"""
        if not economy.can_prestige(self.engine.state):
            return ActionResult(False, "Need 1 billion lifetime bananas", 0)

        await self._flush_pending()

        try:
            response = await self.client.prestige(self.engine.session_id)
        except TransportError as e:
            logger.warning(f"❌ Prestige error: {e}")
            return ActionResult(False, NETWORK_ERROR, 0)
        except RejectedError as e:
            return ActionResult(False, e.message, 0)

        if not response.success:
            return ActionResult(False, response.message, 0)

        self._adopt(response.gameState)
        self.engine.merge_upgrades(response.upgrades)
        logger.info(f"🌟 {response.message}")
        return ActionResult(True, response.message, response.bananaDNAGained)

    async def buy_skin(self, skin_id: str) -> ActionResult:
        """Buy a skin, or equip it when already owned"""
        state = self.engine.state
        skin = self.engine.skins.get(skin_id)
        owned = skin_id in state.ownedSkins
        if skin is not None and not owned and not economy.can_afford(state, skin.cost):
            return ActionResult(False, "Not enough bananas")

        if not owned:
            await self._flush_pending()

        try:
            response = await self.client.buy_skin(self.engine.session_id, skin_id)
        except TransportError as e:
            logger.warning(f"❌ Skin error: {e}")
            return ActionResult(False, "Failed to buy skin")
        except RejectedError as e:
            return ActionResult(False, e.message)

        if response.success and response.gameState is not None:
            self._adopt(response.gameState)
        return ActionResult(response.success, response.message, skin_id)

    async def click_event(self, event_id: str) -> ActionResult:
        """Claim a clickable event (golden banana)"""
        try:
            response = await self.client.click_event(self.engine.session_id, event_id)
        except TransportError as e:
            logger.warning(f"❌ Event error: {e}")
            return ActionResult(False, NETWORK_ERROR, 0)
        except RejectedError as e:
            return ActionResult(False, e.message, 0)

        if not response.success:
            return ActionResult(False, response.message, 0)

        self.engine.drop_event(event_id)
        self.engine.credit(response.reward)
        return ActionResult(True, response.message, response.reward)

    async def submit_score(self, name: str) -> ActionResult:
        """Submit to the leaderboard, syncing first so the score is current"""
        trimmed_name = (name or "").strip()
        if not trimmed_name:
            return ActionResult(False, "Name cannot be empty")

        await self.wait_in_flight()
        await self.sync(force=True)

        try:
            response = await self.client.submit_score(self.engine.session_id, trimmed_name)
        except TransportError as e:
            logger.warning(f"❌ Score submission error: {e}")
            return ActionResult(False, NETWORK_ERROR)
        except RejectedError as e:
            return ActionResult(False, e.message)

        if response.success:
            self.engine.player_name = trimmed_name
            self.engine.set_leaderboard(response.leaderboard)
            if self.identity is not None:
                self.identity.remember_player_name(trimmed_name)

        return ActionResult(response.success, response.message, trimmed_name)

    async def reset(self) -> ActionResult:
        """Wipe this session's progress on the API and adopt the fresh state"""
        try:
            response = await self.client.reset(self.engine.session_id)
        except TransportError as e:
            logger.warning(f"❌ Reset error: {e}")
            return ActionResult(False, NETWORK_ERROR)
        except RejectedError as e:
            return ActionResult(False, e.message)

        if not response.success:
            return ActionResult(False, "Reset refused")

        self._adopt(response.gameState)
        self.engine.merge_upgrades(response.upgrades)
        return ActionResult(True)

    async def load_skins(self) -> None:
        try:
            self.engine.skins = await self.client.skins()
        except (TransportError, RejectedError) as e:
            logger.warning(f"❌ Failed to load skins: {e}")

    # Helpers

    async def _flush_pending(self) -> None:
        """Get unsent clicks to the API before a state-replacing request"""
        await self.wait_in_flight()
        if self.governor.pending > 0:
            await self.sync()

    def _adopt(self, state: GameState) -> None:
        self.engine.replace_with_authoritative(state)
        self.governor.acknowledge()
        self.last_sync_at = max(self.last_sync_at, self.clock())
