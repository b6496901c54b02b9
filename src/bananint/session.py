"""
Banana Clicker - Client session

Wires the engine, click governor, ticker, sync protocol and offline
reconciler together for one player session, and owns their lifecycle.
"""

import logging
from typing import List, Optional

from . import economy
from .client import AuthorityClient
from .config import ClientConfig, DEFAULT_UPGRADES
from .errors import RejectedError, TransportError
from .governor import ClickGovernor
from .identity import SessionIdentity, mint_provisional_id
from .models import GameState, InitResponse, UpgradeType, ActiveEvent
from .offline import OfflineReconciler, OfflineReport
from .scheduler import Clock, PassiveTicker, SessionScheduler, now_ms
from .state import GameEngine
from .storage import JsonFileStore, ScopedStore
from .sync import ActionResult, SyncOutcome, SyncProtocol

logger = logging.getLogger(__name__)


class GameSession:
    def __init__(self,
                 config: Optional[ClientConfig] = None,
                 client: Optional[AuthorityClient] = None,
                 identity: Optional[SessionIdentity] = None,
                 clock: Clock = now_ms,
                 run_timers: bool = True):
        self.config = config or ClientConfig()
        self.client = client or AuthorityClient.from_config(self.config)
        if identity is None:
            store = JsonFileStore(self.config.resolved_storage_path)
            identity = SessionIdentity(ScopedStore(store, self.config.storage_scope))
        self.identity = identity
        self.clock = clock
        self.run_timers = run_timers

        self.engine = GameEngine()
        self.governor = ClickGovernor(self.config.click_cooldown_ms, clock)
        self.sync = SyncProtocol(self.engine, self.governor, self.client,
                                 self.config, self.identity, clock)
        self.offline = OfflineReconciler(self.engine, self.config, clock)
        self.ticker = PassiveTicker(self.engine, self.config.tick_interval_seconds)
        self.scheduler = SessionScheduler()

        self.loading = False
        self.started = False
        self.offline_report: Optional[OfflineReport] = None

    # Lifecycle

    async def start(self) -> Optional[OfflineReport]:
        """Initialize or restore the game session"""
        if self.started:
            logger.debug("Session already started")
            return self.offline_report
        self.started = True
        self.loading = True
        try:
            session_id = self.identity.resolve()
            try:
                response = await self.client.init(session_id)
            except (TransportError, RejectedError) as e:
                logger.warning(f"❌ Game initialization error: {e}")
                self._load_fallback()
            else:
                self._load(response)

            self.offline_report = self.offline.reconcile()
            await self.sync.load_skins()
        finally:
            self.loading = False

        if self.run_timers:
            self.ticker.start(self.scheduler)
            self.sync.start(self.scheduler)
        return self.offline_report

    async def close(self) -> None:
        await self.scheduler.close()
        await self.client.close()

    async def __aenter__(self) -> "GameSession":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def switch_session(self, new_id: str) -> Optional[OfflineReport]:
        """Play on another ledger row; current in-memory state is dropped"""
        self.identity.switch_to(new_id)
        return await self._reload()

    async def new_session(self) -> Optional[OfflineReport]:
        """Start over on a brand-new session id"""
        self.identity.create_fresh()
        return await self._reload()

    # Intents

    def click(self) -> bool:
        """Handle a banana click; False when dropped by the cooldown"""
        if not self.governor.try_accept():
            return False
        self.engine.apply_click()
        if self.sync.should_sync():
            self.sync.request_sync(self.scheduler)
        return True

    async def sync_now(self) -> SyncOutcome:
        return await self.sync.sync(force=True)

    async def buy_upgrade(self, upgrade_id: str) -> ActionResult:
        return await self.sync.buy_upgrade(upgrade_id)

    async def prestige(self) -> ActionResult:
        return await self.sync.prestige()

    async def buy_skin(self, skin_id: str) -> ActionResult:
        return await self.sync.buy_skin(skin_id)

    async def click_event(self, event_id: str) -> ActionResult:
        return await self.sync.click_event(event_id)

    async def submit_score(self, name: str) -> ActionResult:
        return await self.sync.submit_score(name)

    async def reset(self) -> ActionResult:
        return await self.sync.reset()

    # Derived values for the presentation layer

    @property
    def state(self) -> GameState:
        return self.engine.state

    @property
    def click_cooldown(self) -> bool:
        return self.governor.cooling

    def upgrade_cost(self, upgrade: UpgradeType) -> int:
        return economy.upgrade_cost(upgrade)

    def can_afford(self, upgrade: UpgradeType) -> bool:
        return economy.can_afford_upgrade(self.engine.state, upgrade)

    def can_prestige(self) -> bool:
        return economy.can_prestige(self.engine.state)

    def prestige_dna_reward(self) -> int:
        return economy.prestige_dna_reward(self.engine.state)

    def active_events(self) -> List[ActiveEvent]:
        return self.engine.current_events(self.clock())

    def seconds_since_sync(self) -> int:
        return int(max(0.0, self.clock() - self.sync.last_sync_at) // 1000)

    # Loading

    def _load(self, response: InitResponse) -> None:
        self.identity.remember(response.sessionId)
        self.engine.replace_with_authoritative(response.gameState)
        self.engine.merge_upgrades(response.upgrades)
        self.engine.set_leaderboard(response.leaderboard)
        self.engine.achievements = list(response.achievements)
        self.engine.set_events(response.activeEvents)
        self.engine.player_name = response.playerName or self.identity.player_name()
        self.governor.acknowledge()
        self.sync.last_sync_at = self.clock()

    def _load_fallback(self) -> None:
        """Play locally on a provisional id until the API is reachable"""
        now = self.clock()
        self.engine.replace_with_authoritative(
            GameState(sessionId=mint_provisional_id(now), lastSyncTime=now, lastEventCheck=now)
        )
        self.engine.merge_upgrades(UpgradeType(**data) for data in DEFAULT_UPGRADES)
        self.engine.player_name = self.identity.player_name()
        self.governor.acknowledge()
        self.sync.last_sync_at = now

    async def _reload(self) -> Optional[OfflineReport]:
        await self.scheduler.close()
        self.scheduler = SessionScheduler()
        self.started = False
        self.engine.reset_collections()
        self.governor.acknowledge()
        return await self.start()
