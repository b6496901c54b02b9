"""
Local game state engine.

Holds the one live GameState of a session plus the collections the API
sends alongside it. Clicks, ticks and credits are applied optimistically;
every successful round trip overwrites the record wholesale.
"""

import logging
from typing import Dict, List, Optional, Iterable

from .models import (
    GameState,
    UpgradeType,
    UpgradeTier,
    Achievement,
    ActiveEvent,
    LeaderboardEntry,
    Skin,
)

logger = logging.getLogger(__name__)


class GameEngine:
    def __init__(self, state: Optional[GameState] = None):
        self._state = state or GameState(sessionId="")
        self.upgrades: Dict[str, UpgradeType] = {}
        self.achievements: List[Achievement] = []
        self.new_achievements: List[Achievement] = []
        self.active_events: List[ActiveEvent] = []
        self.leaderboard: List[LeaderboardEntry] = []
        self.skins: Dict[str, Skin] = {}
        self.player_name: str = ""

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def session_id(self) -> str:
        return self._state.sessionId

    # Optimistic mutations

    def apply_click(self) -> float:
        """Add one click worth of bananas. Never rejected here."""
        state = self._state
        gained = state.bananasPerClick
        state.bananas += gained
        state.totalClicks += 1
        state.totalBananasEarned += gained
        return gained

    def apply_tick(self, seconds: float = 1.0) -> float:
        """Add `seconds` worth of passive production"""
        state = self._state
        if state.bananasPerSecond <= 0 or seconds <= 0:
            return 0
        gained = state.bananasPerSecond * seconds
        state.bananas += gained
        state.totalBananasEarned += gained
        return gained

    def credit(self, amount: float) -> float:
        """Add bananas earned outside a click or tick (offline, golden banana)"""
        if amount <= 0:
            return 0
        self._state.bananas += amount
        self._state.totalBananasEarned += amount
        return amount

    # Authoritative overwrites

    def replace_with_authoritative(self, state: GameState) -> None:
        """Swap in the server's record. Server fields always win."""
        if state.sessionId != self._state.sessionId and self._state.sessionId:
            logger.info(f"🔁 Session changed: {self._state.sessionId} -> {state.sessionId}")
        self._state = state.model_copy(deep=True)

    def merge_upgrades(self, upgrades: Iterable[UpgradeType]) -> None:
        self.upgrades = {upgrade.id: upgrade for upgrade in upgrades}

    def apply_achievements(self, achievements: List[Achievement]) -> List[Achievement]:
        """Store the latest achievement list and queue the newly unlocked ones"""
        already_unlocked = {a.id for a in self.achievements if a.unlocked}
        newly_unlocked = [
            a for a in achievements
            if a.unlocked and a.id not in already_unlocked
        ]
        if newly_unlocked:
            self.new_achievements = newly_unlocked
            for ach in newly_unlocked:
                logger.info(f"🏆 Achievement unlocked: {ach.name}")
        self.achievements = list(achievements)
        return newly_unlocked

    def dismiss_achievement(self, achievement_id: str) -> None:
        self.new_achievements = [
            a for a in self.new_achievements if a.id != achievement_id
        ]

    def set_events(self, events: List[ActiveEvent]) -> None:
        self.active_events = list(events)

    def drop_event(self, event_id: str) -> None:
        self.active_events = [e for e in self.active_events if e.id != event_id]

    def set_leaderboard(self, entries: List[LeaderboardEntry]) -> None:
        self.leaderboard = list(entries)

    def reset_collections(self) -> None:
        """Forget everything tied to the previous session"""
        self.upgrades = {}
        self.achievements = []
        self.new_achievements = []
        self.active_events = []
        self.leaderboard = []
        self.player_name = ""

    # Read-only views

    def current_events(self, now_ms: float) -> List[ActiveEvent]:
        return [e for e in self.active_events if e.is_live(now_ms)]

    def upgrades_by_tier(self, tier: UpgradeTier) -> List[UpgradeType]:
        return [u for u in self.upgrades.values() if u.type is tier]

    @property
    def unlocked_achievements(self) -> List[Achievement]:
        return [a for a in self.achievements if a.unlocked]

    @property
    def locked_achievements(self) -> List[Achievement]:
        return [a for a in self.achievements if not a.unlocked]
