"""Welcome-back earnings for the time no client was running"""

import logging
from dataclasses import dataclass
from typing import Optional

from .config import ClientConfig
from .economy import offline_earnings, format_number
from .scheduler import Clock, now_ms
from .state import GameEngine

logger = logging.getLogger(__name__)


@dataclass
class OfflineReport:
    elapsed_seconds: float
    capped_seconds: float
    earned: int
    applied: bool = False


class OfflineReconciler:
    """
    Runs once after the initial load.

    The API stays the one authoritative source: it accrues the absence
    itself on the next /sync and that answer replaces local state. What is
    computed here is a provisional credit so the player sees the gain at
    once; it never touches lastSyncTime.
    """

    def __init__(self, engine: GameEngine, config: Optional[ClientConfig] = None, clock: Clock = now_ms):
        self.engine = engine
        self.config = config or ClientConfig()
        self.clock = clock

    def reconcile(self) -> OfflineReport:
        state = self.engine.state
        elapsed = max(0.0, (self.clock() - state.lastSyncTime) / 1000)
        capped = min(elapsed, self.config.max_offline_seconds)

        earned = offline_earnings(
            elapsed,
            state.bananasPerSecond,
            self.config.max_offline_seconds,
            self.config.offline_min_seconds,
        )
        report = OfflineReport(elapsed_seconds=elapsed, capped_seconds=capped, earned=earned)
        if earned <= 0:
            return report

        if self.config.apply_offline_locally:
            self.engine.credit(earned)
            report.applied = True
        logger.info(f"🍌 Welcome back! You earned {format_number(earned)} bananas while away!")
        return report
