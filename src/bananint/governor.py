"""Client-side click throttle and pending-click bookkeeping"""

import logging
from enum import Enum
from typing import Optional

from .scheduler import Clock, now_ms

logger = logging.getLogger(__name__)

CLICK_COOLDOWN_MS = 100  # 100ms between clicks (10 clicks/sec max)


class GovernorState(Enum):
    READY = "ready"
    COOLING = "cooling"


class ClickGovernor:
    """
    Ready -> Cooling -> Ready.

    An accepted click starts a cooldown; clicks during the cooldown are
    dropped without complaint. Cooling ends once the clock has moved past
    the cooldown, so there is no timer to cancel at teardown.
    """

    def __init__(self, cooldown_ms: float = CLICK_COOLDOWN_MS, clock: Clock = now_ms):
        self.cooldown_ms = cooldown_ms
        self.clock = clock
        self.pending = 0
        self._accepted_at: Optional[float] = None

    @property
    def state(self) -> GovernorState:
        if self._accepted_at is None:
            return GovernorState.READY
        if self.clock() - self._accepted_at < self.cooldown_ms:
            return GovernorState.COOLING
        return GovernorState.READY

    @property
    def cooling(self) -> bool:
        return self.state is GovernorState.COOLING

    def try_accept(self) -> bool:
        """Accept a click if ready, counting it as pending"""
        if self.cooling:
            return False
        self._accepted_at = self.clock()
        self.pending += 1
        return True

    def acknowledge(self) -> None:
        """A reconciliation went through: nothing is pending any more"""
        self.pending = 0
