"""
Banana Clicker - Economy calculators

Pure helpers shared by the state engine, the sync protocol and the
presentation layer. Nothing in here touches the network or mutates state.
"""

import math

from .config import GROWTH_FACTOR, PRESTIGE_THRESHOLD, DNA_DIVISOR
from .models import GameState, UpgradeType, Achievement, Pricing, Currency

MAX_OFFLINE_SECONDS = 8 * 60 * 60
OFFLINE_MIN_SECONDS = 60


def upgrade_cost(upgrade: UpgradeType) -> int:
    """Cost increases by 15% per owned upgrade, or flat DNA cost for prestige"""
    if upgrade.type.pricing is Pricing.FLAT:
        return upgrade.baseCost
    return math.floor(upgrade.baseCost * math.pow(GROWTH_FACTOR, upgrade.owned))


def can_afford(state: GameState, cost: float, uses_dna: bool = False) -> bool:
    if uses_dna:
        return state.bananaDNA >= cost
    return state.bananas >= cost


def can_afford_upgrade(state: GameState, upgrade: UpgradeType) -> bool:
    uses_dna = upgrade.type.currency is Currency.DNA
    return can_afford(state, upgrade_cost(upgrade), uses_dna)


def format_number(num: float, billion_suffix: str = "B") -> str:
    """Compact display string: 1.5K, 2.30M, 4.00B"""
    if num >= 1_000_000_000:
        return f"{num / 1_000_000_000:.2f}{billion_suffix}"
    elif num >= 1_000_000:
        return f"{num / 1_000_000:.2f}M"
    elif num >= 1_000:
        return f"{num / 1_000:.1f}K"
    return str(math.floor(num))


def offline_earnings(elapsed_seconds: float,
                     rate_per_second: float,
                     max_window_seconds: float = MAX_OFFLINE_SECONDS,
                     min_seconds: float = OFFLINE_MIN_SECONDS) -> int:
    """
    Bananas produced while away.

    Nothing is awarded for absences of a minute or less, and the window is
    capped (8 hours by default).
    """
    if elapsed_seconds <= min_seconds or rate_per_second <= 0:
        return 0
    offline_time = min(elapsed_seconds, max_window_seconds)
    return math.floor(offline_time * rate_per_second)


def can_prestige(state: GameState) -> bool:
    return state.totalBananasEarned >= PRESTIGE_THRESHOLD


def prestige_dna_reward(state: GameState) -> int:
    return math.floor(state.totalBananasEarned / DNA_DIVISOR)


def achievement_progress(state: GameState, achievement: Achievement) -> float:
    """Percentage (0-100) towards an achievement requirement"""
    req_type = achievement.requirement.get("type")
    req_value = achievement.requirement.get("value") or 0
    if req_value <= 0:
        return 100.0 if req_type in ("clicks", "bananas", "prestige") else 0.0

    if req_type == "clicks":
        current = state.totalClicks
    elif req_type == "bananas":
        current = state.totalBananasEarned
    elif req_type == "prestige":
        current = state.prestigeCount
    else:
        return 0.0

    return min(current / req_value * 100, 100.0)
