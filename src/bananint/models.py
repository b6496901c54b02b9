"""
Wire models shared with the Banana Clicker API.

Field names follow the API payloads (camelCase) so responses validate
straight into these models and requests dump straight out of them.
"""

from enum import Enum
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, Field


class Pricing(str, Enum):
    SCALED = "scaled"  # baseCost * 1.15^owned
    FLAT = "flat"      # baseCost, no scaling


class Currency(str, Enum):
    BANANAS = "bananas"
    DNA = "dna"


class UpgradeTier(str, Enum):
    CLICK = "click"
    AUTO = "auto"
    BOOST = "boost"
    PRESTIGE = "prestige"
    SYNERGY = "synergy"

    @property
    def pricing(self) -> Pricing:
        if self is UpgradeTier.PRESTIGE:
            return Pricing.FLAT
        return Pricing.SCALED

    @property
    def currency(self) -> Currency:
        if self is UpgradeTier.PRESTIGE:
            return Currency.DNA
        return Currency.BANANAS


class GameState(BaseModel):
    sessionId: str
    bananas: float = 0
    bananasPerClick: int = 1
    bananasPerSecond: float = 0
    totalClicks: int = 0
    lastSyncTime: float = 0
    playerName: Optional[str] = ""
    bananaDNA: int = 0  # Prestige currency
    totalBananasEarned: float = 0  # Lifetime earnings
    prestigeCount: int = 0
    selectedSkin: str = "default"
    ownedSkins: List[str] = Field(default_factory=lambda: ["default"])
    activeBoosts: List[Dict[str, Any]] = Field(default_factory=list)
    lastEventCheck: float = 0


class UpgradeType(BaseModel):
    id: str
    name: str
    baseCost: int
    multiplier: int
    type: UpgradeTier
    owned: int = 0
    description: Optional[str] = ""
    unlockRequirement: Optional[Dict[str, Any]] = None


class Achievement(BaseModel):
    id: str
    name: str
    description: str
    requirement: Dict[str, Any]  # {"type": "clicks", "value": 1000}
    reward: Dict[str, Any]  # {"type": "multiplier", "value": 0.01}
    unlocked: bool = False
    unlockedAt: Optional[str] = None


class EventKind(str, Enum):
    RAIN = "rain"
    GOLDEN = "golden"
    FESTIVAL = "festival"


class ActiveEvent(BaseModel):
    id: str
    type: EventKind
    startTime: float
    duration: float  # seconds
    multiplier: Optional[float] = 1.0
    active: bool = True

    def expires_at(self) -> float:
        return self.startTime + self.duration * 1000

    def is_live(self, now_ms: float) -> bool:
        return self.active and now_ms < self.expires_at()


class LeaderboardEntry(BaseModel):
    name: str
    score: int
    date: str
    prestigeCount: int = 0


class Skin(BaseModel):
    name: str
    cost: int
    emoji: str


# Requests

class InitRequest(BaseModel):
    sessionId: Optional[str] = None


class SyncRequest(BaseModel):
    sessionId: str
    pendingClicks: int
    clientBananas: float
    lastSyncTime: float


class UpgradeRequest(BaseModel):
    sessionId: str
    upgradeId: str


class SessionRequest(BaseModel):
    sessionId: str


class SkinRequest(BaseModel):
    sessionId: str
    skinId: str


class EventClickRequest(BaseModel):
    sessionId: str
    eventId: str


class ScoreRequest(BaseModel):
    sessionId: str
    name: str


# Responses

class InitResponse(BaseModel):
    sessionId: str
    gameState: GameState
    upgrades: List[UpgradeType]
    leaderboard: List[LeaderboardEntry] = Field(default_factory=list)
    playerName: Optional[str] = ""
    achievements: List[Achievement] = Field(default_factory=list)
    activeEvents: List[ActiveEvent] = Field(default_factory=list)


class SyncResponse(BaseModel):
    success: bool
    gameState: GameState
    leaderboard: Optional[List[LeaderboardEntry]] = None
    achievements: Optional[List[Achievement]] = None
    activeEvents: Optional[List[ActiveEvent]] = None
    message: Optional[str] = None


class UpgradeResponse(BaseModel):
    success: bool
    gameState: GameState
    upgrades: List[UpgradeType] = Field(default_factory=list)
    leaderboard: Optional[List[LeaderboardEntry]] = None
    achievements: Optional[List[Achievement]] = None
    message: Optional[str] = None


class PrestigeResponse(BaseModel):
    success: bool
    gameState: GameState
    upgrades: List[UpgradeType] = Field(default_factory=list)
    bananaDNAGained: int = 0
    message: str = ""


class SkinResponse(BaseModel):
    success: bool
    message: str = ""
    gameState: Optional[GameState] = None


class EventClickResponse(BaseModel):
    success: bool
    reward: int = 0
    message: str = ""


class ScoreResponse(BaseModel):
    success: bool
    leaderboard: List[LeaderboardEntry] = Field(default_factory=list)
    message: Optional[str] = None


class ResetResponse(BaseModel):
    success: bool
    gameState: GameState
    upgrades: List[UpgradeType] = Field(default_factory=list)
