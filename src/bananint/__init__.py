from .config import ClientConfig
from .client import AuthorityClient
from .errors import BananintError, TransportError, RejectedError
from .governor import ClickGovernor, GovernorState
from .identity import SessionIdentity
from .models import GameState, UpgradeType, UpgradeTier
from .offline import OfflineReconciler, OfflineReport
from .scheduler import PassiveTicker, SessionScheduler
from .session import GameSession
from .state import GameEngine
from .storage import JsonFileStore, MemoryStore, ScopedStore
from .sync import ActionResult, SyncOutcome, SyncProtocol

__all__ = [
    "ActionResult",
    "AuthorityClient",
    "BananintError",
    "ClickGovernor",
    "ClientConfig",
    "GameEngine",
    "GameSession",
    "GameState",
    "GovernorState",
    "JsonFileStore",
    "MemoryStore",
    "OfflineReconciler",
    "OfflineReport",
    "PassiveTicker",
    "RejectedError",
    "ScopedStore",
    "SessionIdentity",
    "SessionScheduler",
    "SyncOutcome",
    "SyncProtocol",
    "TransportError",
    "UpgradeTier",
    "UpgradeType",
]
