"""Client settings and economy constants"""

import os
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_API_URL = "https://bananint.fr/api/enhanced-game"
DEV_API_URL = "http://localhost/api/enhanced-game"

# Economy
GROWTH_FACTOR = 1.15
PRESTIGE_THRESHOLD = 1_000_000_000  # lifetime bananas needed to ascend
DNA_DIVISOR = 100_000_000  # 1 DNA per 100M lifetime bananas

# Local storage keys
SESSION_ID_KEY = "banana-session-id"
PLAYER_NAME_KEY = "banana-player-name"

# Starter catalog used when the API can't be reached at startup
DEFAULT_UPGRADES = [
    {
        "id": "click_1",
        "name": "Better Fingers",
        "baseCost": 10,
        "multiplier": 1,
        "type": "click",
        "owned": 0,
        "description": "🖱️ +1 banana per click"
    },
    {
        "id": "auto_1",
        "name": "Banana Tree",
        "baseCost": 50,
        "multiplier": 1,
        "type": "auto",
        "owned": 0,
        "description": "⚙️ +1 banana/sec"
    },
    {
        "id": "click_2",
        "name": "Stronger Arms",
        "baseCost": 100,
        "multiplier": 5,
        "type": "click",
        "owned": 0,
        "description": "🖱️ +5 bananas per click"
    },
    {
        "id": "auto_2",
        "name": "Banana Harvester Bot",
        "baseCost": 500,
        "multiplier": 5,
        "type": "auto",
        "owned": 0,
        "description": "⚙️ +5 bananas/sec"
    },
]


class ClientConfig(BaseModel):
    api_base_url: str = DEFAULT_API_URL
    sync_interval_seconds: float = Field(30.0, gt=0)
    sync_click_threshold: int = Field(10, gt=0)
    sync_staleness_floor_seconds: float = Field(10.0, ge=0)
    click_cooldown_ms: float = Field(100.0, ge=0)
    tick_interval_seconds: float = Field(1.0, gt=0)
    max_offline_seconds: float = Field(8 * 60 * 60, gt=0)
    offline_min_seconds: float = Field(60.0, ge=0)
    request_timeout_seconds: float = Field(10.0, gt=0)
    apply_offline_locally: bool = True
    storage_path: str = os.path.join("~", ".bananint", "storage.json")
    storage_scope: str = "bananint"

    @classmethod
    def from_env(cls, **overrides) -> "ClientConfig":
        """Build a config from BANANINT_* environment variables"""
        values = {}
        url: Optional[str] = os.environ.get("BANANINT_API_URL")
        if url:
            values["api_base_url"] = url
        storage = os.environ.get("BANANINT_STORAGE")
        if storage:
            values["storage_path"] = storage
        timeout = os.environ.get("BANANINT_TIMEOUT")
        if timeout:
            values["request_timeout_seconds"] = float(timeout)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @property
    def resolved_storage_path(self) -> str:
        return os.path.expanduser(self.storage_path)
