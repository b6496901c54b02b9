"""Which remote ledger row this client plays on"""

import logging
import secrets
import string
from typing import Optional

from .config import SESSION_ID_KEY, PLAYER_NAME_KEY
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def mint_provisional_id(now_ms: float) -> str:
    """Local-only id used when the API could not hand one out"""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"session-{int(now_ms)}-{suffix}"


class SessionIdentity:
    def __init__(self, store: KeyValueStore):
        self.store = store

    def resolve(self) -> Optional[str]:
        """Stored session id, or None so that init mints a new one"""
        return self.store.get(SESSION_ID_KEY) or None

    def remember(self, session_id: str) -> None:
        if session_id:
            self.store.set(SESSION_ID_KEY, session_id)

    def switch_to(self, new_id: str) -> str:
        """Make new_id current; the caller reloads state under it"""
        new_id = (new_id or "").strip()
        if not new_id:
            raise ValueError("Session id cannot be empty")
        logger.info(f"🔁 Switching to session {new_id}")
        self.store.set(SESSION_ID_KEY, new_id)
        return new_id

    def create_fresh(self) -> None:
        """Forget the stored id so the next init starts a brand-new session"""
        self.store.delete(SESSION_ID_KEY)

    def player_name(self) -> str:
        return self.store.get(PLAYER_NAME_KEY) or ""

    def remember_player_name(self, name: str) -> None:
        self.store.set(PLAYER_NAME_KEY, name)
