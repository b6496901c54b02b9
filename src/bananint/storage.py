"""
Local key/value persistence for the few things the client remembers
between runs (session id, player name).
"""

import json
import logging
import os
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class KeyValueStore:
    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """Flat JSON object on disk, rewritten on every change"""

    def __init__(self, path: str):
        self.path = path
        self.data: Dict[str, str] = {}
        self.load_data()

    def load_data(self) -> None:
        """Load stored values from disk"""
        if not os.path.exists(self.path):
            return

        try:
            with open(self.path, "r") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("storage file must hold a JSON object")
            self.data = {str(k): str(v) for k, v in data.items()}
        except (OSError, ValueError) as e:
            logger.warning(f"❌ Error loading {self.path}: {e}")
            self.data = {}

    def save_data(self) -> None:
        """Save all values to disk"""
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(self.data, f, indent=2)
        except OSError as e:
            logger.warning(f"❌ Error saving {self.path}: {e}")

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value
        self.save_data()

    def delete(self, key: str) -> None:
        if self.data.pop(key, None) is not None:
            self.save_data()


class ScopedStore(KeyValueStore):
    """Namespaces every key as `scope:key` on a shared backend"""

    def __init__(self, backend: KeyValueStore, scope: str):
        self.backend = backend
        self.scope = scope

    def _key(self, key: str) -> str:
        return f"{self.scope}:{key}"

    def get(self, key: str) -> Optional[str]:
        return self.backend.get(self._key(key))

    def set(self, key: str, value: str) -> None:
        self.backend.set(self._key(key), value)

    def delete(self, key: str) -> None:
        self.backend.delete(self._key(key))
