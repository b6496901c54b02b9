"""Tests for local storage and session identity."""

import json
import re

import pytest

from bananint.identity import SessionIdentity, mint_provisional_id
from bananint.storage import JsonFileStore, MemoryStore, ScopedStore


def test_json_file_store_persists(tmp_path):
    path = tmp_path / "nested" / "storage.json"
    store = JsonFileStore(str(path))
    store.set("banana-session-id", "session-1")
    assert json.loads(path.read_text()) == {"banana-session-id": "session-1"}

    reopened = JsonFileStore(str(path))
    assert reopened.get("banana-session-id") == "session-1"
    reopened.delete("banana-session-id")
    assert JsonFileStore(str(path)).get("banana-session-id") is None


def test_json_file_store_survives_corrupt_file(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{not json")
    store = JsonFileStore(str(path))
    assert store.get("anything") is None
    store.set("k", "v")
    assert json.loads(path.read_text()) == {"k": "v"}


def test_scoped_store_namespaces_keys():
    backend = MemoryStore()
    a = ScopedStore(backend, "a")
    b = ScopedStore(backend, "b")
    a.set("key", "1")
    b.set("key", "2")
    assert a.get("key") == "1"
    assert backend.data == {"a:key": "1", "b:key": "2"}


def test_resolve_remember_and_create_fresh(identity):
    assert identity.resolve() is None
    identity.remember("session-42")
    assert identity.resolve() == "session-42"
    identity.create_fresh()
    assert identity.resolve() is None


def test_switch_to(identity):
    assert identity.switch_to("  session-7 ") == "session-7"
    assert identity.resolve() == "session-7"
    with pytest.raises(ValueError):
        identity.switch_to("   ")
    assert identity.resolve() == "session-7"


def test_player_name(identity):
    assert identity.player_name() == ""
    identity.remember_player_name("Kong")
    assert identity.player_name() == "Kong"


def test_identity_on_file_store(tmp_path):
    path = str(tmp_path / "storage.json")
    SessionIdentity(ScopedStore(JsonFileStore(path), "bananint")).remember("session-9")
    assert SessionIdentity(ScopedStore(JsonFileStore(path), "bananint")).resolve() == "session-9"


def test_mint_provisional_id():
    session_id = mint_provisional_id(1_700_000_000_123)
    assert re.fullmatch(r"session-1700000000123-[0-9a-z]{9}", session_id)
    assert mint_provisional_id(1) != mint_provisional_id(1)
