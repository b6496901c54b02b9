import pytest

from bananint.config import ClientConfig
from bananint.identity import SessionIdentity
from bananint.storage import MemoryStore, ScopedStore

from fake_authority import BASE_URL, FakeAuthority, FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def authority(clock):
    return FakeAuthority(clock)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def identity(store):
    return SessionIdentity(ScopedStore(store, "bananint"))


@pytest.fixture
def config(tmp_path):
    return ClientConfig(api_base_url=BASE_URL, storage_path=str(tmp_path / "storage.json"))
