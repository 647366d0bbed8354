import pytest

from oauth_core.config import OAuthConfig
from oauth_core.directory.memory import InMemoryDirectory
from oauth_core.gate import OAuthGate
from oauth_core.operations import OperationRegistry
from oauth_core.orchestrator import Authenticator
from oauth_core.replay.guard import ReplayGuard
from oauth_core.replay.memory import NonceCache

NOW = 1680000000
URL = "https://api.example.com/items"


@pytest.fixture
def directory():
    directory = InMemoryDirectory()
    consumer = directory.add_consumer("ck1", "cs1", title="Test client")
    directory.add_token(consumer, "tk1", "ts1", user_id=42)
    directory.grant(consumer, "items.list")
    return directory


@pytest.fixture
def consumer(directory):
    return directory._consumers["ck1"]


@pytest.fixture
def nonce_cache():
    return NonceCache(ttl_seconds=600, clock=lambda: NOW)


@pytest.fixture
def authenticator(directory, nonce_cache):
    guard = ReplayGuard(nonce_cache, window_seconds=300, clock=lambda: NOW)
    return Authenticator(directory, guard, OAuthConfig())


@pytest.fixture
def registry():
    registry = OperationRegistry()
    registry.register("items.list", "GET", "List items", path="/items")
    registry.register("items.delete", "DELETE", "Delete item", path="/items/delete")
    registry.register("status", "GET", "Service status", needs_auth=False, path="/status")
    return registry


@pytest.fixture
def gate(authenticator, registry):
    return OAuthGate(authenticator, registry)
