"""
Shared pytest fixtures for fortune service tests.

This file contains reusable fixtures for:
- Environment setup (memory backend, no Redis probe)
- The fake secondary store
- Fortune stores and FastAPI test clients
"""

import os
from typing import Generator

# Settings are read from the environment at import time, so set them before
# anything from fortune_api is imported.
os.environ.setdefault("FORTUNE_STORAGE_BACKEND", "memory")
os.environ.setdefault("REDIS_CONNECT_ATTEMPTS", "1")
os.environ.setdefault("REDIS_RETRY_DELAY_SECONDS", "0")

import pytest
from fastapi.testclient import TestClient

from fortune_api.main import create_app
from fortune_api.models import Fortune
from fortune_api.storage import FortuneStore

from tests.fakes import FakeSecondaryStore


# ============================================================================
# Fake Secondary Store
# ============================================================================


@pytest.fixture
def fake_secondary() -> FakeSecondaryStore:
    return FakeSecondaryStore()


# ============================================================================
# Stores
# ============================================================================


@pytest.fixture
def store() -> FortuneStore:
    """Memory-only store seeded with a single fortune."""
    return FortuneStore(fortunes=[Fortune(id="1", message="A")])


@pytest.fixture
def empty_store() -> FortuneStore:
    return FortuneStore()


@pytest.fixture
def mirrored_store(fake_secondary: FakeSecondaryStore) -> FortuneStore:
    """Store mirrored to the fake secondary store."""
    return FortuneStore(secondary=fake_secondary, fortunes=[Fortune(id="1", message="A")])


# ============================================================================
# FastAPI Test Clients
# ============================================================================


def make_client(fortune_store: FortuneStore) -> TestClient:
    app = create_app(store=fortune_store, instrument=False)
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def client(store: FortuneStore) -> Generator[TestClient, None, None]:
    """Test client serving the seeded memory-only store."""
    with make_client(store) as test_client:
        yield test_client


@pytest.fixture
def empty_client(empty_store: FortuneStore) -> Generator[TestClient, None, None]:
    with make_client(empty_store) as test_client:
        yield test_client


@pytest.fixture
def mirrored_client(mirrored_store: FortuneStore) -> Generator[TestClient, None, None]:
    with make_client(mirrored_store) as test_client:
        yield test_client
