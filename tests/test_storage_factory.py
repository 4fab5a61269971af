"""
Tests for startup store creation and Redis fallback.

Verifies that the service:
- Retries the Redis probe and then degrades to memory-only
- Seeds the default fortunes only when Redis contents cannot be listed
- Skips Redis entirely for the memory backend
"""

import pytest
from unittest.mock import MagicMock, patch
from redis.exceptions import ConnectionError as RedisConnectionError

from fortune_api.exceptions import FortuneNotFound
from fortune_api.models import DEFAULT_FORTUNES
from fortune_api.settings import RedisSettings, Settings
from fortune_api.storage.factory import create_fortune_store, create_secondary_store

from tests.fakes import FakeSecondaryStore


@pytest.mark.unit
class TestCreateSecondaryStore:
    """Tests for the startup Redis probe."""

    @patch("fortune_api.storage.redis_store.redis.Redis")
    def test_returns_store_when_ping_succeeds(self, mock_redis_class):
        mock_client = MagicMock()
        mock_client.ping.return_value = True
        mock_redis_class.return_value = mock_client
        sleep = MagicMock()

        store = create_secondary_store(RedisSettings(addr="localhost:6379"), sleep=sleep)

        assert store is not None
        assert store.hash_key == "fortunes"
        sleep.assert_not_called()

    @patch("fortune_api.storage.redis_store.redis.Redis")
    def test_retries_then_gives_up(self, mock_redis_class):
        mock_client = MagicMock()
        mock_client.ping.side_effect = RedisConnectionError("Connection refused")
        mock_redis_class.return_value = mock_client
        sleep = MagicMock()

        store = create_secondary_store(
            RedisSettings(addr="redis:6379", connect_attempts=5, retry_delay_seconds=2),
            sleep=sleep,
        )

        assert store is None
        assert mock_client.ping.call_count == 5
        assert sleep.call_count == 4
        sleep.assert_called_with(2)
        mock_client.connection_pool.disconnect.assert_called_once()

    @patch("fortune_api.storage.redis_store.redis.Redis")
    def test_recovers_on_later_attempt(self, mock_redis_class):
        mock_client = MagicMock()
        mock_client.ping.side_effect = [RedisConnectionError("not yet"), True]
        mock_redis_class.return_value = mock_client

        store = create_secondary_store(
            RedisSettings(connect_attempts=3), sleep=MagicMock()
        )

        assert store is not None
        assert mock_client.ping.call_count == 2


@pytest.mark.unit
class TestCreateFortuneStore:
    """Tests for building the process-wide store."""

    def test_memory_backend_never_touches_redis(self):
        factory = MagicMock()

        store = create_fortune_store(Settings(storage_backend="memory"), factory)

        factory.assert_not_called()
        assert store.uses_secondary is False
        assert sorted(f.id for f in store.list()) == ["1", "2", "3", "4"]

    def test_seeds_can_be_disabled(self):
        store = create_fortune_store(
            Settings(storage_backend="memory", seed_defaults=False)
        )

        assert store.list() == []

    def test_unreachable_redis_falls_back_to_memory(self):
        store = create_fortune_store(
            Settings(storage_backend="redis"), secondary_factory=lambda cfg: None
        )

        assert store.uses_secondary is False
        assert store.count() == len(DEFAULT_FORTUNES)

    def test_reachable_redis_replaces_seeds(self):
        fake = FakeSecondaryStore({"4": "from redis", "10": "ten"})

        store = create_fortune_store(
            Settings(storage_backend="redis"), secondary_factory=lambda cfg: fake
        )

        assert store.secondary is fake
        assert store.count() == 2
        assert store.get("4").message == "from redis"
        assert store.get("10").message == "ten"
        with pytest.raises(FortuneNotFound):
            store.get("1")

    def test_reachable_empty_redis_starts_empty(self):
        store = create_fortune_store(
            Settings(storage_backend="redis"),
            secondary_factory=lambda cfg: FakeSecondaryStore(),
        )

        assert store.uses_secondary is True
        assert store.list() == []

    def test_seeds_kept_when_redis_cannot_list_keys(self):
        fake = FakeSecondaryStore({"10": "ten"})
        fake.failing.add("keys")

        store = create_fortune_store(
            Settings(storage_backend="redis"), secondary_factory=lambda cfg: fake
        )

        assert store.uses_secondary is True
        assert sorted(f.id for f in store.list()) == ["1", "2", "3", "4"]

    def test_factory_receives_redis_settings(self):
        config = Settings(storage_backend="redis")
        factory = MagicMock(return_value=None)

        create_fortune_store(config, factory)

        factory.assert_called_once_with(config.redis)
