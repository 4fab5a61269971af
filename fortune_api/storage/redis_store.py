"""
============================================================================
Redis Secondary Store
============================================================================

Mirrors fortunes into a single Redis hash (HGET / HSET / HKEYS), so they
survive restarts of the service.

USAGE:
------
Selected when FORTUNE_STORAGE_BACKEND=redis. If the startup probe fails the
service runs memory-only for the rest of the process lifetime.

See: fortune_api/storage/factory.py for the startup probe
"""

import logging
import time
from typing import List, Optional

import redis

from fortune_api.exceptions import SecondaryStoreError
from fortune_api.metrics import fortune_secondary_operations_total
from fortune_api.storage.base import SecondaryStore

logger = logging.getLogger(__name__)


class RedisSecondaryStore(SecondaryStore):
    """Redis-backed mirror of the fortune collection."""

    def __init__(
        self, redis_url: str, hash_key: str = "fortunes", socket_timeout: float = 5
    ):
        """Initialize Redis client with connection pooling.

        No network traffic happens here; call ping() to probe the server.

        Args:
            redis_url: Redis connection URL (e.g., redis://redis:6379/0)
            hash_key: Name of the hash holding fortune messages keyed by id
            socket_timeout: Connect/read timeout in seconds for every call
        """
        pool = redis.ConnectionPool.from_url(
            redis_url,
            max_connections=20,
            decode_responses=True,
            socket_connect_timeout=socket_timeout,
            socket_timeout=socket_timeout,
        )
        self._client = redis.Redis(connection_pool=pool)
        self.hash_key = hash_key

    def _record(self, operation: str, status: str, start_time: float) -> None:
        fortune_secondary_operations_total.labels(
            operation=operation, status=status
        ).inc()
        logger.debug(
            f"Redis {operation} {status} in {(time.time() - start_time) * 1000:.1f}ms"
        )

    def ping(self) -> bool:
        """Check Redis connection health.

        Returns:
            True if Redis is responsive, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.RedisError as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    def get(self, key: str) -> Optional[str]:
        start_time = time.time()
        try:
            value = self._client.hget(self.hash_key, key)
        except (redis.RedisError, UnicodeError) as e:
            self._record("get", "error", start_time)
            raise SecondaryStoreError(f"HGET {self.hash_key} {key} failed: {e}") from e

        self._record("get", "success" if value is not None else "miss", start_time)
        return value

    def set(self, key: str, value: str) -> None:
        start_time = time.time()
        try:
            self._client.hset(self.hash_key, key, value)
        except (redis.RedisError, UnicodeError) as e:
            self._record("set", "error", start_time)
            raise SecondaryStoreError(f"HSET {self.hash_key} {key} failed: {e}") from e

        self._record("set", "success", start_time)

    def keys(self) -> List[str]:
        start_time = time.time()
        try:
            keys = self._client.hkeys(self.hash_key)
        except (redis.RedisError, UnicodeError) as e:
            self._record("keys", "error", start_time)
            raise SecondaryStoreError(f"HKEYS {self.hash_key} failed: {e}") from e

        self._record("keys", "success", start_time)
        return list(keys)

    def close(self) -> None:
        self._client.connection_pool.disconnect()
        logger.info("Closed Redis connection pool")
