"""
Factory for fortune store creation.

ARCHITECTURE:
=============
The fortune store always keeps its records in memory. With the 'redis'
backend it additionally mirrors them to a Redis hash:

1. Probe Redis with PING, retrying a fixed number of times
2. On success, pull every stored fortune into memory. The seeds are only
   kept if Redis cannot list its keys
3. On failure, continue memory-only for the lifetime of the process
   (the connection is never retried later)
"""

import logging
import time
from typing import Callable, Optional

from fortune_api.metrics import fortune_secondary_available
from fortune_api.models import DEFAULT_FORTUNES
from fortune_api.settings import RedisSettings, Settings, settings as default_settings
from fortune_api.storage.base import SecondaryStore
from fortune_api.storage.fortune_store import FortuneStore
from fortune_api.storage.redis_store import RedisSecondaryStore

logger = logging.getLogger(__name__)


def create_secondary_store(
    redis_settings: RedisSettings, sleep: Callable[[float], None] = time.sleep
) -> Optional[SecondaryStore]:
    """Connect to Redis, retrying until the attempts run out.

    Args:
        redis_settings: Address, hash name and retry policy
        sleep: Delay function between attempts (replaced in tests)

    Returns:
        A connected RedisSecondaryStore, or None when Redis is unreachable
    """
    store = RedisSecondaryStore(
        redis_settings.url,
        hash_key=redis_settings.hash_key,
        socket_timeout=redis_settings.socket_timeout,
    )

    for attempt in range(1, redis_settings.connect_attempts + 1):
        if store.ping():
            logger.info(f"Connected to Redis at {redis_settings.addr}")
            return store

        logger.warning(
            f"Attempt {attempt}/{redis_settings.connect_attempts}: "
            f"Redis at {redis_settings.addr} not reachable"
        )
        if attempt < redis_settings.connect_attempts:
            sleep(redis_settings.retry_delay_seconds)

    store.close()
    return None


def create_fortune_store(
    config: Optional[Settings] = None,
    secondary_factory: Callable[[RedisSettings], Optional[SecondaryStore]] = create_secondary_store,
) -> FortuneStore:
    """Build the process-wide fortune store.

    Args:
        config: Settings to use (defaults to the global settings)
        secondary_factory: Connects the secondary store (replaced in tests)

    Returns:
        FortuneStore, mirrored to Redis when it was reachable at startup
    """
    config = config or default_settings
    seeds = DEFAULT_FORTUNES if config.seed_defaults else []

    secondary = None
    if config.storage_backend == "redis":
        secondary = secondary_factory(config.redis)
        if secondary is None:
            logger.warning("[FALLBACK ACTIVATED] Using in-memory fortune store only")
            logger.warning("Fortunes will not persist across server restarts")
    else:
        logger.info("In-memory store explicitly requested via backend='memory'")

    fortune_secondary_available.set(1 if secondary is not None else 0)

    store = FortuneStore(secondary=secondary, fortunes=seeds)
    if secondary is not None:
        store.load_from_secondary(replace=True)

    logger.info(f"Fortune store ready with {store.count()} fortunes")
    return store
