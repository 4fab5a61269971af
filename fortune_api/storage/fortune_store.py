"""
In-memory fortune store, optionally mirrored to a secondary store.

The in-memory mapping is authoritative. The secondary store receives every
create on a best-effort basis and is consulted on get-by-id so that values
written by other processes are picked up. Secondary store failures are
logged here and never propagate to callers.
"""

import logging
import random
from typing import Iterable, List, Optional

from fortune_api.exceptions import FortuneNotFound, SecondaryStoreError
from fortune_api.metrics import fortune_store_operations_total, fortune_store_size
from fortune_api.models import Fortune
from fortune_api.storage.base import SecondaryStore
from fortune_api.storage.locking import LockedMapping

logger = logging.getLogger(__name__)


class FortuneStore:
    """Fortune records guarded by a reader/writer lock."""

    def __init__(
        self,
        secondary: Optional[SecondaryStore] = None,
        fortunes: Iterable[Fortune] = (),
    ):
        self._fortunes: LockedMapping[str, Fortune] = LockedMapping(
            {f.id: f for f in fortunes}
        )
        self._secondary = secondary
        self._update_size()

    @property
    def secondary(self) -> Optional[SecondaryStore]:
        return self._secondary

    @property
    def uses_secondary(self) -> bool:
        return self._secondary is not None

    def _update_size(self) -> None:
        fortune_store_size.set(self.count())

    def count(self) -> int:
        with self._fortunes.read() as fortunes:
            return len(fortunes)

    def list(self) -> List[Fortune]:
        """Snapshot of every fortune, in no particular order."""
        with self._fortunes.read() as fortunes:
            snapshot = list(fortunes.values())
        fortune_store_operations_total.labels(operation="list", outcome="hit").inc()
        return snapshot

    def get(self, fortune_id: str) -> Fortune:
        """Return the fortune stored under fortune_id.

        When a secondary store is configured its value wins and is copied
        into memory before the lookup.

        Raises:
            FortuneNotFound: No fortune with that id
        """
        if self._secondary is not None:
            self._refresh(fortune_id)

        with self._fortunes.read() as fortunes:
            fortune = fortunes.get(fortune_id)

        if fortune is None:
            fortune_store_operations_total.labels(operation="get", outcome="miss").inc()
            raise FortuneNotFound(f"fortune {fortune_id!r} not found")

        fortune_store_operations_total.labels(operation="get", outcome="hit").inc()
        return fortune

    def _refresh(self, fortune_id: str) -> None:
        try:
            message = self._secondary.get(fortune_id)
        except SecondaryStoreError as e:
            logger.warning(f"Secondary store read failed, serving from memory: {e}")
            return

        if message is None:
            return

        with self._fortunes.write() as fortunes:
            fortunes[fortune_id] = Fortune(id=fortune_id, message=message)
        self._update_size()

    def create(self, fortune: Fortune) -> Fortune:
        """Insert or overwrite fortune under its id and mirror it."""
        with self._fortunes.write() as fortunes:
            fortunes[fortune.id] = fortune
        self._update_size()
        fortune_store_operations_total.labels(operation="create", outcome="hit").inc()

        if self._secondary is not None:
            try:
                self._secondary.set(fortune.id, fortune.message)
            except SecondaryStoreError as e:
                logger.error(f"Secondary store write failed for {fortune.id!r}: {e}")

        return fortune

    def random(self) -> Fortune:
        """Pick a fortune uniformly at random.

        Raises:
            FortuneNotFound: The store is empty
        """
        with self._fortunes.read() as fortunes:
            snapshot = list(fortunes.values())

        if not snapshot:
            fortune_store_operations_total.labels(
                operation="random", outcome="miss"
            ).inc()
            raise FortuneNotFound("no fortunes to choose from")

        fortune_store_operations_total.labels(operation="random", outcome="hit").inc()
        return random.choice(snapshot)

    def load_from_secondary(self, replace: bool = False) -> int:
        """Pull every fortune held by the secondary store into memory.

        Keys are listed first and each value fetched individually; a key
        whose read fails is skipped.

        Args:
            replace: Drop the in-memory fortunes once the key listing
                succeeds, so only the secondary store's contents remain.
                If the listing fails memory is left untouched.

        Returns:
            Number of fortunes loaded
        """
        if self._secondary is None:
            return 0

        try:
            keys = self._secondary.keys()
        except SecondaryStoreError as e:
            logger.error(f"Could not list secondary store keys: {e}")
            return 0

        if replace:
            with self._fortunes.write() as fortunes:
                fortunes.clear()

        loaded = 0
        for key in keys:
            try:
                message = self._secondary.get(key)
            except SecondaryStoreError as e:
                logger.error(f"Could not load fortune {key!r}: {e}")
                continue
            if message is None:
                continue

            with self._fortunes.write() as fortunes:
                fortunes[key] = Fortune(id=key, message=message)
            logger.debug(f"Loaded fortune {key} => {message}")
            loaded += 1

        self._update_size()
        logger.info(f"Loaded {loaded} of {len(keys)} fortunes from secondary store")
        return loaded
