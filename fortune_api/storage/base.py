"""
Abstract base class for the secondary (mirror) store.
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class SecondaryStore(ABC):
    """Key-value capability the fortune store mirrors into.

    Implementations raise SecondaryStoreError on any backend failure so the
    fortune store can absorb it in one place.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the message stored under key, or None if absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, overwriting any previous value."""
        pass

    @abstractmethod
    def keys(self) -> List[str]:
        """List every key in the collection."""
        pass

    def ping(self) -> bool:
        """Check connectivity. Backends without a connection are always up."""
        return True

    def close(self) -> None:
        """Release connections held by the backend."""
        pass
