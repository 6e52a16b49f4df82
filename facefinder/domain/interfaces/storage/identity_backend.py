"""Persistence backend interface for the device identity."""
from abc import ABC, abstractmethod
from typing import List, Optional


class IdentityBackend(ABC):
    """Key-value persistence for the device owner's descriptor.

    Backends store raw float lists under a well-known key and survive
    process restarts where the medium allows it.
    """

    def open(self) -> None:
        """Acquire any resources the backend needs. Default: nothing to do."""

    def close(self) -> None:
        """Release backend resources. Default: nothing to do."""

    @abstractmethod
    def read(self, key: str) -> Optional[List[float]]:
        """Return the values stored under key, or None when absent."""
        pass

    @abstractmethod
    def write(self, key: str, values: List[float]) -> None:
        """Store values under key, replacing any previous value."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key. Removing an absent key is a no-op."""
        pass
