"""In-memory identity backend, mostly for tests and ephemeral sessions."""
from typing import Dict, List, Optional

from facefinder.domain.interfaces.storage.identity_backend import IdentityBackend


class InMemoryIdentityBackend(IdentityBackend):
    """Keeps descriptors in a dict; nothing survives the process."""

    def __init__(self) -> None:
        self._values: Dict[str, List[float]] = {}

    def read(self, key: str) -> Optional[List[float]]:
        values = self._values.get(key)
        return list(values) if values is not None else None

    def write(self, key: str, values: List[float]) -> None:
        self._values[key] = list(values)

    def delete(self, key: str) -> None:
        self._values.pop(key, None)
