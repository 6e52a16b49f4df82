"""Device identity store: the single persisted "owner" descriptor."""
import threading
from typing import Any, Optional, Sequence, Union

import numpy as np

from facefinder.core.config import settings
from facefinder.core.exceptions import InvalidDescriptorError
from facefinder.core.logging import get_logger
from facefinder.domain.entities.descriptor import Descriptor, require_length
from facefinder.domain.interfaces.storage.identity_backend import IdentityBackend

logger = get_logger(__name__)


class IdentityStore:
    """Holds at most one descriptor for this device's owner.

    The presence of a descriptor is what tells a returning user from a new
    one. All operations are serialised with a lock; concurrent ``enroll``
    calls resolve last-writer-wins.

    Example:
        ```python
        with IdentityStore(JsonFileIdentityBackend(".facefinder/identity.json")) as store:
            store.enroll(descriptor)
            assert store.has_identity()
            store.forget()
        ```
    """

    def __init__(
        self,
        backend: IdentityBackend,
        key: Optional[str] = None,
        descriptor_length: Optional[int] = None,
    ) -> None:
        """Initialize the identity store.

        Args:
            backend: Persistence backend holding the descriptor
            key: Well-known name the descriptor is stored under
            descriptor_length: Expected descriptor length
        """
        self._backend = backend
        self._key = key or settings.IDENTITY_KEY
        self._descriptor_length = descriptor_length or settings.DESCRIPTOR_LENGTH
        self._lock = threading.Lock()
        self._opened = False

    def open(self) -> "IdentityStore":
        """Open the backend and discard a persisted value that is no longer valid."""
        with self._lock:
            self._ensure_open()
        return self

    def close(self) -> None:
        with self._lock:
            if not self._opened:
                return
            self._backend.close()
            self._opened = False
        logger.debug("Identity store closed", key=self._key)

    def __enter__(self) -> "IdentityStore":
        return self.open()

    def __exit__(self, exc_type: Optional[type], exc_val: Optional[Exception], exc_tb: Optional[Any]) -> None:
        self.close()

    def enroll(self, descriptor: Union[Descriptor, Sequence[float], np.ndarray]) -> Descriptor:
        """Store descriptor as the device identity, replacing any previous one.

        Returns:
            The stored descriptor

        Raises:
            InvalidDescriptorError: If the input is malformed or has the wrong
                length. The previous identity is left untouched.
        """
        validated = require_length(Descriptor.from_values(descriptor), self._descriptor_length)
        with self._lock:
            self._ensure_open()
            replaced = self._backend.read(self._key) is not None
            self._backend.write(self._key, validated.to_list())
        logger.info("Enrolled device identity", key=self._key, replaced=replaced)
        return validated

    def current(self) -> Optional[Descriptor]:
        """Return the enrolled descriptor, or None when no identity is stored."""
        with self._lock:
            self._ensure_open()
            stored = self._backend.read(self._key)
        if stored is None:
            return None
        return Descriptor.from_values(stored)

    def has_identity(self) -> bool:
        return self.current() is not None

    def forget(self) -> None:
        """Clear the stored descriptor. Idempotent."""
        with self._lock:
            self._ensure_open()
            had_identity = self._backend.read(self._key) is not None
            self._backend.delete(self._key)
        logger.info("Forgot device identity", key=self._key, had_identity=had_identity)

    def _ensure_open(self) -> None:
        # Callers hold the lock.
        if self._opened:
            return
        self._backend.open()
        self._opened = True
        stored = self._backend.read(self._key)
        if stored is not None:
            try:
                require_length(Descriptor.from_values(stored), self._descriptor_length)
            except InvalidDescriptorError as e:
                logger.warning("Discarding invalid stored identity", key=self._key, error=str(e))
                self._backend.delete(self._key)
        logger.debug("Identity store opened", key=self._key)
