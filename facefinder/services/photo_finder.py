"""Client-side flows: enroll from a capture, search my photos, forget me."""
from typing import List, Optional, Sequence, Union

import numpy as np

from facefinder.core.exceptions import IdentityNotEnrolledError, NoFaceDetectedError
from facefinder.core.logging import get_logger
from facefinder.domain.entities.descriptor import Descriptor
from facefinder.domain.interfaces.recognition.embedding_oracle import EmbeddingOracle
from facefinder.domain.interfaces.storage.record_store import RecordStore
from facefinder.services.identity_store import IdentityStore

logger = get_logger(__name__)


class PhotoFinderService:
    """Lets the device owner find photographs of themselves.

    A new user enrolls from a capture; a returning user searches with the
    stored descriptor and no capture at all.
    """

    def __init__(
        self,
        identity_store: IdentityStore,
        record_store: RecordStore,
        oracle: Optional[EmbeddingOracle] = None,
    ) -> None:
        self.identity_store = identity_store
        self.record_store = record_store
        self.oracle = oracle

    def is_returning_user(self) -> bool:
        return self.identity_store.has_identity()

    async def enroll_from_capture(self, image_bytes: bytes) -> List[str]:
        """Enroll the face in a fresh capture, then search with it.

        Raises:
            NoFaceDetectedError: If the capture holds no face; retry with a new capture
            TransportFailureError: If the search failed; the enrollment is kept
        """
        if self.oracle is None:
            raise RuntimeError("An embedding oracle is required to enroll from a capture")
        try:
            descriptor = await self.oracle.extract_descriptor(image_bytes)
        except NoFaceDetectedError:
            logger.warning("No face found in capture, enrollment not changed")
            raise
        return await self.enroll_descriptor(descriptor)

    async def enroll_descriptor(self, descriptor: Union[Descriptor, Sequence[float], np.ndarray]) -> List[str]:
        """Enroll an already-extracted descriptor, then search with it."""
        enrolled = self.identity_store.enroll(descriptor)
        return await self._search(enrolled)

    async def search_my_photos(self) -> List[str]:
        """Search with the enrolled descriptor.

        Raises:
            IdentityNotEnrolledError: If no identity is enrolled on this device
            TransportFailureError: If the record store could not be searched
        """
        descriptor = self.identity_store.current()
        if descriptor is None:
            raise IdentityNotEnrolledError("No identity enrolled on this device")
        return await self._search(descriptor)

    def forget_me(self) -> None:
        self.identity_store.forget()

    async def _search(self, descriptor: Descriptor) -> List[str]:
        photo_refs = await self.record_store.search(descriptor)
        logger.info("Found photos for device identity", matches_count=len(photo_refs))
        return photo_refs
