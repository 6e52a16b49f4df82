"""Record store interface: the RPC boundary seen from the client."""
from abc import ABC, abstractmethod
from typing import List, Optional

from ...entities.descriptor import Descriptor
from ...entities.photo import PhotoUpload
from ...models.rpc import UploadAck


class RecordStore(ABC):
    """Remote collaborator owning the gallery."""

    @abstractmethod
    async def search(self, descriptor: Descriptor) -> List[str]:
        """
        Find photographs of the person described by descriptor.

        Returns:
            Ordered photo references, possibly empty

        Raises:
            TransportFailureError: If the store could not be searched
        """
        pass

    @abstractmethod
    async def upload(self, photo: PhotoUpload, descriptor: Optional[Descriptor]) -> UploadAck:
        """
        Admit a photograph to the gallery.

        Args:
            photo: Photograph to store
            descriptor: Primary face descriptor, None when no face was found

        Raises:
            TransportFailureError: If the store could not be reached
        """
        pass
