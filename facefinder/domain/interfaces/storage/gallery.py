"""Gallery repository interface."""
from abc import ABC, abstractmethod
from typing import List

from ...entities.photo import PhotoRecord


class GalleryRepository(ABC):
    """Append-only collection of photo records."""

    @abstractmethod
    async def append(self, record: PhotoRecord) -> None:
        """
        Append a record at the end of the gallery.

        Raises:
            GalleryError: If the record cannot be stored
        """
        pass

    @abstractmethod
    async def snapshot(self) -> List[PhotoRecord]:
        """
        Return the records in insertion order.

        The returned list is a copy: appends made afterwards are not visible in it.

        Raises:
            GalleryError: If the gallery cannot be read
        """
        pass
