"""In-memory gallery repository."""
import threading
from typing import List

from facefinder.domain.entities.photo import PhotoRecord
from facefinder.domain.interfaces.storage.gallery import GalleryRepository


class InMemoryGalleryRepository(GalleryRepository):
    """Append-only list of records guarded by a lock."""

    def __init__(self) -> None:
        self._records: List[PhotoRecord] = []
        self._lock = threading.Lock()

    async def append(self, record: PhotoRecord) -> None:
        with self._lock:
            self._records.append(record)

    async def snapshot(self) -> List[PhotoRecord]:
        with self._lock:
            return list(self._records)
