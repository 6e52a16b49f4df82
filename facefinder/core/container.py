"""Service container for dependency injection."""
from typing import Optional

from facefinder.core.config import settings
from facefinder.core.logging import get_logger
from facefinder.domain.interfaces.storage.gallery import GalleryRepository
from facefinder.infrastructure.gallery import InMemoryGalleryRepository, JsonlGalleryRepository
from facefinder.infrastructure.photos.local import LocalPhotoStorage
from facefinder.services.face_matching import FaceMatchingService
from facefinder.services.record_store import RecordStoreService

logger = get_logger(__name__)


def build_gallery(backend: Optional[str] = None) -> GalleryRepository:
    """Create the gallery repository named by backend (or GALLERY_BACKEND)."""
    backend = backend or settings.GALLERY_BACKEND
    if backend == "memory":
        return InMemoryGalleryRepository()
    if backend == "jsonl":
        return JsonlGalleryRepository(settings.GALLERY_PATH)
    raise ValueError(f"Unknown gallery backend: {backend}")


class ServiceContainer:
    """Container for the record store services.

    Example:
        ```python
        container = ServiceContainer()
        await container.initialize()
        service = container.record_store_service
        ```
    """

    def __init__(self) -> None:
        """Initialize empty container."""
        self.gallery: Optional[GalleryRepository] = None
        self.photo_storage: Optional[LocalPhotoStorage] = None
        self.face_matching_service: Optional[FaceMatchingService] = None
        self.record_store_service: Optional[RecordStoreService] = None

    @property
    def initialized(self) -> bool:
        return self.record_store_service is not None

    async def initialize(self) -> None:
        """Initialize all services in the correct order."""
        self.gallery = build_gallery()
        self.photo_storage = LocalPhotoStorage()
        self.face_matching_service = FaceMatchingService()
        self.record_store_service = RecordStoreService(
            gallery=self.gallery,
            photo_storage=self.photo_storage,
            matcher=self.face_matching_service,
        )
        logger.info(
            "Service container initialized",
            gallery_backend=settings.GALLERY_BACKEND,
            threshold=self.face_matching_service.threshold,
        )

    async def cleanup(self) -> None:
        """Cleanup all services in reverse order of initialization."""
        self.record_store_service = None
        self.face_matching_service = None
        self.photo_storage = None
        self.gallery = None


# Global container instance
container = ServiceContainer()
