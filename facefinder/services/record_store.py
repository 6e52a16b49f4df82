"""Record store service: serves search and upload requests against the gallery."""
import base64
import binascii
from typing import Optional, Sequence

from facefinder.core.config import settings
from facefinder.core.exceptions import InvalidImageError
from facefinder.core.logging import get_logger
from facefinder.domain.entities.descriptor import Descriptor, require_length
from facefinder.domain.entities.photo import PhotoRecord, PhotoUpload
from facefinder.domain.interfaces.storage.gallery import GalleryRepository
from facefinder.domain.models.rpc import UploadRequest
from facefinder.domain.value_objects.matching import MatchResult
from facefinder.infrastructure.photos.local import LocalPhotoStorage
from facefinder.services.face_matching import FaceMatchingService

logger = get_logger(__name__)


class RecordStoreService:
    """Service backing the record store endpoint.

    Each search takes a fresh snapshot of the gallery; nothing is cached
    between searches, so uploads that land after the snapshot are only seen
    by the next search.

    Example:
        ```python
        service = RecordStoreService(
            gallery=JsonlGalleryRepository("gallery.jsonl"),
            photo_storage=LocalPhotoStorage("photos"),
            matcher=FaceMatchingService(threshold=0.6),
        )
        result = await service.search(descriptor_values)
        ```
    """

    def __init__(
        self,
        gallery: GalleryRepository,
        photo_storage: LocalPhotoStorage,
        matcher: FaceMatchingService,
        descriptor_length: Optional[int] = None,
    ) -> None:
        """Initialize the record store service.

        Args:
            gallery: Append-only gallery repository
            photo_storage: Storage for the photograph bytes
            matcher: Match engine used for searches
            descriptor_length: Expected descriptor length
        """
        self.gallery = gallery
        self.photo_storage = photo_storage
        self.matcher = matcher
        self._descriptor_length = descriptor_length or settings.DESCRIPTOR_LENGTH

    async def search(self, descriptor: Sequence[float]) -> MatchResult:
        """Match descriptor against a snapshot of the gallery.

        Raises:
            InvalidDescriptorError: If the descriptor is malformed or has the wrong length
            GalleryError: If the gallery cannot be read
        """
        query = require_length(Descriptor.from_values(descriptor), self._descriptor_length)
        gallery = await self.gallery.snapshot()
        return self.matcher.search(query, gallery)

    async def upload(self, request: UploadRequest) -> PhotoRecord:
        """Store an uploaded photograph and append its record to the gallery.

        Raises:
            InvalidImageError: If the payload is not valid base64
            InvalidDescriptorError: If the descriptor is malformed or has the wrong length
            GalleryError: If the record cannot be appended
        """
        descriptor: Optional[Descriptor] = None
        if request.descriptor is not None:
            descriptor = require_length(Descriptor.from_values(request.descriptor), self._descriptor_length)

        try:
            content = base64.b64decode(request.photo_payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidImageError(f"Photo payload is not valid base64: {e}")

        photo = PhotoUpload(file_name=request.file_name, mime_type=request.mime_type, content=content)
        photo_id, photo_ref = self.photo_storage.save(photo)
        record = PhotoRecord(
            photo_id=photo_id,
            photo_ref=photo_ref,
            file_name=photo.file_name,
            mime_type=photo.mime_type,
            descriptor=descriptor,
        )
        try:
            await self.gallery.append(record)
        except Exception:
            logger.warning("Gallery append failed, removing stored photo", photo_id=photo_id)
            self.photo_storage.delete(photo_id)
            raise

        logger.info(
            "Admitted photo to gallery",
            photo_id=photo_id,
            file_name=photo.file_name,
            matchable=record.is_matchable,
        )
        return record
