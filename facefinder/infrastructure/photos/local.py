"""Local filesystem storage for uploaded photographs."""
import mimetypes
import re
import uuid
from pathlib import Path
from typing import Optional, Tuple, Union

from facefinder.core.config import settings
from facefinder.core.exceptions import FaceFinderError, PhotoNotFoundError
from facefinder.core.logging import get_logger
from facefinder.domain.entities.photo import PhotoUpload

logger = get_logger(__name__)

_PHOTO_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


class LocalPhotoStorage:
    """Stores photographs under a directory, one file per photo id.

    Photo references are ``{base_url}/{photo_id}``.
    """

    def __init__(self, root_dir: Optional[Union[str, Path]] = None, base_url: Optional[str] = None) -> None:
        self.root_dir = Path(root_dir or settings.PHOTO_STORAGE_DIR)
        self.base_url = (base_url or settings.PHOTO_BASE_URL).rstrip("/")

    def save(self, photo: PhotoUpload) -> Tuple[str, str]:
        """Write a photograph to disk.

        Returns:
            Tuple of (photo_id, photo_ref)

        Raises:
            FaceFinderError: If the file cannot be written
        """
        photo_id = uuid.uuid4().hex
        extension = mimetypes.guess_extension(photo.mime_type) or Path(photo.file_name).suffix or ""
        path = self.root_dir / f"{photo_id}{extension}"
        try:
            self.root_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(photo.content)
        except OSError as e:
            logger.error("Failed to store photo", file_name=photo.file_name, error=str(e))
            raise FaceFinderError(f"Failed to store photo: {e}")

        logger.debug("Stored photo", photo_id=photo_id, file_name=photo.file_name, size=len(photo.content))
        return photo_id, self.reference_for(photo_id)

    def reference_for(self, photo_id: str) -> str:
        return f"{self.base_url}/{photo_id}"

    def locate(self, photo_id: str) -> Tuple[Path, str]:
        """Find the file holding a photograph.

        Returns:
            Tuple of (path, media type)

        Raises:
            PhotoNotFoundError: If the id is malformed or unknown
        """
        if not _PHOTO_ID_PATTERN.match(photo_id):
            raise PhotoNotFoundError(f"Photo not found: {photo_id}")
        matches = sorted(self.root_dir.glob(f"{photo_id}*"))
        if not matches:
            raise PhotoNotFoundError(f"Photo not found: {photo_id}")
        path = matches[0]
        media_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return path, media_type

    def delete(self, photo_id: str) -> None:
        """Remove a stored photograph. Unknown ids are ignored."""
        try:
            path, _ = self.locate(photo_id)
        except PhotoNotFoundError:
            return
        try:
            path.unlink()
        except OSError as e:
            logger.error("Failed to delete photo", photo_id=photo_id, error=str(e))
            raise FaceFinderError(f"Failed to delete photo: {e}")
        logger.debug("Deleted photo", photo_id=photo_id)
