"""JSON-lines file backed gallery repository."""
import threading
from pathlib import Path
from typing import List, Union

from pydantic import ValidationError

from facefinder.core.exceptions import GalleryError
from facefinder.core.logging import get_logger
from facefinder.domain.entities.photo import PhotoRecord
from facefinder.domain.interfaces.storage.gallery import GalleryRepository

logger = get_logger(__name__)


class JsonlGalleryRepository(GalleryRepository):
    """Gallery stored as one JSON record per line, in insertion order.

    Appends only ever add a line at the end of the file; a snapshot reads the
    whole file. Lines that cannot be parsed are skipped with a warning.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    async def append(self, record: PhotoRecord) -> None:
        line = record.model_dump_json()
        try:
            with self._lock:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with open(self.path, "a", encoding="utf-8") as f:
                    f.write(line + "\n")
        except OSError as e:
            logger.error("Failed to append gallery record", photo_id=record.photo_id, error=str(e))
            raise GalleryError(f"Failed to append gallery record: {e}")

        logger.debug("Appended gallery record", photo_id=record.photo_id, matchable=record.is_matchable)

    async def snapshot(self) -> List[PhotoRecord]:
        try:
            with self._lock:
                if not self.path.exists():
                    return []
                with open(self.path, "r", encoding="utf-8") as f:
                    lines = f.readlines()
        except OSError as e:
            logger.error("Failed to read gallery", path=str(self.path), error=str(e))
            raise GalleryError(f"Failed to read gallery: {e}")

        records: List[PhotoRecord] = []
        for line_number, line in enumerate(lines, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                records.append(PhotoRecord.model_validate_json(line))
            except ValidationError as e:
                logger.warning(
                    "Skipping unreadable gallery line",
                    path=str(self.path),
                    line_number=line_number,
                    error=str(e),
                )
        return records
