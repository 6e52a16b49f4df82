"""JSON file persistence for the device identity."""
import json
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Union

from facefinder.core.exceptions import FaceFinderError
from facefinder.core.logging import get_logger
from facefinder.domain.interfaces.storage.identity_backend import IdentityBackend

logger = get_logger(__name__)


class JsonFileIdentityBackend(IdentityBackend):
    """Stores descriptors in a small JSON object on disk, keyed by name.

    Writes go to a temporary file that atomically replaces the original, so
    a crash never leaves a half-written identity behind.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def open(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def read(self, key: str) -> Optional[List[float]]:
        value = self._load().get(key)
        if value is None:
            return None
        if not isinstance(value, list):
            logger.warning("Ignoring non-list identity value", key=key, path=str(self.path))
            return None
        return value

    def write(self, key: str, values: List[float]) -> None:
        data = self._load()
        data[key] = list(values)
        self._dump(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if key not in data:
            return
        del data[key]
        self._dump(data)

    def _load(self) -> Dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("Identity file is corrupted, treating as empty", path=str(self.path), error=str(e))
            return {}
        except OSError as e:
            raise FaceFinderError(f"Failed to read identity file: {e}", details={"path": str(self.path)})
        if not isinstance(data, dict):
            logger.warning("Identity file has unexpected layout, treating as empty", path=str(self.path))
            return {}
        return data

    def _dump(self, data: Dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise FaceFinderError(f"Failed to write identity file: {e}", details={"path": str(self.path)})
