"""Helpers shared by the command line tools."""
import json
import mimetypes
from pathlib import Path
from typing import Any, Dict, List, Optional

from facefinder.domain.entities.photo import PhotoUpload
from facefinder.domain.interfaces.recognition.embedding_oracle import EmbeddingOracle

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png")


def load_photo(path: Path) -> PhotoUpload:
    """Read an image file into a PhotoUpload."""
    mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return PhotoUpload(file_name=path.name, mime_type=mime_type, content=path.read_bytes())


def collect_image_paths(paths: List[str]) -> List[Path]:
    """Expand files and directories into a sorted list of image files."""
    image_paths: List[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            image_paths.extend(
                sorted(p for p in path.iterdir() if p.suffix.lower() in IMAGE_EXTENSIONS)
            )
        else:
            image_paths.append(path)
    return image_paths


def load_json(path: Optional[str]) -> Any:
    if path is None:
        return None
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_descriptor_map(path: str) -> Dict[str, Optional[List[float]]]:
    """Load a sidecar file mapping file names to descriptors (null for "no face")."""
    data = load_json(path)
    if not isinstance(data, dict):
        raise ValueError(f"Descriptor file {path} must contain a JSON object")
    return data


def build_oracle() -> EmbeddingOracle:
    """Create the InsightFace oracle; needs the optional ``oracle`` extra."""
    from facefinder.services.recognition.insight_face import InsightFaceRecognitionService

    return InsightFaceRecognitionService()
