"""
InsightFace-based embedding oracle.

Detects faces with the InsightFace model pack configured in settings and
returns them as domain Face objects with normalized bounding boxes.

Example:
    ```python
    oracle = InsightFaceRecognitionService()
    with open("capture.jpg", "rb") as f:
        descriptor = await oracle.extract_descriptor(f.read())
    ```

Note:
    The descriptor length depends on the model pack (512 for buffalo_l).
    Set DESCRIPTOR_LENGTH to match the pack used to build the gallery.
"""
from typing import Any, List, Optional, TypeVar

import cv2
import numpy as np
from insightface.app import FaceAnalysis
from insightface.app.common import Face as InsightFace

from facefinder.core.config import settings
from facefinder.core.exceptions import InvalidImageError
from facefinder.core.logging import get_logger
from facefinder.core.utils.image import bytes_to_numpy_array, fit_to_pixel_budget
from facefinder.domain.entities.face import BoundingBox, Face
from facefinder.domain.interfaces.recognition.embedding_oracle import EmbeddingOracle

logger = get_logger(__name__)

T = TypeVar('T', bound='InsightFaceRecognitionService')


class InsightFaceRecognitionService(EmbeddingOracle):
    """Embedding oracle backed by an InsightFace model pack (CPU inference)."""

    def __init__(self, model_name: Optional[str] = None) -> None:
        """Load the model pack and prepare it for detection."""
        self.model = FaceAnalysis(
            name=model_name or settings.MODEL_NAME,
            root=settings.MODEL_CACHE_DIR,
            providers=['CPUExecutionProvider']
        )
        # Detection size affects accuracy significantly
        self.model.prepare(ctx_id=0, det_size=(640, 640))

    async def __aenter__(self: T) -> T:
        logger.debug("Entering InsightFace service context")
        return self

    async def __aexit__(self, exc_type: Optional[type], exc_val: Optional[Exception],
                        exc_tb: Optional[Any]) -> None:
        logger.debug("Cleaning up InsightFace service resources")
        self.model = None

    def _load_image(self, image_bytes: bytes) -> np.ndarray:
        """Decode image bytes, downscaling images above MAX_IMAGE_PIXELS."""
        try:
            img = bytes_to_numpy_array(image_bytes)
        except ValueError as e:
            logger.error("Image loading failed", error=str(e))
            raise InvalidImageError(f"Invalid image format: {e}")

        height, width = img.shape[:2]
        new_width, new_height = fit_to_pixel_budget(width, height, settings.MAX_IMAGE_PIXELS)
        if (new_width, new_height) != (width, height):
            logger.info(
                "Resizing large image",
                original_size=(width, height),
                new_size=(new_width, new_height)
            )
            img = cv2.resize(img, (new_width, new_height), interpolation=cv2.INTER_AREA)
        return img

    @staticmethod
    def _convert_to_face(face_data: InsightFace, height: int, width: int) -> Face:
        """Convert an InsightFace detection to a domain Face with 0-1 coordinates."""
        bbox = face_data.bbox.astype(int)
        bounding_box = BoundingBox(
            top=float(bbox[1] / height),
            left=float(bbox[0] / width),
            width=float((bbox[2] - bbox[0]) / width),
            height=float((bbox[3] - bbox[1]) / height)
        )
        return Face(
            bounding_box=bounding_box,
            confidence=float(face_data.det_score),
            embedding=face_data.embedding,
        )

    async def detect_faces(self, image_bytes: bytes) -> List[Face]:
        img = self._load_image(image_bytes)
        height, width = img.shape[:2]
        faces = self.model.get(img)
        logger.debug("Face detection results", faces_found=len(faces))
        return [self._convert_to_face(face, height, width) for face in faces]
