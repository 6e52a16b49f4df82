"""Embedding oracle interface."""
from abc import ABC, abstractmethod
from typing import List, Optional

from ...entities.descriptor import Descriptor
from ...entities.face import Face
from facefinder.core.exceptions import NoFaceDetectedError


def select_primary_face(faces: List[Face]) -> Optional[Face]:
    """Pick the single face a photograph contributes.

    Among detections that carry an embedding, the largest bounding box wins.
    Exact area ties go to the earliest detection, so the rule is
    deterministic for a given detector output.
    """
    primary: Optional[Face] = None
    for face in faces:
        if face.embedding is None:
            continue
        if primary is None or face.bounding_box.area > primary.bounding_box.area:
            primary = face
    return primary


class EmbeddingOracle(ABC):
    """Interface for turning an image into face descriptors."""

    @abstractmethod
    async def detect_faces(self, image_bytes: bytes) -> List[Face]:
        """
        Detect faces and extract their embeddings.

        Args:
            image_bytes: Raw image data

        Returns:
            Detected faces in detector order; empty when no face is found.

        Raises:
            InvalidImageError: If the image cannot be decoded
        """
        pass

    async def extract_descriptor(self, image_bytes: bytes) -> Descriptor:
        """
        Extract the primary face descriptor of an image.

        Multiple detections collapse to one descriptor via select_primary_face.

        Raises:
            NoFaceDetectedError: If no face with an embedding is found
            InvalidImageError: If the image cannot be decoded
        """
        faces = await self.detect_faces(image_bytes)
        primary = select_primary_face(faces)
        if primary is None:
            raise NoFaceDetectedError("No face detected in image", details={"faces_found": len(faces)})
        return Descriptor.from_values(primary.embedding)
