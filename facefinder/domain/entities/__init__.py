"""Domain entities package."""
from .descriptor import Descriptor, distance, require_length
from .face import BoundingBox, Face
from .photo import PhotoRecord, PhotoUpload

__all__ = [
    "BoundingBox",
    "Descriptor",
    "Face",
    "PhotoRecord",
    "PhotoUpload",
    "distance",
    "require_length",
]
