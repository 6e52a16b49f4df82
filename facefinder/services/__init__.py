"""Service layer package."""
from .face_matching import FaceMatchingService
from .identity_store import IdentityStore
from .photo_finder import PhotoFinderService
from .photo_indexing import PhotoIndexingService
from .record_store import RecordStoreService

__all__ = [
    "FaceMatchingService",
    "IdentityStore",
    "PhotoFinderService",
    "PhotoIndexingService",
    "RecordStoreService",
]
