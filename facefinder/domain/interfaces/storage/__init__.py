from .gallery import GalleryRepository
from .identity_backend import IdentityBackend
from .record_store import RecordStore

__all__ = ["GalleryRepository", "IdentityBackend", "RecordStore"]
