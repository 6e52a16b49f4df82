"""Service interfaces package."""
from .recognition import EmbeddingOracle
from .storage import GalleryRepository, IdentityBackend, RecordStore

__all__ = ["EmbeddingOracle", "GalleryRepository", "IdentityBackend", "RecordStore"]
