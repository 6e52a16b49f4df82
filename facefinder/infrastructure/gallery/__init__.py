from .jsonl import JsonlGalleryRepository
from .memory import InMemoryGalleryRepository

__all__ = ["InMemoryGalleryRepository", "JsonlGalleryRepository"]
