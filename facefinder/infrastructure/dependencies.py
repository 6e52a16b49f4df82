"""FastAPI dependency providers."""
from typing import AsyncGenerator

from fastapi import Depends

from facefinder.core.container import ServiceContainer, container
from facefinder.core.exceptions import ServiceNotInitializedError
from facefinder.infrastructure.photos.local import LocalPhotoStorage
from facefinder.services.record_store import RecordStoreService


async def get_container() -> ServiceContainer:
    """Dependency provider for the global ServiceContainer instance."""
    if not container.initialized:
        try:
            await container.initialize()
        except Exception as e:
            raise ServiceNotInitializedError(f"Service container could not be initialized: {e}")
    return container


async def get_record_store_service(
    container: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[RecordStoreService, None]:
    """Provide the record store service.

    Raises:
        ServiceNotInitializedError: If the service is not initialized
    """
    if container.record_store_service is None:
        raise ServiceNotInitializedError("RecordStoreService not found in initialized container")
    yield container.record_store_service


async def get_photo_storage(
    container: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[LocalPhotoStorage, None]:
    """Provide the photo storage.

    Raises:
        ServiceNotInitializedError: If the storage is not initialized
    """
    if container.photo_storage is None:
        raise ServiceNotInitializedError("Photo storage not initialized")
    yield container.photo_storage
