"""Shared fixtures."""
import pytest

from facefinder.domain.entities.descriptor import Descriptor
from facefinder.infrastructure.gallery.memory import InMemoryGalleryRepository
from facefinder.infrastructure.identity.memory import InMemoryIdentityBackend
from facefinder.infrastructure.photos.local import LocalPhotoStorage
from facefinder.services.face_matching import FaceMatchingService
from facefinder.services.identity_store import IdentityStore
from facefinder.services.record_store import RecordStoreService
from tests.factories import DESCRIPTOR_LENGTH, InProcessRecordStore, make_descriptor


@pytest.fixture
def zero_descriptor() -> Descriptor:
    return make_descriptor()


@pytest.fixture
def identity_store() -> IdentityStore:
    store = IdentityStore(InMemoryIdentityBackend(), descriptor_length=DESCRIPTOR_LENGTH)
    with store:
        yield store


@pytest.fixture
def gallery() -> InMemoryGalleryRepository:
    return InMemoryGalleryRepository()


@pytest.fixture
def record_store_service(gallery, tmp_path) -> RecordStoreService:
    return RecordStoreService(
        gallery=gallery,
        photo_storage=LocalPhotoStorage(tmp_path / "photos", base_url="https://photos.test"),
        matcher=FaceMatchingService(threshold=0.5),
        descriptor_length=DESCRIPTOR_LENGTH,
    )


@pytest.fixture
def record_store(record_store_service) -> InProcessRecordStore:
    return InProcessRecordStore(record_store_service)
