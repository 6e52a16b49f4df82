"""Photo indexing service: admits new photographs to the gallery."""
import asyncio
from typing import Callable, Iterable, List, Optional, Sequence, Union

import numpy as np

from facefinder.core.config import settings
from facefinder.core.exceptions import (
    FaceFinderError,
    InvalidDescriptorError,
    NoFaceDetectedError,
    TransportFailureError,
)
from facefinder.core.logging import get_logger
from facefinder.domain.entities.descriptor import Descriptor, require_length
from facefinder.domain.entities.photo import PhotoUpload
from facefinder.domain.interfaces.recognition.embedding_oracle import EmbeddingOracle
from facefinder.domain.interfaces.storage.record_store import RecordStore
from facefinder.services.models import BatchIndexReport, IndexOutcome, IndexStatus

logger = get_logger(__name__)

DescriptorInput = Optional[Union[Descriptor, Sequence[float], np.ndarray]]


class PhotoIndexingService:
    """Service for indexing photographs into the gallery.

    A photo with a descriptor becomes matchable; a photo without one is still
    stored but never appears in a match result. Indexing is terminal: there
    is no removal through this service.

    Batches run as a bounded set of concurrent tasks. Each photo is processed
    independently, so one failure never stops the rest of the batch.

    Example:
        ```python
        service = PhotoIndexingService(record_store=RecordStoreClient(), oracle=InsightFaceRecognitionService())
        report = await service.index_batch(photos)
        print(report.matchable, report.non_matchable, report.failed)
        ```
    """

    def __init__(
        self,
        record_store: RecordStore,
        oracle: Optional[EmbeddingOracle] = None,
        descriptor_length: Optional[int] = None,
        max_concurrency: Optional[int] = None,
    ) -> None:
        """Initialize the photo indexing service.

        Args:
            record_store: Record store the photographs are delegated to
            oracle: Embedding oracle used by index_batch when no descriptor is supplied
            descriptor_length: Expected descriptor length
            max_concurrency: Maximum number of photos processed at once
        """
        self._record_store = record_store
        self._oracle = oracle
        self._descriptor_length = descriptor_length or settings.DESCRIPTOR_LENGTH
        self._max_concurrency = max(1, max_concurrency or settings.INDEXING_CONCURRENCY)

    async def index(self, photo: PhotoUpload, descriptor: DescriptorInput = None) -> IndexOutcome:
        """Admit one photograph to the gallery.

        Args:
            photo: Photograph to store
            descriptor: Primary face descriptor, None when no face was found

        Returns:
            IndexOutcome with status MATCHABLE or NON_MATCHABLE

        Raises:
            InvalidDescriptorError: If the descriptor is malformed; nothing is uploaded
            TransportFailureError: If the record store could not be reached
        """
        validated: Optional[Descriptor] = None
        if descriptor is not None:
            validated = require_length(Descriptor.from_values(descriptor), self._descriptor_length)

        ack = await self._record_store.upload(photo, validated)
        status = IndexStatus.MATCHABLE if validated is not None else IndexStatus.NON_MATCHABLE

        logger.info(
            "Indexed photo",
            file_name=photo.file_name,
            status=status.value,
            photo_ref=ack.photo_ref,
        )
        return IndexOutcome(file_name=photo.file_name, status=status, photo_ref=ack.photo_ref)

    async def index_batch(
        self,
        photos: Iterable[PhotoUpload],
        descriptors: Optional[Sequence[DescriptorInput]] = None,
        on_complete: Optional[Callable[[IndexOutcome], None]] = None,
    ) -> BatchIndexReport:
        """Index many photographs with bounded concurrency.

        Descriptors are taken from ``descriptors`` (aligned with ``photos``,
        None meaning "no face") when given, otherwise extracted with the oracle.

        Args:
            photos: Photographs to index
            descriptors: Optional pre-extracted descriptors, one per photo
            on_complete: Callback invoked as each photo finishes, e.g. for progress

        Returns:
            BatchIndexReport with one outcome per photo, in submission order

        Raises:
            ValueError: If descriptors and photos differ in length, or neither
                descriptors nor an oracle are available
        """
        photo_list: List[PhotoUpload] = list(photos)
        if descriptors is not None and len(descriptors) != len(photo_list):
            raise ValueError(
                f"Got {len(descriptors)} descriptors for {len(photo_list)} photos"
            )
        if descriptors is None and self._oracle is None:
            raise ValueError("An embedding oracle is required when descriptors are not supplied")

        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def run(position: int, photo: PhotoUpload) -> IndexOutcome:
            async with semaphore:
                if descriptors is not None:
                    outcome = await self._index_with_descriptor(photo, descriptors[position])
                else:
                    outcome = await self._index_with_oracle(photo)
            if on_complete is not None:
                on_complete(outcome)
            return outcome

        logger.info(
            "Starting batch indexing",
            photos_count=len(photo_list),
            max_concurrency=self._max_concurrency,
        )
        outcomes = await asyncio.gather(*(run(i, photo) for i, photo in enumerate(photo_list)))
        report = BatchIndexReport(outcomes=list(outcomes))

        logger.info(
            "Batch indexing complete",
            total=report.total,
            matchable=report.matchable,
            non_matchable=report.non_matchable,
            failed=report.failed,
        )
        return report

    async def _index_with_oracle(self, photo: PhotoUpload) -> IndexOutcome:
        try:
            descriptor = await self._oracle.extract_descriptor(photo.content)
        except NoFaceDetectedError:
            logger.info("No face detected, indexing as non-matchable", file_name=photo.file_name)
            outcome = await self._index_with_descriptor(photo, None)
            if outcome.status is IndexStatus.NON_MATCHABLE:
                outcome.error = "no face detected"
            return outcome
        except FaceFinderError as e:
            logger.warning("Descriptor extraction failed", file_name=photo.file_name, error=str(e))
            return IndexOutcome(file_name=photo.file_name, status=IndexStatus.FAILED, error=str(e))
        except Exception as e:
            logger.error(
                "Unexpected error during descriptor extraction",
                file_name=photo.file_name,
                error=str(e),
                exc_info=True,
            )
            return IndexOutcome(file_name=photo.file_name, status=IndexStatus.FAILED, error=str(e))
        return await self._index_with_descriptor(photo, descriptor)

    async def _index_with_descriptor(self, photo: PhotoUpload, descriptor: DescriptorInput) -> IndexOutcome:
        try:
            return await self.index(photo, descriptor)
        except (InvalidDescriptorError, TransportFailureError) as e:
            logger.warning("Failed to index photo", file_name=photo.file_name, error=str(e))
            return IndexOutcome(file_name=photo.file_name, status=IndexStatus.FAILED, error=str(e))
        except Exception as e:
            logger.error(
                "Unexpected error while indexing photo",
                file_name=photo.file_name,
                error=str(e),
                exc_info=True,
            )
            return IndexOutcome(file_name=photo.file_name, status=IndexStatus.FAILED, error=str(e))
