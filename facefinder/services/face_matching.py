"""Face matching service: linear-scan search of a gallery snapshot."""
import math
from typing import List, Optional, Sequence

from facefinder.core.config import settings
from facefinder.core.exceptions import DimensionMismatchError
from facefinder.core.logging import get_logger
from facefinder.domain.entities.descriptor import Descriptor, distance
from facefinder.domain.entities.photo import PhotoRecord
from facefinder.domain.value_objects.matching import MatchResult, PhotoMatch

logger = get_logger(__name__)


class FaceMatchingService:
    """Service for matching a query descriptor against a gallery.

    The search is an exhaustive scan, which is fine for galleries of hundreds
    to low thousands of records. The threshold is a fixed Euclidean cutoff:
    a record matches when its distance to the query is at most the threshold.

    Example:
        ```python
        matcher = FaceMatchingService(threshold=0.6)
        result = matcher.search(query, gallery)
        result.photo_refs  # closest first
        ```
    """

    def __init__(self, threshold: Optional[float] = None) -> None:
        """Initialize the face matching service.

        Args:
            threshold: Default distance cutoff, falls back to settings.MATCH_THRESHOLD
        """
        self.threshold = self._validate_threshold(
            settings.MATCH_THRESHOLD if threshold is None else threshold
        )

    @staticmethod
    def _validate_threshold(threshold: float) -> float:
        if math.isnan(threshold) or threshold < 0:
            raise ValueError(f"Threshold must be a non-negative number, got {threshold}")
        return float(threshold)

    def search(
        self,
        query: Descriptor,
        gallery: Sequence[PhotoRecord],
        threshold: Optional[float] = None,
    ) -> MatchResult:
        """Find the gallery records within threshold of query.

        This method:
        1. Skips records without a descriptor
        2. Computes the distance from the query to every remaining record
        3. Keeps records with distance <= threshold
        4. Orders them by ascending distance, ties by gallery order

        A record whose descriptor length differs from the query is skipped;
        the mismatch does not fail the search.

        Args:
            query: Query descriptor
            gallery: Snapshot of the gallery, in insertion order
            threshold: Distance cutoff for this search (defaults to self.threshold)

        Returns:
            MatchResult with matches ordered closest first
        """
        cutoff = self.threshold if threshold is None else self._validate_threshold(threshold)

        retained: List[PhotoMatch] = []
        skipped_mismatch = 0
        for position, record in enumerate(gallery):
            if record.descriptor is None:
                continue
            try:
                record_distance = distance(query, record.descriptor)
            except DimensionMismatchError as e:
                skipped_mismatch += 1
                logger.warning(
                    "Skipping gallery record with incompatible descriptor",
                    photo_id=record.photo_id,
                    error=str(e),
                )
                continue
            if record_distance <= cutoff:
                retained.append(PhotoMatch(
                    photo_ref=record.photo_ref,
                    distance=record_distance,
                    position=position,
                ))

        # sorted() is stable, so equal distances keep gallery order
        ordered = sorted(retained, key=lambda match: match.distance)

        logger.info(
            "Searched gallery",
            gallery_size=len(gallery),
            matches_count=len(ordered),
            skipped_mismatch=skipped_mismatch,
            threshold=cutoff,
        )
        return MatchResult(threshold=cutoff, matches=ordered)
