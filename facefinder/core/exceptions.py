"""Custom exceptions for the event photo finder."""
from typing import Optional


class FaceFinderError(Exception):
    """Base exception for all photo finder operations."""

    def __init__(self, message: str, details: Optional[dict] = None):
        """
        Initialize photo finder error.

        Args:
            message: Error description
            details: Additional error context
        """
        super().__init__(message)
        self.details = details or {}


class DimensionMismatchError(FaceFinderError):
    """Raised when two descriptors of different lengths are compared."""
    pass


class InvalidDescriptorError(FaceFinderError):
    """Raised when a descriptor is malformed or has the wrong length."""
    pass


class InvalidImageError(FaceFinderError):
    """Raised when the provided image is invalid or cannot be processed."""
    pass


class NoFaceDetectedError(FaceFinderError):
    """Raised when no face is detected in the image."""
    pass


class IdentityNotEnrolledError(FaceFinderError):
    """Raised when a search needs the device identity but none is enrolled."""
    pass


class TransportFailureError(FaceFinderError):
    """Raised when the record store exchange fails.

    Callers must treat this as "search/index unavailable", never as zero matches.
    """
    pass


class RecordStoreError(TransportFailureError):
    """Raised when the record store answers with an explicit error payload."""
    pass


class GalleryError(FaceFinderError):
    """Raised when the gallery cannot be read or appended to."""
    pass


class PhotoNotFoundError(FaceFinderError):
    """Raised when a stored photograph does not exist."""
    pass


class ServiceNotInitializedError(FaceFinderError):
    """Raised when a service is requested before the container is initialized."""
    pass
