"""Photo entities: uploads awaiting indexing and records held by the gallery."""
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from facefinder.domain.entities.descriptor import Descriptor


class PhotoUpload(BaseModel):
    """A photograph submitted for indexing."""
    file_name: str = Field(..., min_length=1, description="Original file name")
    mime_type: str = Field("application/octet-stream", description="MIME type of the content")
    content: bytes = Field(..., repr=False, description="Raw image bytes")


class PhotoRecord(BaseModel):
    """A stored photograph plus the descriptor extracted from it at index time.

    Records without a descriptor are kept for retrieval and audit but are
    never returned by a match query.
    """
    photo_id: str = Field(..., description="Record store identifier")
    photo_ref: str = Field(..., description="Addressable reference (URL) of the photograph")
    file_name: Optional[str] = Field(None, description="Original file name")
    mime_type: Optional[str] = Field(None, description="MIME type of the photograph")
    descriptor: Optional[Descriptor] = Field(None, description="Primary face descriptor, if any")
    indexed_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Timestamp when the photograph was admitted to the gallery",
    )

    @property
    def is_matchable(self) -> bool:
        return self.descriptor is not None
