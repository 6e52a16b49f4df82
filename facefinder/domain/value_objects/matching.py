"""Matching value objects."""
from typing import List

from pydantic import BaseModel, Field


class PhotoMatch(BaseModel):
    """A gallery record that matched a query."""
    photo_ref: str = Field(..., description="Reference of the matched photograph")
    distance: float = Field(..., ge=0.0, description="Euclidean distance to the query descriptor")
    position: int = Field(..., ge=0, description="Position of the record in the gallery snapshot")


class MatchResult(BaseModel):
    """Ordered matches for one query, closest first.

    Distances are kept for diagnostics and tests; callers normally only
    consume ``photo_refs``.
    """
    threshold: float = Field(..., description="Distance cutoff used for this search")
    matches: List[PhotoMatch] = Field(default_factory=list, description="Matches, ascending distance")

    @property
    def photo_refs(self) -> List[str]:
        return [match.photo_ref for match in self.matches]

    def __len__(self) -> int:
        return len(self.matches)
