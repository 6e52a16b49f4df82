"""Service-specific models.

This module contains models used by services that are independent of the API layer.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class IndexStatus(str, Enum):
    """Terminal state of one indexing attempt."""
    MATCHABLE = "matchable"
    NON_MATCHABLE = "non_matchable"
    FAILED = "failed"


class IndexOutcome(BaseModel):
    """Result of indexing a single photograph."""
    file_name: str = Field(..., description="File name of the photograph")
    status: IndexStatus = Field(..., description="Whether and how the photo was admitted")
    photo_ref: Optional[str] = Field(None, description="Reference reported by the record store")
    error: Optional[str] = Field(None, description="Failure or no-face reason")

    @property
    def admitted(self) -> bool:
        return self.status is not IndexStatus.FAILED


class BatchIndexReport(BaseModel):
    """Per-item results of a batch, in submission order."""
    outcomes: List[IndexOutcome] = Field(default_factory=list)

    def _count(self, status: IndexStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is status)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def matchable(self) -> int:
        return self._count(IndexStatus.MATCHABLE)

    @property
    def non_matchable(self) -> int:
        return self._count(IndexStatus.NON_MATCHABLE)

    @property
    def failed(self) -> int:
        return self._count(IndexStatus.FAILED)

    @property
    def failures(self) -> List[IndexOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status is IndexStatus.FAILED]
