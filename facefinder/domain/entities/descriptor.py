"""Face descriptor entity and the distance primitive used for matching."""
from typing import Any, List, Sequence, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer, field_validator

from facefinder.core.exceptions import DimensionMismatchError, InvalidDescriptorError


class Descriptor(BaseModel):
    """Fixed-length embedding representing one face.

    Descriptors are immutable: the underlying array is flagged read-only.
    Two descriptors are only comparable when they come from the same
    embedding process and have the same length.
    """
    values: np.ndarray = Field(..., description="Embedding vector (1-D, finite floats)")

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    @field_validator("values", mode="plain")
    @classmethod
    def validate_values(cls, v: Any) -> np.ndarray:
        """Convert sequences to a read-only float64 vector and reject malformed input."""
        try:
            array = np.array(v, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Descriptor values must be numeric: {e}")
        if array.ndim != 1:
            raise ValueError(f"Descriptor must be one-dimensional, got shape {array.shape}")
        if array.size == 0:
            raise ValueError("Descriptor must not be empty")
        if not np.all(np.isfinite(array)):
            raise ValueError("Descriptor values must be finite")
        array.setflags(write=False)
        return array

    @field_serializer("values")
    def serialize_values(self, values: np.ndarray) -> List[float]:
        return values.tolist()

    @classmethod
    def from_values(cls, values: Union["Descriptor", Sequence[float], np.ndarray]) -> "Descriptor":
        """Build a descriptor from raw values.

        Raises:
            InvalidDescriptorError: If the values do not form a valid descriptor
        """
        if isinstance(values, Descriptor):
            return values
        try:
            return cls(values=values)
        except ValidationError as e:
            raise InvalidDescriptorError(f"Invalid descriptor: {e.errors()[0]['msg']}")

    def to_list(self) -> List[float]:
        return self.values.tolist()

    def __len__(self) -> int:
        return int(self.values.shape[0])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Descriptor):
            return NotImplemented
        return bool(np.array_equal(self.values, other.values))

    def __hash__(self) -> int:
        return hash(self.values.tobytes())

    def __repr__(self) -> str:
        return f"Descriptor(length={len(self)})"


def require_length(descriptor: Descriptor, expected_length: int) -> Descriptor:
    """Check that a descriptor has the configured fixed length.

    Raises:
        InvalidDescriptorError: If the length differs
    """
    if len(descriptor) != expected_length:
        raise InvalidDescriptorError(
            f"Descriptor must have {expected_length} elements, got {len(descriptor)}",
            details={"expected": expected_length, "actual": len(descriptor)},
        )
    return descriptor


def distance(a: Descriptor, b: Descriptor) -> float:
    """Euclidean (L2) distance between two descriptors.

    Symmetric, non-negative, and zero iff the vectors are element-wise equal.
    No normalization or weighting is applied.

    Raises:
        DimensionMismatchError: If the descriptors have different lengths
    """
    if len(a) != len(b):
        raise DimensionMismatchError(
            f"Cannot compare descriptors of length {len(a)} and {len(b)}",
            details={"left": len(a), "right": len(b)},
        )
    with np.errstate(over="ignore"):
        diff = a.values - b.values
    halved = not np.all(np.isfinite(diff))
    if halved:
        diff = a.values / 2 - b.values / 2

    # Components are scaled to at most 1 before squaring
    scale = float(np.max(np.abs(diff)))
    if scale == 0.0:
        return 0.0
    result = scale * float(np.linalg.norm(diff / scale))
    return 2 * result if halved else result
