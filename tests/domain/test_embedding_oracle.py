"""Tests for the primary-face rule of the embedding oracle."""
import pytest

from facefinder.core.exceptions import NoFaceDetectedError
from facefinder.domain.entities.face import BoundingBox, Face
from facefinder.domain.interfaces.recognition.embedding_oracle import select_primary_face
from tests.factories import FakeOracle, make_descriptor, make_face


def test_largest_face_wins():
    small = make_face(make_descriptor(offset=0.1), width=0.1, height=0.1)
    large = make_face(make_descriptor(offset=0.2), width=0.4, height=0.3)
    assert select_primary_face([small, large]) is large


def test_area_tie_goes_to_first_detection():
    first = make_face(make_descriptor(offset=0.1), width=0.2, height=0.2)
    second = make_face(make_descriptor(offset=0.2), width=0.2, height=0.2)
    assert select_primary_face([first, second]) is first


def test_faces_without_embedding_are_ignored():
    no_embedding = Face(confidence=0.9, bounding_box=BoundingBox(left=0, top=0, width=0.9, height=0.9))
    with_embedding = make_face(make_descriptor(), width=0.1, height=0.1)
    assert select_primary_face([no_embedding, with_embedding]) is with_embedding
    assert select_primary_face([no_embedding]) is None
    assert select_primary_face([]) is None


async def test_extract_descriptor_returns_primary_face():
    expected = make_descriptor(offset=0.4)
    oracle = FakeOracle({
        b"group": [
            make_face(make_descriptor(offset=0.1), width=0.1, height=0.1),
            make_face(expected, width=0.3, height=0.3),
        ]
    })
    assert await oracle.extract_descriptor(b"group") == expected


async def test_extract_descriptor_without_face_raises():
    oracle = FakeOracle({b"landscape": []})
    with pytest.raises(NoFaceDetectedError):
        await oracle.extract_descriptor(b"landscape")
