"""Tests for the InsightFace embedding oracle.

The model pack is replaced by a fake so no weights are downloaded.
"""
from types import SimpleNamespace

import numpy as np
import pytest

cv2 = pytest.importorskip("cv2")
pytest.importorskip("insightface")

from facefinder.core.exceptions import InvalidImageError, NoFaceDetectedError  # noqa: E402
from facefinder.services.recognition import insight_face  # noqa: E402


class FakeFaceAnalysis:
    detections = []

    def __init__(self, name=None, root=None, providers=None):
        self.name = name

    def prepare(self, ctx_id=0, det_size=(640, 640)):
        pass

    def get(self, img):
        return list(self.detections)


def detection(x1, y1, x2, y2, fill):
    return SimpleNamespace(
        bbox=np.array([x1, y1, x2, y2], dtype=np.float32),
        det_score=np.float32(0.98),
        embedding=np.full(512, fill, dtype=np.float32),
    )


def encode_image(width=200, height=100):
    ok, buffer = cv2.imencode(".jpg", np.zeros((height, width, 3), dtype=np.uint8))
    assert ok
    return buffer.tobytes()


@pytest.fixture
def oracle(monkeypatch):
    monkeypatch.setattr(insight_face, "FaceAnalysis", FakeFaceAnalysis)
    FakeFaceAnalysis.detections = []
    return insight_face.InsightFaceRecognitionService(model_name="buffalo_l")


async def test_bounding_boxes_are_normalized(oracle):
    FakeFaceAnalysis.detections = [detection(20, 10, 60, 50, 0.1)]

    faces = await oracle.detect_faces(encode_image(200, 100))

    assert len(faces) == 1
    box = faces[0].bounding_box
    assert box.left == pytest.approx(0.1)
    assert box.top == pytest.approx(0.1)
    assert box.width == pytest.approx(0.2)
    assert box.height == pytest.approx(0.4)
    assert faces[0].confidence == pytest.approx(0.98)


async def test_descriptor_comes_from_largest_face(oracle):
    FakeFaceAnalysis.detections = [
        detection(0, 0, 20, 20, 0.1),
        detection(100, 0, 180, 80, 0.2),
    ]

    descriptor = await oracle.extract_descriptor(encode_image())

    assert len(descriptor) == 512
    assert descriptor.values[0] == pytest.approx(0.2)


async def test_no_detections_raise(oracle):
    with pytest.raises(NoFaceDetectedError):
        await oracle.extract_descriptor(encode_image())


async def test_undecodable_bytes_raise(oracle):
    with pytest.raises(InvalidImageError):
        await oracle.detect_faces(b"not an image")


async def test_large_images_are_downscaled(oracle, monkeypatch):
    monkeypatch.setattr(insight_face.settings, "MAX_IMAGE_PIXELS", 5000)
    img = oracle._load_image(encode_image(200, 100))
    height, width = img.shape[:2]
    assert width * height <= 5000
    assert width / height == pytest.approx(2, rel=0.05)
