"""Tests for the face matching service."""
import math

import numpy as np
import pytest

from facefinder.domain.entities.descriptor import Descriptor
from facefinder.services.face_matching import FaceMatchingService
from tests.factories import make_descriptor, make_record


@pytest.fixture
def matcher():
    return FaceMatchingService(threshold=0.5)


def random_gallery(seed: int, size: int = 200):
    rng = np.random.default_rng(seed)
    records = []
    for i in range(size):
        descriptor = None if i % 7 == 0 else Descriptor(values=rng.normal(0.0, 0.05, 128))
        records.append(make_record(f"p{i}", descriptor))
    return records


def test_scenario_skips_unindexable_and_distant_records(matcher, zero_descriptor):
    gallery = [
        make_record("a", None),
        make_record("d2", make_descriptor(offset=0.3)),
        make_record("d3", make_descriptor(offset=0.9)),
    ]
    result = matcher.search(zero_descriptor, gallery, threshold=0.5)
    assert result.photo_refs == ["https://photos.test/d2"]
    assert result.matches[0].distance == pytest.approx(0.3)
    assert result.matches[0].position == 1


def test_results_are_ordered_by_ascending_distance(matcher, zero_descriptor):
    gallery = [
        make_record("far", make_descriptor(offset=0.4)),
        make_record("near", make_descriptor(offset=0.1)),
        make_record("mid", make_descriptor(offset=-0.2)),
    ]
    result = matcher.search(zero_descriptor, gallery)
    assert [m.photo_ref.rsplit("/", 1)[1] for m in result.matches] == ["near", "mid", "far"]


def test_ties_keep_gallery_order(matcher, zero_descriptor):
    same = make_descriptor(offset=0.2)
    gallery = [
        make_record("first", same),
        make_record("closer", make_descriptor(offset=0.1)),
        make_record("second", Descriptor(values=list(same.values))),
        make_record("mirror", make_descriptor(offset=-0.2)),
    ]
    result = matcher.search(zero_descriptor, gallery)
    assert [m.photo_ref.rsplit("/", 1)[1] for m in result.matches] == ["closer", "first", "second", "mirror"]


def test_identical_descriptors_match_at_zero_threshold(zero_descriptor):
    matcher = FaceMatchingService(threshold=0.0)
    gallery = [make_record("one", make_descriptor()), make_record("two", make_descriptor())]
    result = matcher.search(zero_descriptor, gallery)
    assert result.photo_refs == ["https://photos.test/one", "https://photos.test/two"]
    assert all(m.distance == 0.0 for m in result.matches)


def test_threshold_is_inclusive(matcher, zero_descriptor):
    gallery = [make_record("edge", make_descriptor(offset=0.5))]
    assert matcher.search(zero_descriptor, gallery, threshold=0.5).photo_refs == ["https://photos.test/edge"]


def test_empty_gallery_returns_empty_result(matcher, zero_descriptor):
    result = matcher.search(zero_descriptor, [])
    assert result.photo_refs == []
    assert len(result) == 0


@pytest.mark.parametrize("threshold", [0.0, 0.5, 10.0, 1e9])
def test_records_without_descriptor_never_match(matcher, zero_descriptor, threshold):
    gallery = [make_record("no-face", None), make_record("also-no-face", None)]
    assert matcher.search(zero_descriptor, gallery, threshold=threshold).photo_refs == []


def test_search_is_deterministic(matcher):
    gallery = random_gallery(seed=5)
    query = gallery[1].descriptor
    first = matcher.search(query, gallery, threshold=0.8)
    second = matcher.search(query, gallery, threshold=0.8)
    assert first.photo_refs == second.photo_refs
    assert first == second


def test_larger_threshold_returns_superset(matcher):
    gallery = random_gallery(seed=9)
    query = gallery[3].descriptor
    previous = set()
    for threshold in [0.0, 0.5, 0.7, 0.8, 0.9, 5.0]:
        current = set(matcher.search(query, gallery, threshold=threshold).photo_refs)
        assert previous <= current
        previous = current
    matchable = {r.photo_ref for r in gallery if r.descriptor is not None}
    assert previous == matchable


def test_records_with_other_lengths_are_skipped(matcher, zero_descriptor):
    gallery = [
        make_record("short", make_descriptor(length=64)),
        make_record("ok", make_descriptor(offset=0.1)),
    ]
    assert matcher.search(zero_descriptor, gallery).photo_refs == ["https://photos.test/ok"]


def test_default_threshold_is_used(zero_descriptor):
    matcher = FaceMatchingService(threshold=0.15)
    gallery = [make_record("in", make_descriptor(offset=0.1)), make_record("out", make_descriptor(offset=0.2))]
    result = matcher.search(zero_descriptor, gallery)
    assert result.threshold == 0.15
    assert result.photo_refs == ["https://photos.test/in"]


@pytest.mark.parametrize("threshold", [-0.1, math.nan])
def test_invalid_threshold_is_rejected(matcher, zero_descriptor, threshold):
    with pytest.raises(ValueError):
        matcher.search(zero_descriptor, [], threshold=threshold)
    with pytest.raises(ValueError):
        FaceMatchingService(threshold=threshold)
