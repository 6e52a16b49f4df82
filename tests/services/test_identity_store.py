"""Tests for the device identity store."""
import json
import threading

import pytest

from facefinder.core.exceptions import InvalidDescriptorError
from facefinder.infrastructure.identity.json_file import JsonFileIdentityBackend
from facefinder.infrastructure.identity.memory import InMemoryIdentityBackend
from facefinder.services.identity_store import IdentityStore
from tests.factories import DESCRIPTOR_LENGTH, make_descriptor


class TestIdentityLifecycle:
    """Enroll / current / forget semantics."""

    def test_new_store_has_no_identity(self, identity_store):
        assert identity_store.current() is None
        assert not identity_store.has_identity()

    def test_enroll_then_current_returns_descriptor(self, identity_store):
        descriptor = make_descriptor(offset=0.123456789, fill=-0.0625)
        identity_store.enroll(descriptor)
        assert identity_store.has_identity()
        assert identity_store.current() == descriptor

    def test_enroll_overwrites_previous_identity(self, identity_store):
        x = make_descriptor(fill=0.0)
        y = make_descriptor(fill=1.0)
        identity_store.enroll(x)
        identity_store.enroll(y)
        assert identity_store.current() == y
        assert identity_store.current() != x

    def test_forget_clears_identity(self, identity_store):
        identity_store.enroll(make_descriptor())
        identity_store.forget()
        assert identity_store.current() is None
        assert not identity_store.has_identity()

    def test_forget_on_empty_store_is_noop(self, identity_store):
        identity_store.forget()
        identity_store.forget()
        assert identity_store.current() is None

    def test_enroll_accepts_plain_sequences(self, identity_store):
        identity_store.enroll([0.5] * DESCRIPTOR_LENGTH)
        assert identity_store.current() == make_descriptor(fill=0.5)

    @pytest.mark.parametrize("bad_input", [[0.1] * 64, [], [float("nan")] * DESCRIPTOR_LENGTH])
    def test_invalid_enrollment_keeps_prior_identity(self, identity_store, bad_input):
        prior = make_descriptor(offset=0.3)
        identity_store.enroll(prior)
        with pytest.raises(InvalidDescriptorError):
            identity_store.enroll(bad_input)
        assert identity_store.current() == prior

    def test_concurrent_enrolls_leave_one_complete_descriptor(self, identity_store):
        candidates = [make_descriptor(fill=float(i)) for i in range(8)]
        threads = [threading.Thread(target=identity_store.enroll, args=(d,)) for d in candidates]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert identity_store.current() in candidates


class TestJsonFilePersistence:
    """Identity survives restarts through the JSON file backend."""

    def test_identity_survives_new_store_instance(self, tmp_path):
        path = tmp_path / "state" / "identity.json"
        descriptor = make_descriptor(offset=0.987654321, fill=0.015625)

        with IdentityStore(JsonFileIdentityBackend(path), descriptor_length=DESCRIPTOR_LENGTH) as store:
            store.enroll(descriptor)

        with IdentityStore(JsonFileIdentityBackend(path), descriptor_length=DESCRIPTOR_LENGTH) as store:
            assert store.current() == descriptor

    def test_descriptor_is_stored_under_well_known_key(self, tmp_path):
        path = tmp_path / "identity.json"
        with IdentityStore(JsonFileIdentityBackend(path), key="face_print", descriptor_length=DESCRIPTOR_LENGTH) as store:
            store.enroll(make_descriptor(fill=0.5))

        data = json.loads(path.read_text())
        assert list(data) == ["face_print"]
        assert data["face_print"] == [0.5] * DESCRIPTOR_LENGTH

    def test_forget_removes_persisted_identity(self, tmp_path):
        path = tmp_path / "identity.json"
        with IdentityStore(JsonFileIdentityBackend(path), descriptor_length=DESCRIPTOR_LENGTH) as store:
            store.enroll(make_descriptor())
            store.forget()

        with IdentityStore(JsonFileIdentityBackend(path), descriptor_length=DESCRIPTOR_LENGTH) as store:
            assert store.current() is None

    def test_corrupted_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "identity.json"
        path.write_text("{not json")
        with IdentityStore(JsonFileIdentityBackend(path), descriptor_length=DESCRIPTOR_LENGTH) as store:
            assert store.current() is None
            store.enroll(make_descriptor())
            assert store.has_identity()

    def test_stored_identity_with_wrong_length_is_discarded_on_open(self, tmp_path):
        path = tmp_path / "identity.json"
        path.write_text(json.dumps({"face_print": [0.1, 0.2, 0.3]}))
        with IdentityStore(JsonFileIdentityBackend(path), descriptor_length=DESCRIPTOR_LENGTH) as store:
            assert store.current() is None
        assert json.loads(path.read_text()) == {}


def test_store_can_be_used_without_explicit_open():
    store = IdentityStore(InMemoryIdentityBackend(), descriptor_length=DESCRIPTOR_LENGTH)
    store.enroll(make_descriptor())
    assert store.has_identity()
    store.close()
