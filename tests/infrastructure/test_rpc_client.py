"""Tests for the record store HTTP client."""
import json

import pytest
import requests

from facefinder.core.exceptions import RecordStoreError, TransportFailureError
from facefinder.infrastructure.rpc.client import RecordStoreClient
from tests.factories import make_descriptor, make_photo


class FakeResponse:
    def __init__(self, status_code=200, body=None, raw=None):
        self.status_code = status_code
        if raw is not None:
            self.content = raw
        else:
            self.content = json.dumps(body).encode() if body is not None else b""

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        return json.loads(self.content)


class FakeSession:
    """Answers POSTs from a queue of responses or exceptions."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.requests = []

    def post(self, url, json=None, timeout=None):
        self.requests.append(json)
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer

    def close(self):
        pass


def make_client(*answers, max_retries=2):
    session = FakeSession(*answers)
    client = RecordStoreClient(
        url="https://records.test/api", timeout=1.0, max_retries=max_retries, backoff_seconds=0, session=session
    )
    return client, session


class TestSearch:
    """Search requests."""

    async def test_returns_references_in_order(self):
        client, session = make_client(FakeResponse(body=["https://p/2", "https://p/1"]))

        refs = await client.search(make_descriptor(offset=0.5))

        assert refs == ["https://p/2", "https://p/1"]
        sent = session.requests[0]
        assert sent["action"] == "search"
        assert sent["descriptor"][0] == 0.5
        assert len(sent["descriptor"]) == 128

    async def test_empty_list_is_no_matches(self):
        client, _ = make_client(FakeResponse(body=[]))
        assert await client.search(make_descriptor()) == []

    async def test_error_payload_raises_and_is_not_retried(self):
        client, session = make_client(FakeResponse(status_code=400, body={"error": "bad descriptor"}))

        with pytest.raises(RecordStoreError, match="bad descriptor"):
            await client.search(make_descriptor())
        assert len(session.requests) == 1

    async def test_error_payload_with_success_status_still_raises(self):
        client, _ = make_client(FakeResponse(body={"error": "Gallery unavailable"}))
        with pytest.raises(RecordStoreError):
            await client.search(make_descriptor())

    async def test_retries_transport_failures(self):
        client, session = make_client(
            requests.ConnectionError("refused"),
            FakeResponse(status_code=503, raw=b"unavailable"),
            FakeResponse(body=["https://p/1"]),
        )

        assert await client.search(make_descriptor()) == ["https://p/1"]
        assert len(session.requests) == 3

    async def test_gives_up_after_max_retries(self):
        client, session = make_client(
            requests.Timeout("slow"),
            requests.Timeout("slow"),
            max_retries=1,
        )

        with pytest.raises(TransportFailureError):
            await client.search(make_descriptor())
        assert len(session.requests) == 2

    @pytest.mark.parametrize("response", [
        FakeResponse(body={"photos": []}),
        FakeResponse(body=[1, 2]),
        FakeResponse(raw=b"<html>"),
        FakeResponse(raw=b""),
    ])
    async def test_malformed_answer_is_a_transport_failure(self, response):
        client, _ = make_client(response, response, response)
        with pytest.raises(TransportFailureError):
            await client.search(make_descriptor())


class TestUpload:
    """Upload requests."""

    async def test_sends_camel_case_payload(self):
        client, session = make_client(FakeResponse(body={"status": "ok", "photoRef": "https://p/9", "matchable": True}))

        ack = await client.upload(make_photo("beach.jpg", content=b"abc"), make_descriptor())

        assert ack.photo_ref == "https://p/9"
        sent = session.requests[0]
        assert sent["action"] == "upload"
        assert sent["photoPayload"] == "YWJj"
        assert sent["fileName"] == "beach.jpg"
        assert sent["mimeType"] == "image/jpeg"
        assert len(sent["descriptor"]) == 128

    async def test_no_face_sends_null_descriptor(self):
        client, session = make_client(FakeResponse(body={"status": "ok"}))
        await client.upload(make_photo(), None)
        assert session.requests[0]["descriptor"] is None

    async def test_any_success_body_is_accepted(self):
        client, _ = make_client(FakeResponse(raw=b""))
        ack = await client.upload(make_photo(), None)
        assert ack.status == "ok"
        assert ack.photo_ref is None

    async def test_failed_upload_is_not_retried(self):
        client, session = make_client(requests.ConnectionError("reset"), FakeResponse(body={"status": "ok"}))

        with pytest.raises(TransportFailureError):
            await client.upload(make_photo(), make_descriptor())
        assert len(session.requests) == 1

    async def test_non_2xx_upload_raises(self):
        client, _ = make_client(FakeResponse(status_code=500, raw=b"boom"))
        with pytest.raises(TransportFailureError):
            await client.upload(make_photo(), None)
