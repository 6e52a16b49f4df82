"""HTTP client for the record store RPC boundary."""
import asyncio
import base64
from typing import Any, Dict, List, Optional

import requests

from facefinder.core.config import settings
from facefinder.core.exceptions import RecordStoreError, TransportFailureError
from facefinder.core.logging import get_logger
from facefinder.domain.entities.descriptor import Descriptor
from facefinder.domain.entities.photo import PhotoUpload
from facefinder.domain.interfaces.storage.record_store import RecordStore
from facefinder.domain.models.rpc import SearchRequest, UploadAck, UploadRequest

logger = get_logger(__name__)


class RecordStoreClient(RecordStore):
    """Record store reached with one JSON POST per request.

    Searches are idempotent and retried with exponential backoff; uploads
    append to the gallery and are never retried. A failed exchange always
    raises, so "could not search" is never mistaken for "no matches".

    Example:
        ```python
        client = RecordStoreClient(url="https://photos.example.org/api/v1/records")
        refs = await client.search(descriptor)
        ```
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        backoff_seconds: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Store configuration for the record store endpoint.

        Args:
            url: Endpoint receiving the tagged payloads
            timeout: Per-request timeout in seconds
            max_retries: Extra attempts for searches after the first failure
            backoff_seconds: Delay before the first retry, doubled each time
            session: Optional preconfigured requests session
        """
        self.url = url or settings.RECORD_STORE_URL
        self.timeout = settings.RECORD_STORE_TIMEOUT if timeout is None else timeout
        self.max_retries = settings.RECORD_STORE_MAX_RETRIES if max_retries is None else max(0, max_retries)
        self.backoff_seconds = settings.RECORD_STORE_BACKOFF if backoff_seconds is None else backoff_seconds
        self._session = session or requests.Session()

    def close(self) -> None:
        self._session.close()

    async def search(self, descriptor: Descriptor) -> List[str]:
        """Search the record store with descriptor.

        Returns:
            Ordered photo references, possibly empty

        Raises:
            RecordStoreError: If the store answered with an error payload
            TransportFailureError: If the exchange failed or the answer was malformed
        """
        payload = SearchRequest(descriptor=descriptor.to_list()).model_dump()

        attempt = 0
        while True:
            try:
                body = await asyncio.to_thread(self._post, payload)
                break
            except RecordStoreError:
                raise
            except TransportFailureError as e:
                if attempt >= self.max_retries:
                    logger.error("Record store search failed", url=self.url, attempts=attempt + 1, error=str(e))
                    raise
                delay = self.backoff_seconds * (2 ** attempt)
                attempt += 1
                logger.warning(
                    "Record store search failed, retrying",
                    url=self.url,
                    attempt=attempt,
                    delay=delay,
                    error=str(e),
                )
                await asyncio.sleep(delay)

        if not isinstance(body, list) or not all(isinstance(ref, str) for ref in body):
            logger.error("Malformed search response", url=self.url, response_type=type(body).__name__)
            raise TransportFailureError("Record store returned a malformed search response")

        logger.info("Record store search complete", matches_count=len(body))
        return body

    async def upload(self, photo: PhotoUpload, descriptor: Optional[Descriptor]) -> UploadAck:
        """Upload a photograph and its descriptor (or None).

        Raises:
            RecordStoreError: If the store answered with an error payload
            TransportFailureError: If the exchange failed
        """
        payload = UploadRequest(
            descriptor=descriptor.to_list() if descriptor is not None else None,
            photo_payload=base64.b64encode(photo.content).decode("ascii"),
            file_name=photo.file_name,
            mime_type=photo.mime_type,
        ).model_dump(by_alias=True)

        body = await asyncio.to_thread(self._post, payload)
        if isinstance(body, dict):
            try:
                return UploadAck.model_validate(body)
            except ValueError:
                logger.debug("Upload acknowledged with unrecognised body", file_name=photo.file_name)
        return UploadAck()

    def _post(self, payload: Dict[str, Any]) -> Any:
        """Send one request and decode the JSON answer.

        Raises:
            RecordStoreError: If the answer is an explicit error payload
            TransportFailureError: On connection errors, timeouts, non-2xx
                statuses or undecodable bodies
        """
        action = payload.get("action")
        try:
            response = self._session.post(self.url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportFailureError(f"Record store request failed: {e}", details={"action": action})

        try:
            body = response.json() if response.content else None
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get("error"):
            raise RecordStoreError(
                f"Record store error: {body['error']}",
                details={"action": action, "status_code": response.status_code},
            )
        if not response.ok:
            raise TransportFailureError(
                f"Record store returned HTTP {response.status_code}",
                details={"action": action, "status_code": response.status_code},
            )
        if body is None and action == "search":
            raise TransportFailureError("Record store returned an empty or non-JSON search response")
        return body
