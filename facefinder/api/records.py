"""Record store API endpoints."""
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from fastapi.responses import FileResponse, JSONResponse
from pydantic import ValidationError

from facefinder.core.exceptions import (
    GalleryError,
    InvalidDescriptorError,
    InvalidImageError,
    PhotoNotFoundError,
)
from facefinder.core.logging import get_logger
from facefinder.domain.models.rpc import SearchRequest, UploadAck, record_store_request_adapter
from facefinder.infrastructure.dependencies import get_photo_storage, get_record_store_service
from facefinder.infrastructure.photos.local import LocalPhotoStorage
from facefinder.services.record_store import RecordStoreService

logger = get_logger(__name__)
router = APIRouter(
    responses={
        400: {"description": "Invalid request"},
        500: {"description": "Internal server error"}
    }
)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post(
    "/records",
    summary="Search or upload photo records",
    description=(
        "Single RPC-style endpoint. `action: search` returns the ordered list of matching "
        "photo references; `action: upload` admits a photograph to the gallery."
    ),
    responses={
        200: {
            "description": "Search results or upload acknowledgement",
            "content": {
                "application/json": {
                    "examples": {
                        "search": {"value": ["http://localhost:8000/api/v1/photos/9f1c..."]},
                        "upload": {"value": {"status": "ok", "photoRef": "http://localhost:8000/api/v1/photos/9f1c...", "matchable": True}},
                    }
                }
            },
        },
        400: {
            "description": "Malformed payload or descriptor",
            "content": {"application/json": {"example": {"error": "Descriptor must have 128 elements, got 3"}}},
        },
    },
)
async def handle_record_request(
    payload: Dict[str, Any] = Body(...),
    service: RecordStoreService = Depends(get_record_store_service),
) -> Any:
    """Dispatch a tagged record store request.

    Args:
        payload: Request body tagged by ``action``
        service: Record store service provided by dependency injection

    Returns:
        List of photo references for searches, an acknowledgement for uploads,
        or an ``{"error": ...}`` payload
    """
    try:
        request = record_store_request_adapter.validate_python(payload)
    except ValidationError as e:
        logger.warning("Rejected malformed record store request", errors=e.error_count())
        return error_response(400, f"Malformed request: {e.errors()[0]['msg']}")

    try:
        if isinstance(request, SearchRequest):
            result = await service.search(request.descriptor)
            return result.photo_refs

        record = await service.upload(request)
        ack = UploadAck(photo_ref=record.photo_ref, matchable=record.is_matchable)
        return ack.model_dump(by_alias=True)

    except (InvalidDescriptorError, InvalidImageError) as e:
        logger.warning("Rejected record store request", action=request.action, error=str(e))
        return error_response(400, str(e))
    except GalleryError as e:
        logger.error("Gallery unavailable", action=request.action, error=str(e))
        return error_response(500, "Gallery unavailable")
    except Exception as e:
        logger.error("Unexpected error handling record store request",
                     action=request.action, error=str(e), exc_info=True)
        return error_response(500, "An unexpected error occurred")


@router.get("/photos/{photo_id}", summary="Download a stored photograph")
async def get_photo(
    photo_id: str,
    storage: LocalPhotoStorage = Depends(get_photo_storage),
) -> Any:
    """Stream a stored photograph."""
    try:
        path, media_type = storage.locate(photo_id)
    except PhotoNotFoundError as e:
        return error_response(404, str(e))
    return FileResponse(path, media_type=media_type)
