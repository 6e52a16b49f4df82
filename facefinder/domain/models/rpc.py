"""Wire models for the record store RPC boundary.

Every request is a JSON object tagged by ``action``. The same models are used
by the client to build payloads and by the reference service to parse them.
"""
from typing import Annotated, List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter


class SearchRequest(BaseModel):
    """``{"action": "search", "descriptor": [...]}``"""
    action: Literal["search"] = "search"
    descriptor: List[float] = Field(..., description="Query descriptor")


class UploadRequest(BaseModel):
    """``{"action": "upload", "descriptor": [...] | null, "photoPayload": ..., "fileName": ..., "mimeType": ...}``"""
    model_config = ConfigDict(populate_by_name=True)

    action: Literal["upload"] = "upload"
    descriptor: Optional[List[float]] = Field(None, description="Primary face descriptor, null when no face was found")
    photo_payload: str = Field(
        ...,
        validation_alias=AliasChoices("photoPayload", "base64", "photo_payload"),
        serialization_alias="photoPayload",
        description="Base64-encoded image bytes",
    )
    file_name: str = Field(
        ...,
        validation_alias=AliasChoices("fileName", "file_name"),
        serialization_alias="fileName",
        min_length=1,
    )
    mime_type: str = Field(
        "application/octet-stream",
        validation_alias=AliasChoices("mimeType", "mime_type"),
        serialization_alias="mimeType",
    )


RecordStoreRequest = Annotated[Union[SearchRequest, UploadRequest], Field(discriminator="action")]

record_store_request_adapter: TypeAdapter = TypeAdapter(RecordStoreRequest)


class UploadAck(BaseModel):
    """Acknowledgement of an upload.

    The body carries no strict contract; success is inferred from the
    transport status and ``photo_ref`` is filled in when the store reports it.
    """
    model_config = ConfigDict(populate_by_name=True)

    status: str = "ok"
    photo_ref: Optional[str] = Field(None, validation_alias=AliasChoices("photoRef", "photo_ref"), serialization_alias="photoRef")
    matchable: Optional[bool] = None


class ErrorPayload(BaseModel):
    """Explicit error answer from the record store."""
    error: str
