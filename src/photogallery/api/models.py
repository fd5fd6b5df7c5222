"""Pydantic request and response models for the Photo Gallery API.

FastAPI uses these for request validation, serialisation, and OpenAPI
documentation.  Year records themselves are free-form JSON objects and are
passed through as plain dictionaries.

Models
------
DeleteImageRequest
    Payload for ``DELETE /api/gallery/image``.
MessageResponse
    ``{success, message}`` acknowledgement.
YearUpdateResponse
    Response of ``PUT /api/gallery/year/{year_id}``.
UploadResponse
    Response of ``POST /api/gallery/upload``.
HealthResponse
    Response of ``GET /api/health``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DeleteImageRequest(BaseModel):
    """Request body for the ``DELETE /api/gallery/image`` endpoint.

    Attributes:
        image_path: Public path of the image as returned by the upload
            endpoint.  Missing values are reported as a 400.
    """

    model_config = ConfigDict(populate_by_name=True)

    image_path: str | None = Field(
        default=None,
        alias="imagePath",
        description="Public path of the image, e.g. '/gallery/2024/portraits/x.jpg'.",
    )


class MessageResponse(BaseModel):
    """Generic success acknowledgement."""

    success: bool = True
    message: str


class YearUpdateResponse(BaseModel):
    """Response for a merged year record."""

    success: bool = True
    year: dict[str, Any]


class UploadResponse(BaseModel):
    """Response for a stored upload.

    Attributes:
        url: Public URL of the stored image.
        filename: Generated filename on disk.
        originalName: Filename supplied by the client.
        size: Stored size in bytes.
    """

    success: bool = True
    url: str
    filename: str
    originalName: str
    size: int


class HealthResponse(BaseModel):
    """Liveness probe payload."""

    status: str = "ok"
    timestamp: str
