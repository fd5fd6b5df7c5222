"""Photo Gallery API — FastAPI Application.

This module is the single entry point for the web application.  It defines
the ``create_app()`` factory, the module-level ``app`` instance, all REST API
routes, and the ``main()`` CLI function that launches the uvicorn server.

Architecture
------------
The application follows a stateless REST pattern:

- **Gallery persistence** uses a single ``gallery-data.json`` document,
  read and rewritten on every request by
  :class:`~photogallery.api.gallery_store.GalleryStore`.
- **Uploads** are written under the gallery directory by
  :mod:`photogallery.api.uploads`; the document is not touched.
- **Static files** (the public directory, including uploaded images) are
  served by FastAPI's ``StaticFiles`` mounted at ``/``.

Every handler maps domain errors onto HTTP responses itself: validation
errors become 400 (413 for oversized uploads), missing records or files 404,
and anything else is logged and reported as a generic 500.  Error bodies are
``{"error": "<message>"}``.

Endpoints
---------
========  ================================  ================================
Method    Path                              Purpose
========  ================================  ================================
GET       ``/api/gallery``                  List all year records
POST      ``/api/gallery``                  Replace the whole gallery
PUT       ``/api/gallery/year/{year_id}``   Shallow-merge one year record
DELETE    ``/api/gallery/year/{year_id}``   Delete a year record
POST      ``/api/gallery/upload``           Upload an image file
DELETE    ``/api/gallery/image``            Delete an image file
GET       ``/api/health``                   Liveness probe
========  ================================  ================================

Usage
-----
CLI (installed entry point)::

    photogallery

Direct invocation::

    python -m photogallery.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Body, FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from photogallery import __version__
from photogallery.api.gallery_store import GalleryStore
from photogallery.api.models import (
    DeleteImageRequest,
    HealthResponse,
    MessageResponse,
    UploadResponse,
    YearUpdateResponse,
)
from photogallery.api.uploads import delete_image, save_upload
from photogallery.core.config import GalleryConfig, config
from photogallery.core.errors import GalleryError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def _http_error(error: GalleryError) -> HTTPException:
    """Translate a domain error into an :class:`HTTPException`."""
    return HTTPException(status_code=error.status_code, detail=str(error))


def _settings(request: Request) -> GalleryConfig:
    return request.app.state.config


def _store(request: Request) -> GalleryStore:
    return request.app.state.gallery_store


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as ``{"error": message}`` for the gallery front-end."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


# ---------------------------------------------------------------------------
# Gallery document routes.
# ---------------------------------------------------------------------------


@router.get("/gallery")
async def get_gallery(request: Request) -> list[Any]:
    """Return every year record in document order.

    A missing gallery document yields an empty list.

    Raises:
        HTTPException: 500 if the document cannot be read.
    """
    try:
        return _store(request).list_years()
    except Exception as e:
        logger.error(f"Error reading gallery data: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to read gallery data") from e


@router.post("/gallery", response_model=MessageResponse)
async def replace_gallery(
    request: Request,
    payload: Any = Body(default=None),
) -> MessageResponse:
    """Replace the whole gallery with the posted ``years`` list.

    A missing body, or a body that is not an object, has no ``years`` and is
    rejected like any other non-list value.

    Raises:
        HTTPException: 400 if ``years`` is not a list, 500 on write failure.
    """
    years = payload.get("years") if isinstance(payload, dict) else None
    try:
        _store(request).replace_all(years)
    except GalleryError as e:
        raise _http_error(e) from e
    except Exception as e:
        logger.error(f"Error saving gallery data: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to save gallery data") from e

    return MessageResponse(message="Gallery data saved successfully")


@router.put("/gallery/year/{year_id}", response_model=YearUpdateResponse)
async def update_year(
    request: Request,
    year_id: str,
    patch: dict[str, Any] = Body(...),
) -> YearUpdateResponse:
    """Shallow-merge the request body into the record for ``year_id``.

    Raises:
        HTTPException: 404 if no record has that year, 500 on I/O failure.
    """
    try:
        year = _store(request).update_year(year_id, patch)
    except GalleryError as e:
        raise _http_error(e) from e
    except Exception as e:
        logger.error(f"Error updating year {year_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update year") from e

    return YearUpdateResponse(year=year)


@router.delete("/gallery/year/{year_id}", response_model=MessageResponse)
async def delete_year(request: Request, year_id: str) -> MessageResponse:
    """Delete every record for ``year_id``; unknown years are a no-op.

    Raises:
        HTTPException: 500 on I/O failure.
    """
    try:
        _store(request).delete_year(year_id)
    except GalleryError as e:
        raise _http_error(e) from e
    except Exception as e:
        logger.error(f"Error deleting year {year_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete year") from e

    return MessageResponse(message="Year deleted successfully")


# ---------------------------------------------------------------------------
# Image file routes.
# ---------------------------------------------------------------------------


@router.post("/gallery/upload", response_model=UploadResponse)
async def upload_image(
    request: Request,
    image: UploadFile | None = File(default=None),
    year: str | None = Form(default=None),
    category: str | None = Form(default=None),
) -> UploadResponse:
    """Store an uploaded image under ``<gallery>/<year>/<category>/``.

    The gallery document is not updated; the client records the returned
    ``url`` with a separate ``PUT``.

    Raises:
        HTTPException: 400 for a missing file, disallowed type, or unsafe
            year/category; 413 if the file exceeds the size cap; 500 on
            I/O failure.
    """
    settings = _settings(request)
    try:
        stored = await save_upload(
            image,
            gallery_root=settings.gallery_dir,
            year=year,
            category=category,
            max_bytes=settings.max_upload_bytes,
            url_prefix=settings.gallery_subdir,
        )
    except GalleryError as e:
        raise _http_error(e) from e
    except Exception as e:
        logger.error(f"Error uploading file: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to upload file") from e
    finally:
        if image is not None:
            await image.close()

    return UploadResponse(**stored.to_response())


@router.delete("/gallery/image", response_model=MessageResponse)
async def remove_image(
    request: Request,
    req: DeleteImageRequest | None = None,
) -> MessageResponse:
    """Delete an uploaded image by its public path.

    Raises:
        HTTPException: 400 if ``imagePath`` is missing or escapes the
            gallery directory, 404 if the file does not exist, 500 otherwise.
    """
    settings = _settings(request)
    image_path = req.image_path if req is not None else None
    try:
        delete_image(settings.public_dir, settings.gallery_dir, image_path)
    except GalleryError as e:
        raise _http_error(e) from e
    except Exception as e:
        logger.error(f"Error deleting image {image_path}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete image") from e

    return MessageResponse(message="Image deleted successfully")


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness probe with the current UTC time."""
    now = datetime.now(timezone.utc)
    return HealthResponse(timestamp=now.isoformat(timespec="milliseconds").replace("+00:00", "Z"))


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log where the gallery lives when the server starts."""
    settings: GalleryConfig = app.state.config
    logger.info(f"Gallery API serving on http://{settings.server_host}:{settings.server_port}")
    logger.info(f"Gallery data: {settings.gallery_data_path}")
    logger.info(f"Upload directory: {settings.gallery_dir}")
    yield


def create_app(settings: GalleryConfig | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Configuration to use.  Defaults to the global
            :data:`~photogallery.core.config.config` instance.

    Returns:
        Configured application with API routes and the static mount.
    """
    settings = settings or config

    app = FastAPI(
        title="Photo Gallery API",
        description="CRUD over a JSON year gallery plus image uploads.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = settings
    app.state.gallery_store = GalleryStore(settings.gallery_data_path)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    # Registered last so API routes take precedence over static lookups.
    app.mount("/", StaticFiles(directory=str(settings.public_dir)), name="public")

    return app


app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host and port from :data:`~photogallery.core.config.config` (the
    port comes from ``PORT`` or ``GALLERY_SERVER_PORT``).  Defaults to
    ``0.0.0.0:3001``.

    This function is registered as the ``photogallery`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "photogallery.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
