"""Image upload and deletion for the Photo Gallery API.

Uploads are validated by file extension and declared MIME type, stored under
the gallery root via :mod:`photogallery.api.paths`, and given a generated
name of the form ``<epoch-ms>-<9-digit random><ext>``.  Nothing is recorded
in the gallery document; clients reference the returned URL themselves.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import asdict, dataclass
from pathlib import Path

from fastapi import UploadFile

from photogallery.api.paths import public_url, resolve_image_path, upload_directory
from photogallery.core.errors import NotFoundError, UploadTooLargeError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = frozenset({"jpeg", "jpg", "png", "gif", "webp"})

CHUNK_SIZE = 1024 * 1024

# Attempts at finding an unused filename before giving up.
MAX_NAME_ATTEMPTS = 10


@dataclass
class StoredUpload:
    """Result of a successful upload."""

    url: str
    filename: str
    original_name: str
    size: int

    def to_response(self) -> dict:
        """Return the camelCase payload expected by the gallery front-end."""
        data = asdict(self)
        data["originalName"] = data.pop("original_name")
        return data


def is_allowed_image(filename: str, content_type: str | None) -> bool:
    """Check that both the extension and the MIME type name an allowed image.

    Args:
        filename: Original client filename, e.g. ``photo.JPG``.
        content_type: Declared MIME type, e.g. ``image/jpeg``.

    Returns:
        ``True`` only if the extension and the ``image/<subtype>`` MIME type
        are both in :data:`ALLOWED_IMAGE_TYPES` (case-insensitive).
    """
    extension = Path(filename).suffix.lower().lstrip(".")
    if extension not in ALLOWED_IMAGE_TYPES:
        return False

    if not content_type:
        return False
    main_type, _, subtype = content_type.split(";")[0].strip().lower().partition("/")
    return main_type == "image" and subtype in ALLOWED_IMAGE_TYPES


def generate_filename(original_name: str) -> str:
    """Generate a stored filename keeping the original extension.

    Example: ``photo.jpg`` -> ``1718000000000-482913077.jpg``.
    """
    timestamp = int(time.time() * 1000)
    suffix = random.randint(0, 999_999_999)
    return f"{timestamp}-{suffix:09d}{Path(original_name).suffix}"


def _claim_destination(directory: Path, original_name: str) -> Path:
    """Create an empty file with a fresh generated name inside *directory*.

    The file is opened exclusively so two uploads racing for the same name
    can never share it.
    """
    for _ in range(MAX_NAME_ATTEMPTS):
        destination = directory / generate_filename(original_name)
        try:
            destination.touch(exist_ok=False)
        except FileExistsError:
            continue
        return destination
    raise OSError(f"Could not allocate a unique filename in {directory}")


async def save_upload(
    upload: UploadFile | None,
    *,
    gallery_root: Path,
    year: str | None,
    category: str | None,
    max_bytes: int,
    url_prefix: str = "gallery",
) -> StoredUpload:
    """Validate and store an uploaded image.

    Args:
        upload: The ``image`` multipart field, or ``None`` if absent.
        gallery_root: Base directory for uploaded images.
        year: Year form field.
        category: Category form field.
        max_bytes: Size cap; the upload is aborted once exceeded.
        url_prefix: First segment of the returned public URL.

    Returns:
        :class:`StoredUpload` describing the stored file.

    Raises:
        ValidationError: No file, disallowed type, or unsafe year/category.
        UploadTooLargeError: The file exceeds ``max_bytes``.
    """
    if upload is None or not upload.filename:
        raise ValidationError("No file uploaded")

    if not is_allowed_image(upload.filename, upload.content_type):
        raise ValidationError("Only image files are allowed!")

    directory = upload_directory(gallery_root, year, category)
    destination = _claim_destination(directory, upload.filename)

    size = 0
    try:
        with open(destination, "wb") as handle:
            while chunk := await upload.read(CHUNK_SIZE):
                size += len(chunk)
                if size > max_bytes:
                    raise UploadTooLargeError(
                        f"File too large: limit is {max_bytes} bytes"
                    )
                handle.write(chunk)
    except BaseException:
        destination.unlink(missing_ok=True)
        raise

    stored = StoredUpload(
        url=public_url(gallery_root, directory, destination.name, category, prefix=url_prefix),
        filename=destination.name,
        original_name=upload.filename,
        size=size,
    )
    logger.info(f"Stored upload {upload.filename} as {destination} ({size} bytes)")
    return stored


def delete_image(public_root: Path, gallery_root: Path, image_path: str | None) -> Path:
    """Delete a previously uploaded image by its public path.

    Args:
        public_root: Directory served at ``/``.
        gallery_root: Directory uploaded images live in.
        image_path: Public path of the image, e.g. ``/gallery/2024/a/x.jpg``.

    Returns:
        The filesystem path that was removed.

    Raises:
        ValidationError: If ``image_path`` is missing or escapes the gallery.
        NotFoundError: If no file exists at the resolved path.
        OSError: Any other filesystem failure.
    """
    if not image_path or not image_path.strip():
        raise ValidationError("Image path is required")

    target = resolve_image_path(public_root, gallery_root, image_path)
    if target.is_dir():
        raise NotFoundError("File not found")

    try:
        target.unlink()
    except FileNotFoundError as e:
        raise NotFoundError("File not found") from e

    logger.info(f"Deleted image {target}")
    return target
