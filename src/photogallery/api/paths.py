"""Filesystem path and public URL resolution for gallery uploads.

Uploaded images live under the gallery root as ``<year>/<category>/<file>``
and are served at the mirrored public URL ``/gallery/<year>/<category>/<file>``.
Missing ``year`` falls back to ``uploads`` and a missing ``category`` to the
year directory itself.

``year``, ``category`` and client-supplied image paths are untrusted, so every
resolved path is canonicalised and must stay inside the gallery root.
"""

from __future__ import annotations

import logging
from pathlib import Path

from photogallery.core.errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_YEAR_DIR = "uploads"


def _ensure_within(root: Path, candidate: Path) -> Path:
    """Resolve *candidate* and check it does not escape *root*.

    Args:
        root: Directory the result must stay inside.
        candidate: Path to canonicalise.

    Returns:
        The resolved candidate path.

    Raises:
        ValidationError: If the resolved path lies outside ``root``.
    """
    root_resolved = root.resolve()
    try:
        resolved = candidate.resolve()
    except (ValueError, OSError) as e:
        raise ValidationError(f"Invalid path: {e}") from e

    if resolved != root_resolved and not resolved.is_relative_to(root_resolved):
        logger.warning(f"Path traversal attempt detected: {candidate}")
        raise ValidationError("Invalid path: outside of gallery directory")

    return resolved


def upload_directory(gallery_root: Path, year: str | None, category: str | None) -> Path:
    """Return the directory an upload for ``year``/``category`` is stored in.

    The directory (and any missing parents) is created before returning.

    Args:
        gallery_root: Base directory for uploaded images.
        year: Year the image belongs to, or ``None``/empty for ``uploads``.
        category: Optional category subdirectory.

    Returns:
        Resolved directory inside ``gallery_root``.

    Raises:
        ValidationError: If ``year`` or ``category`` would escape the root.
    """
    directory = _ensure_within(
        gallery_root,
        gallery_root / (year or DEFAULT_YEAR_DIR) / (category or ""),
    )
    if directory == gallery_root.resolve():
        raise ValidationError("Invalid path: outside of gallery directory")
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def public_url(
    gallery_root: Path,
    directory: Path,
    filename: str,
    category: str | None = None,
    prefix: str = "gallery",
) -> str:
    """Build the public URL of a file stored in *directory*.

    The URL follows the resolved directory, so ``..`` segments in the
    submitted year or category never appear in it.  An upload without a
    category keeps a doubled slash (``/gallery/2024//name.jpg``); the static
    file server normalises it, and clients already store URLs in this shape.

    Args:
        gallery_root: Base directory for uploaded images.
        directory: Resolved directory the file was stored in, as returned by
            :func:`upload_directory`.
        filename: Stored filename.
        category: Submitted category; only its presence matters.
        prefix: First URL segment, mirroring the gallery root.
    """
    relative = directory.relative_to(gallery_root.resolve()).as_posix()
    if not category:
        relative += "/"
    return f"/{prefix}/{relative}/{filename}"


def resolve_image_path(public_root: Path, gallery_root: Path, image_path: str) -> Path:
    """Map a client-supplied public image path onto the filesystem.

    A single leading ``/`` is stripped and the remainder is resolved against
    the public root.  The result must fall inside the gallery root, so the
    gallery document and other public files can never be targeted.

    Args:
        public_root: Directory served at ``/``.
        gallery_root: Directory uploaded images live in.
        image_path: Path as returned by the upload endpoint, e.g.
            ``/gallery/2024/portraits/1700000000000-123456789.jpg``.

    Returns:
        Resolved filesystem path.

    Raises:
        ValidationError: If the path escapes the gallery root.
    """
    relative = image_path[1:] if image_path.startswith("/") else image_path
    resolved = _ensure_within(gallery_root, public_root / relative)
    if resolved == gallery_root.resolve():
        raise ValidationError("Invalid path: outside of gallery directory")
    return resolved
