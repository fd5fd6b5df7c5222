"""Gallery document storage for the Photo Gallery API.

This module isolates the gallery JSON persistence logic from
``photogallery.api.main`` so route handlers can focus on HTTP concerns while
the file-backed store remains testable as a small unit.

The gallery is intentionally simple:

- all metadata lives in a single ``gallery-data.json`` document shaped as
  ``{"years": [...]}``
- each year record is a free-form object keyed by its ``year`` string
- image files are managed separately by :mod:`photogallery.api.uploads`; the
  document holds no knowledge of which files exist on disk

Reads are tolerant: a missing or unreadable document is treated as an empty
gallery rather than an error, so the first write bootstraps the file.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from photogallery.core.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def empty_document() -> dict:
    """Return a fresh empty gallery document."""
    return {"years": []}


def load_gallery_document(path: Path) -> dict:
    """Load the gallery document, returning an empty one on any failure.

    The rule is intentionally forgiving:

    - if the file does not exist, return an empty gallery
    - if the file is not valid JSON or not an object, return an empty gallery
    - if ``years`` is missing or not a list, it is replaced by ``[]``

    Args:
        path: Path to ``gallery-data.json``.

    Returns:
        Gallery document dictionary with a ``years`` list.
    """
    if not path.exists():
        return empty_document()

    try:
        with open(path, encoding="utf-8") as handle:
            document = json.load(handle)
    except Exception as e:
        logger.warning(f"Could not read gallery document {path}: {e}")
        return empty_document()

    if not isinstance(document, dict):
        return empty_document()

    if not isinstance(document.get("years"), list):
        document["years"] = []

    return document


def save_gallery_document(path: Path, document: dict) -> None:
    """Persist the gallery document to disk.

    The JSON is written with 2-space indentation to a temporary file in the
    same directory and then moved over the target, so readers never observe
    a half-written document.

    Args:
        path: Path to ``gallery-data.json``.
        document: Gallery document to persist.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(document, handle, indent=2, ensure_ascii=False)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class GalleryStore:
    """Read-modify-write access to the gallery document.

    Every operation re-reads the document from disk; nothing is cached
    between calls.  Mutations from synchronous callers in one process are
    serialised by a lock.
    Separate processes writing the same file still race (last write wins).
    """

    def __init__(self, data_path: Path):
        """Initialize the store.

        Args:
            data_path: Path to ``gallery-data.json``.  The file does not need
                to exist yet.
        """
        self.data_path = Path(data_path)
        # Guards synchronous callers (scripts, tests, threadpool code); the async
        # route handlers already run their read-modify-write without awaiting.
        self._lock = threading.Lock()

    def read(self) -> dict:
        """Return the current gallery document."""
        return load_gallery_document(self.data_path)

    def write(self, document: dict) -> None:
        """Overwrite the gallery document."""
        with self._lock:
            save_gallery_document(self.data_path, document)

    def list_years(self) -> list[dict]:
        """Return all year records in document order."""
        return self.read()["years"]

    def replace_all(self, years: Any) -> dict:
        """Replace the whole gallery with ``years``.

        Args:
            years: New list of year records.  Duplicate ``year`` values are
                stored as given.

        Returns:
            The persisted document.

        Raises:
            ValidationError: If ``years`` is not a list.
        """
        if not isinstance(years, list):
            raise ValidationError("Invalid data format")

        document = {"years": years}
        self.write(document)
        logger.info(f"Gallery replaced with {len(years)} year record(s)")
        return document

    def update_year(self, year_id: str, patch: Mapping[str, Any]) -> dict:
        """Shallow-merge ``patch`` into the first record whose ``year`` matches.

        Only top-level keys are merged: keys in ``patch`` overwrite the stored
        values (nested lists and objects are replaced wholesale) and keys not
        mentioned in ``patch`` are kept.

        Args:
            year_id: ``year`` value of the record to update.
            patch: Fields to merge into the record.

        Returns:
            The merged year record.

        Raises:
            ValidationError: If ``patch`` is not a mapping.
            NotFoundError: If no record has ``year == year_id``.
        """
        if not isinstance(patch, Mapping):
            raise ValidationError("Invalid data format")

        with self._lock:
            document = self.read()
            years = document["years"]
            index = next(
                (
                    i
                    for i, record in enumerate(years)
                    if isinstance(record, dict) and record.get("year") == year_id
                ),
                None,
            )
            if index is None:
                raise NotFoundError("Year not found")

            years[index] = {**years[index], **patch}
            save_gallery_document(self.data_path, document)

        logger.info(f"Updated year {year_id}: {sorted(patch)}")
        return years[index]

    def delete_year(self, year_id: str) -> int:
        """Remove every record whose ``year`` matches ``year_id``.

        Deleting a year that does not exist is not an error; the document is
        still rewritten.

        Returns:
            Number of records removed.
        """
        with self._lock:
            document = self.read()
            before = len(document["years"])
            document["years"] = [
                record
                for record in document["years"]
                if not (isinstance(record, dict) and record.get("year") == year_id)
            ]
            save_gallery_document(self.data_path, document)

        removed = before - len(document["years"])
        logger.info(f"Deleted year {year_id} ({removed} record(s) removed)")
        return removed
