"""Shared pytest fixtures for Photo Gallery tests."""

import json
import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from photogallery.api.gallery_store import GalleryStore
from photogallery.api.main import create_app
from photogallery.core.config import GalleryConfig


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> GalleryConfig:
    """Create a test configuration rooted in a temporary public directory.

    Args:
        temp_dir: Temporary directory from fixture

    Returns:
        GalleryConfig instance for testing
    """
    return GalleryConfig(
        _env_file=None,
        public_dir=temp_dir / "public",
        max_upload_bytes=1024,
    )


@pytest.fixture
def tmp_gallery_dir(test_config: GalleryConfig) -> Path:
    """Gallery directory uploads are written to."""
    return test_config.gallery_dir


@pytest.fixture
def store(test_config: GalleryConfig) -> GalleryStore:
    """Gallery store backed by the test document path."""
    return GalleryStore(test_config.gallery_data_path)


@pytest.fixture
def test_client(test_config: GalleryConfig) -> Generator[TestClient, None, None]:
    """FastAPI TestClient for an app built from the test configuration."""
    with TestClient(create_app(test_config)) as client:
        yield client


@pytest.fixture
def sample_years() -> list[dict]:
    """Three year records with nested category content.

    Returns:
        List of year records
    """
    return [
        {
            "year": "2024",
            "title": "Twenty twenty-four",
            "categories": [
                {"name": "portraits", "images": ["/gallery/2024/portraits/a.jpg"]},
            ],
        },
        {"year": "2023", "title": "Twenty twenty-three", "categories": []},
        {"year": "2022", "title": "Twenty twenty-two", "categories": []},
    ]


@pytest.fixture
def sample_gallery(test_config: GalleryConfig, sample_years: list[dict]) -> list[dict]:
    """Write ``sample_years`` to the test gallery document.

    Returns:
        The year records that were written
    """
    test_config.gallery_data_path.write_text(
        json.dumps({"years": sample_years}, indent=2), encoding="utf-8"
    )
    return sample_years
