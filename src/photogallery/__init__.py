"""Photo Gallery API - JSON-backed year gallery with image uploads."""

__version__ = "0.1.0"

from photogallery.core.config import GalleryConfig, config

__all__ = [
    "GalleryConfig",
    "config",
]
