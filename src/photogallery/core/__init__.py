"""Core building blocks shared by the Photo Gallery API.

- **GalleryConfig**: Configuration management using Pydantic Settings
- **config**: Global configuration instance (loads from environment variables)
- **errors**: Domain error taxonomy mapped to HTTP status codes by the API
"""

from photogallery.core.config import GalleryConfig, config
from photogallery.core.errors import (
    GalleryError,
    NotFoundError,
    UploadTooLargeError,
    ValidationError,
)

__all__ = [
    "GalleryConfig",
    "GalleryError",
    "NotFoundError",
    "UploadTooLargeError",
    "ValidationError",
    "config",
]
