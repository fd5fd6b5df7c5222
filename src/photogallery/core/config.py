"""Configuration management for the Photo Gallery API.

This module provides centralized configuration management using Pydantic Settings.
Configuration is loaded from environment variables with the GALLERY_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (GALLERY_* prefix, plus the bare ``PORT`` variable)
2. .env file in the project root
3. Default values defined in GalleryConfig

Example .env file:
    PORT=3001
    GALLERY_PUBLIC_DIR=public
    GALLERY_MAX_UPLOAD_BYTES=10485760

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
This ensures a single source of truth for all configuration values across
the application.

Usage Example
-------------
    from photogallery.core.config import config

    print(config.gallery_dir)
    print(config.gallery_data_path)

    # Configuration is immutable after initialization
    # To change values, set environment variables and restart

Directory Layout
----------------
The public directory is served statically by the API.  It holds:
- ``gallery-data.json``: the gallery document (all year records)
- ``gallery/``: uploaded images, keyed by ``<year>/<category>/``
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GalleryConfig(BaseSettings):
    """Main configuration for the Photo Gallery API.

    All Path fields are created on initialization if they don't exist.

    Attributes
    ----------
    Paths:
        public_dir : Path
            Public root served statically (document + gallery tree)
        gallery_subdir : str
            Name of the gallery root under ``public_dir``; also the public
            URL prefix of uploaded images
        data_filename : str
            Gallery document filename under ``public_dir``

    Server Settings:
        server_host : str
            Server bind address
        server_port : int
            Server port, read from ``PORT`` or ``GALLERY_SERVER_PORT``
        cors_origins : list[str]
            Origins allowed by the CORS middleware

    Uploads:
        max_upload_bytes : int
            Largest accepted upload (10 MiB by default)

    Logging:
        log_level : str
            Root logging level applied by the CLI entry point

    Examples
    --------
        >>> custom_config = GalleryConfig(public_dir="/srv/gallery", server_port=8080)
        >>> custom_config.gallery_dir
        PosixPath('/srv/gallery/gallery')
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GALLERY_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Paths
    public_dir: Path = Field(
        default=Path("public"),
        description="Public root served statically",
    )
    gallery_subdir: str = Field(
        default="gallery",
        description="Gallery root directory name under public_dir and its URL prefix",
        min_length=1,
    )
    data_filename: str = Field(
        default="gallery-data.json",
        description="Gallery document filename under public_dir",
        min_length=1,
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    server_port: int = Field(
        default=3001,
        description="Server port",
        ge=1,
        le=65535,
        validation_alias=AliasChoices("PORT", "GALLERY_SERVER_PORT"),
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed CORS origins",
    )

    # Uploads
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum accepted upload size in bytes",
        ge=1,
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level for the server process",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create required directories.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)
        """
        super().__init__(**kwargs)

        self.public_dir.mkdir(parents=True, exist_ok=True)
        self.gallery_dir.mkdir(parents=True, exist_ok=True)

    @property
    def gallery_dir(self) -> Path:
        """Directory holding uploaded images."""
        return self.public_dir / self.gallery_subdir

    @property
    def gallery_data_path(self) -> Path:
        """Path of the gallery document."""
        return self.public_dir / self.data_filename


# Global configuration instance
# Loads values from environment variables (GALLERY_* prefix, PORT) and .env file.
config = GalleryConfig()
