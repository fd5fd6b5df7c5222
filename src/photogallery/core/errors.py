"""Domain errors raised by the gallery store and upload handler.

The route layer maps these onto HTTP status codes.  Messages are meant to be
shown to the client as-is.
"""


class GalleryError(Exception):
    """Base class for all gallery domain errors."""

    status_code = 500


class ValidationError(GalleryError):
    """Malformed or missing client input, including unsafe paths."""

    status_code = 400


class UploadTooLargeError(ValidationError):
    """Uploaded file exceeds the configured size cap."""

    status_code = 413


class NotFoundError(GalleryError):
    """Referenced year record or image file does not exist."""

    status_code = 404
