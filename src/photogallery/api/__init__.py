"""Photo Gallery API — FastAPI REST API layer.

This package contains the FastAPI application, Pydantic request/response
models, the gallery document store and the upload handling.

Modules
-------
main
    FastAPI application factory, route handlers and the ``main()`` CLI
    entry point.
models
    Pydantic models for API request and response validation.
gallery_store
    File-backed gallery document persistence (year records).
paths
    Upload directory, public URL and image path resolution.
uploads
    Image upload validation, storage and deletion.
"""
