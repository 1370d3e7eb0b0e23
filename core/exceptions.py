"""
Domain exceptions for the file storage service
"""
from typing import Any


class FileStorageError(Exception):
    """Base exception for all file storage errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class EncodingError(FileStorageError):
    """Payload is not valid base64."""


class NotFound(FileStorageError):
    """No stored file matches the requested id."""

    def __init__(self, file_id: str) -> None:
        super().__init__(
            f"No file found for id = {file_id}.",
            details={"id": file_id},
        )
        self.file_id = file_id


class StorageUnavailable(FileStorageError):
    """The database could not be opened or a statement failed."""


class SchemaError(FileStorageError):
    """The storage table could not be created or has an unexpected shape."""
