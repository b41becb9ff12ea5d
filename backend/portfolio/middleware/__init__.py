"""FastAPI middleware for request/response processing."""

from .error_handler import (
    ErrorHandlerMiddleware,
    MediaError,
    UnsupportedMediaTypeError,
    PayloadTooLargeError,
    NoFileProvidedError,
    TooManyFilesError,
    RemoteUploadFailedError,
    LocalIOFailedError,
    AssetNotFoundError,
    ProjectNotFoundError,
    SkillNotFoundError,
    ContactNotFoundError,
    format_error_response,
)

__all__ = [
    "ErrorHandlerMiddleware",
    "MediaError",
    "UnsupportedMediaTypeError",
    "PayloadTooLargeError",
    "NoFileProvidedError",
    "TooManyFilesError",
    "RemoteUploadFailedError",
    "LocalIOFailedError",
    "AssetNotFoundError",
    "ProjectNotFoundError",
    "SkillNotFoundError",
    "ContactNotFoundError",
    "format_error_response",
]
