"""
Centralized error handling middleware for FastAPI.

Provides consistent error responses and logging for all API routes.
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from portfolio.config import settings

logger = logging.getLogger(__name__)


class MediaError(Exception):
    """Base exception for upload, storage and project errors."""

    def __init__(self, message: str, status_code: int = 500, details: Any = None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class UnsupportedMediaTypeError(MediaError):
    """Raised when an upload's MIME type is not allowed."""

    def __init__(self, mime_type: str | None, allowed: list[str]):
        super().__init__(
            message=(
                "Invalid file type. Only JPEG, JPG, PNG, WEBP, and GIF files are allowed"
            ),
            status_code=400,
            details={"mime_type": mime_type, "allowed": allowed},
        )


class PayloadTooLargeError(MediaError):
    """Raised when an upload exceeds the size limit."""

    def __init__(self, max_size: int, size: int | None = None):
        super().__init__(
            message=f"File too large. Maximum size is {max_size // (1024 * 1024)}MB",
            status_code=400,
            details={"size": size, "max_size": max_size},
        )


class NoFileProvidedError(MediaError):
    """Raised when a request carries no file."""

    def __init__(self, message: str = "No image file uploaded"):
        super().__init__(message=message, status_code=400)


class TooManyFilesError(MediaError):
    """Raised when a batch upload carries more files than allowed."""

    def __init__(self, count: int, max_files: int):
        super().__init__(
            message=f"Too many files. Maximum is {max_files} files",
            status_code=400,
            details={"count": count, "max_files": max_files},
        )


class RemoteUploadFailedError(MediaError):
    """Raised when the image CDN rejects or fails an upload."""

    def __init__(self, reason: str):
        super().__init__(
            message=f"Failed to upload image to Cloudinary: {reason}",
            status_code=500,
            details={"reason": reason},
        )


class LocalIOFailedError(MediaError):
    """Raised when local file operations fail."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            message=f"Failed to write file: {reason}",
            status_code=500,
            details={"path": path, "reason": reason},
        )


class AssetNotFoundError(MediaError):
    """Raised when an identifier is unknown to the active store."""

    def __init__(self, identifier: str):
        super().__init__(
            message="Image not found or already deleted",
            status_code=404,
            details={"identifier": identifier},
        )


class ProjectNotFoundError(MediaError):
    """Raised when a project ID is not found."""

    def __init__(self, project_id: str):
        super().__init__(
            message="Project not found",
            status_code=404,
            details={"project_id": project_id},
        )


class SkillNotFoundError(MediaError):
    """Raised when a skill ID is not found."""

    def __init__(self, skill_id: str):
        super().__init__(
            message="Skill not found",
            status_code=404,
            details={"skill_id": skill_id},
        )


class ContactNotFoundError(MediaError):
    """Raised when a contact message ID is not found."""

    def __init__(self, contact_id: str):
        super().__init__(
            message="Contact not found",
            status_code=404,
            details={"contact_id": contact_id},
        )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware that catches unhandled exceptions and returns consistent error responses.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)
            return response

        except MediaError as e:
            logger.error(
                f"{type(e).__name__}: {e.message}",
                extra={"status_code": e.status_code, "details": e.details},
            )
            return JSONResponse(
                status_code=e.status_code,
                content=format_error_response(e.message, e.details),
            )

        except Exception as e:
            # Log full stack trace for unexpected errors
            logger.exception(f"Unhandled exception: {str(e)}")
            return JSONResponse(
                status_code=500,
                content=format_error_response(
                    "Internal server error",
                    {"error": str(e)} if settings.DEBUG else None,
                ),
            )


def format_error_response(message: str, details: Any = None) -> dict:
    """
    Format a consistent error response.

    Args:
        message: Human-readable error message
        details: Additional error details (optional)

    Returns:
        dict: Formatted error response
    """
    response = {
        "success": False,
        "message": message,
    }
    if details:
        response["details"] = details
    return response
