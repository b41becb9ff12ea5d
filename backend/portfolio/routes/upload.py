"""
Upload API Routes

Handles single and multi-file image upload and image deletion.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile

from portfolio.config import settings
from portfolio.middleware import (
    AssetNotFoundError,
    MediaError,
    NoFileProvidedError,
    PayloadTooLargeError,
    TooManyFilesError,
    UnsupportedMediaTypeError,
)
from portfolio.models import (
    DeleteImageResponse,
    FileState,
    PerFileResult,
    UploadedImageData,
    UploadImageResponse,
    UploadManyResponse,
)
from portfolio.services.asset_store import AssetStore
from portfolio.services.file_validator import ViolationKind
from portfolio.services.store_factory import get_asset_store, get_upload_orchestrator
from portfolio.services.upload_orchestrator import UploadOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


def _raise_for_result(
    result: PerFileResult,
    orchestrator: UploadOrchestrator,
    content_type: Optional[str] = None,
) -> None:
    """
    Translate a failed single-file result into the matching error.

    Failure messages already name what failed and are passed through unchanged.
    """
    message = "; ".join(result.errors or []) or "Failed to upload image"
    reasons = result.reasons or []
    if result.state is FileState.REJECTED:
        policy = orchestrator.policy
        if ViolationKind.UNSUPPORTED_MEDIA_TYPE.value in reasons:
            raise UnsupportedMediaTypeError(content_type, sorted(policy.allowed_types))
        if ViolationKind.PAYLOAD_TOO_LARGE.value in reasons:
            raise PayloadTooLargeError(policy.max_size)
        raise NoFileProvidedError()
    raise MediaError(
        message=message,
        status_code=500,
        details={"filename": result.filename},
    )


@router.post(
    "/upload-image",
    response_model=UploadImageResponse,
    summary="Upload Image",
    description="""
Upload a single image to the active asset store.

**Constraints:**
- **Max File Size:** MAX_UPLOAD_SIZE (10MB by default)
- **Supported Formats:** JPEG, PNG, WEBP, GIF

**Response:** URL, identifier and thumbnail URL of the stored image.
""",
    responses={
        200: {"description": "Upload successful"},
        400: {"description": "No file, invalid file type or file too large"},
        500: {"description": "Storage failure"},
    },
)
async def upload_image(
    image: Optional[UploadFile] = File(None),
    orchestrator: UploadOrchestrator = Depends(get_upload_orchestrator),
) -> UploadImageResponse:
    """
    Validate and store a single image.

    Args:
        image: Uploaded image (multipart/form-data field ``image``)

    Returns:
        UploadImageResponse: Stored image details

    Raises:
        MediaError: For validation errors and storage failures
    """
    if image is None or not image.filename:
        raise NoFileProvidedError()

    logger.info(f"Upload request received: {image.filename} ({image.content_type})")
    result = await orchestrator.process_one(image)

    if not result.success:
        _raise_for_result(result, orchestrator, image.content_type)

    return UploadImageResponse(
        message="Image uploaded successfully",
        data=UploadedImageData.from_asset(result.storedAsset, image.filename),
    )


@router.post(
    "/upload-multiple",
    response_model=UploadManyResponse,
    summary="Upload Multiple Images",
    description="""
Upload up to MAX_BATCH_FILES images in one request.

Each file is validated and stored independently. The response is 200 even
when no file was stored; inspect the per-file results.
""",
    responses={
        200: {"description": "Batch processed"},
        400: {"description": "No files or too many files"},
    },
)
async def upload_multiple(
    images: Optional[List[UploadFile]] = File(None),
    orchestrator: UploadOrchestrator = Depends(get_upload_orchestrator),
) -> UploadManyResponse:
    """
    Validate and store several images.

    Returns:
        UploadManyResponse: One result per file, in upload order
    """
    if not images:
        raise NoFileProvidedError("No images provided")
    if len(images) > settings.MAX_BATCH_FILES:
        raise TooManyFilesError(len(images), settings.MAX_BATCH_FILES)

    results = await orchestrator.process_many(images)
    stored = sum(1 for r in results if r.success)

    return UploadManyResponse(
        success=stored > 0,
        message=f"{stored} of {len(results)} image(s) uploaded successfully",
        data=results,
        count=stored,
    )


@router.delete(
    "/delete-image/{identifier:path}",
    response_model=DeleteImageResponse,
    summary="Delete Image",
    responses={
        200: {"description": "Image deleted"},
        404: {"description": "Image not found or already deleted"},
    },
)
async def delete_image(
    identifier: str,
    store: AssetStore = Depends(get_asset_store),
) -> DeleteImageResponse:
    """
    Delete an image from the active asset store.

    Args:
        identifier: Identifier returned by the upload endpoints

    Raises:
        AssetNotFoundError: If the store does not know the identifier
        MediaError: If the store failed to delete it
    """
    logger.info(f"Delete request for image {identifier}")
    result = await store.delete(identifier)

    if result.result == "not found":
        raise AssetNotFoundError(identifier)
    if not result.success:
        raise MediaError(
            message="Failed to delete image",
            status_code=500,
            details={"identifier": identifier, "result": result.result},
        )

    return DeleteImageResponse(success=True, message="Image deleted successfully")
