"""
Upload Response Pydantic Models

Defines the response structures for image upload and deletion endpoints.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .stored_asset import StoredAsset


class FileState(str, Enum):
    """Lifecycle of one file inside an upload request."""

    RECEIVED = "received"
    VALIDATED = "validated"
    STAGED = "staged"
    STORED = "stored"
    REJECTED = "rejected"
    FAILED = "failed"


class PerFileResult(BaseModel):
    """Outcome of processing a single uploaded file."""

    filename: str = Field(..., description="Original uploaded filename")
    success: bool = Field(..., description="True when the file was stored")
    state: FileState = Field(..., description="Final lifecycle state of the file")
    storedAsset: Optional[StoredAsset] = Field(
        None,
        description="Stored asset reference when successful",
    )
    errors: Optional[List[str]] = Field(
        None,
        description="Validation or storage errors when unsuccessful",
    )
    reasons: Optional[List[str]] = Field(
        None,
        description="Violation kinds for rejected files, e.g. 'PayloadTooLarge'",
    )


class UploadedImageData(BaseModel):
    """Payload describing a single uploaded image."""

    url: str
    identifier: str
    thumbnailUrl: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    format: str
    size: int
    filename: str

    @classmethod
    def from_asset(cls, asset: StoredAsset, filename: str) -> "UploadedImageData":
        return cls(
            url=asset.primaryUrl,
            identifier=asset.identifier,
            thumbnailUrl=asset.derivedUrls.get("thumbnail"),
            width=asset.width,
            height=asset.height,
            format=asset.format,
            size=asset.byteSize,
            filename=filename,
        )


class UploadImageResponse(BaseModel):
    """
    Response model for successful single image upload.

    Returned by POST /api/projects/upload-image.
    """

    success: bool = True
    message: str = Field(..., description="Success message")
    data: UploadedImageData

    model_config = {
        "json_schema_extra": {
            "example": {
                "success": True,
                "message": "Image uploaded successfully",
                "data": {
                    "url": "http://localhost:8000/uploads/cover_1718000000000_k3x9ab.png",
                    "identifier": "cover_1718000000000_k3x9ab.png",
                    "thumbnailUrl": "http://localhost:8000/uploads/thumbnails/cover_1718000000000_k3x9ab.png",
                    "width": 1200,
                    "height": 800,
                    "format": "png",
                    "size": 245760,
                    "filename": "cover.png",
                },
            }
        }
    }


class UploadManyResponse(BaseModel):
    """
    Response model for multi-file upload.

    A batch where every file failed is still a 200 response; the per-file
    results carry the failure detail.
    """

    success: bool = Field(..., description="True when at least one file was stored")
    message: str
    data: List[PerFileResult]
    count: int = Field(..., description="Number of files stored")


class DeleteImageResponse(BaseModel):
    """Response model for image deletion."""

    success: bool
    message: str
