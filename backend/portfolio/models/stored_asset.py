"""
Stored asset Pydantic models.

Describes what an asset store returns for a persisted image, a deletion
and a sweep of expired assets.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class StoredAsset(BaseModel):
    """
    Persisted reference to an image held by an asset store.

    The identifier alone is enough to delete the asset or re-derive its URLs.
    """

    identifier: str = Field(..., description="Store-unique asset identifier")
    primaryUrl: str = Field(..., description="Public URL of the full image")
    derivedUrls: Dict[str, str] = Field(
        default_factory=dict,
        description="Variant name to URL, e.g. 'thumbnail'",
    )
    width: Optional[int] = Field(None, description="Image width in pixels")
    height: Optional[int] = Field(None, description="Image height in pixels")
    format: str = Field(..., description="Image format, e.g. 'jpeg'")
    byteSize: int = Field(..., description="Stored size in bytes")

    model_config = {
        "json_schema_extra": {
            "example": {
                "identifier": "cover_1718000000000_k3x9ab.png",
                "primaryUrl": "http://localhost:8000/uploads/cover_1718000000000_k3x9ab.png",
                "derivedUrls": {
                    "thumbnail": "http://localhost:8000/uploads/thumbnails/cover_1718000000000_k3x9ab.png"
                },
                "width": 1200,
                "height": 800,
                "format": "png",
                "byteSize": 245760,
            }
        }
    }


class DeleteResult(BaseModel):
    """Outcome of deleting one asset."""

    identifier: str
    success: bool
    result: str = Field(..., description="Store result code, 'ok' on success")


class SweepResult(BaseModel):
    """Outcome of deleting assets older than a cutoff."""

    deletedCount: int = 0
    errors: List[str] = Field(default_factory=list)
