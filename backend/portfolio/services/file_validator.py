"""
File Validation Service

Checks uploaded images against the MIME type allow-set and size limit.
Violations are returned, never raised, so a batch can report every file's
problems in one pass.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from portfolio.config import DEFAULT_ALLOWED_MIME_TYPES, DEFAULT_MAX_UPLOAD_SIZE

logger = logging.getLogger(__name__)


class ViolationKind(str, Enum):
    """Reasons an upload is rejected before any storage side effect."""

    NO_FILE_PROVIDED = "NoFileProvided"
    UNSUPPORTED_MEDIA_TYPE = "UnsupportedMediaType"
    PAYLOAD_TOO_LARGE = "PayloadTooLarge"


@dataclass(frozen=True)
class UploadPolicy:
    """Accepted MIME types and maximum byte size for image uploads."""

    allowed_types: frozenset = field(
        default_factory=lambda: frozenset(DEFAULT_ALLOWED_MIME_TYPES)
    )
    max_size: int = DEFAULT_MAX_UPLOAD_SIZE

    @classmethod
    def from_values(cls, allowed_types: Iterable[str], max_size: int) -> "UploadPolicy":
        return cls(
            allowed_types=frozenset(t.lower() for t in allowed_types),
            max_size=max_size,
        )

    def validate(self, mime_type: Optional[str], byte_size: int) -> List[ViolationKind]:
        """
        Validate a declared MIME type and byte size.

        Args:
            mime_type: Declared content type (compared case-insensitively)
            byte_size: Size of the upload in bytes

        Returns:
            list[ViolationKind]: Empty when the upload is acceptable
        """
        violations = []

        if not mime_type or mime_type.lower() not in self.allowed_types:
            logger.warning(f"Rejected MIME type: {mime_type}")
            violations.append(ViolationKind.UNSUPPORTED_MEDIA_TYPE)

        if byte_size > self.max_size:
            logger.warning(
                f"Rejected file size: {byte_size} bytes (max: {self.max_size})"
            )
            violations.append(ViolationKind.PAYLOAD_TOO_LARGE)

        return violations

    def describe(self, violation: ViolationKind) -> str:
        """Human-readable message for a violation."""
        if violation is ViolationKind.UNSUPPORTED_MEDIA_TYPE:
            return "Invalid file type. Only JPEG, JPG, PNG, WEBP, and GIF files are allowed"
        if violation is ViolationKind.PAYLOAD_TOO_LARGE:
            return f"File too large. Maximum size is {self.max_size // (1024 * 1024)}MB"
        return "No file provided"


def validate(
    mime_type: Optional[str],
    byte_size: int,
    policy: Optional[UploadPolicy] = None,
) -> List[ViolationKind]:
    """Validate against the given policy, or the default one."""
    return (policy or UploadPolicy()).validate(mime_type, byte_size)
