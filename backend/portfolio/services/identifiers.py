"""
Asset identifier generation.

Identifiers look like ``{base}_{milliseconds}_{token}`` and are safe both as
file names and as Cloudinary public IDs.
"""

import re
import secrets
import string
import time
from pathlib import PurePath

TOKEN_ALPHABET = string.digits + string.ascii_lowercase
TOKEN_LENGTH = 6
FALLBACK_BASENAME = "image"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]")
_SAFE_EXTENSION = re.compile(r"\.[a-z0-9]+")


def sanitize_basename(original_filename: str) -> str:
    """Strip the extension and every character outside [A-Za-z0-9_-]."""
    stem = PurePath(original_filename or "").stem
    return _UNSAFE_CHARS.sub("", stem) or FALLBACK_BASENAME


def file_extension(original_filename: str) -> str:
    """Lowercase extension including the dot, or an empty string."""
    suffix = PurePath(original_filename or "").suffix.lower()
    return suffix if _SAFE_EXTENSION.fullmatch(suffix) else ""


def generate_identifier(original_filename: str, keep_extension: bool = False) -> str:
    """
    Generate a collision-resistant identifier for an uploaded file.

    Args:
        original_filename: Name the client sent with the upload
        keep_extension: Append the lowercase extension (needed on disk,
            omitted for opaque CDN keys)

    Returns:
        str: Identifier such as ``cover_1718000000000_k3x9ab.png``
    """
    timestamp = int(time.time() * 1000)
    token = "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))
    identifier = f"{sanitize_basename(original_filename)}_{timestamp}_{token}"
    if keep_extension:
        identifier += file_extension(original_filename)
    return identifier
