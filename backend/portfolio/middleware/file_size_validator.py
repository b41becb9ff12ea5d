"""
File Size Measurement

Measures uploaded file size without loading entire file into memory.
"""

import logging

from fastapi import UploadFile

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1MB chunks


async def measure_upload_size(file: UploadFile) -> int:
    """
    Measure uploaded file size without loading entire file into memory.

    Reads file in chunks to count bytes, then resets the file pointer
    to the beginning for subsequent processing. Whether the size is
    acceptable is decided by the file validator, not here.

    Args:
        file: FastAPI UploadFile object

    Returns:
        int: Total file size in bytes
    """
    if file.size is not None:
        return file.size

    size = 0
    while chunk := await file.read(CHUNK_SIZE):
        size += len(chunk)

    # Reset file pointer to beginning for subsequent reads
    await file.seek(0)

    logger.debug(f"Measured upload {file.filename}: {size} bytes")
    return size
