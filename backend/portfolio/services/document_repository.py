"""
Document Repository

Stores one JSON document per record under {base_path}/{collection}/{id}.json.
Subclasses name the collection and the pydantic model they persist.
"""

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from portfolio.middleware.error_handler import LocalIOFailedError

logger = logging.getLogger(__name__)

DocumentT = TypeVar("DocumentT", bound=BaseModel)


def valid_document_id(document_id: str) -> bool:
    """Only UUIDs are accepted, preventing path traversal."""
    try:
        uuid.UUID(document_id)
        return True
    except (ValueError, AttributeError, TypeError):
        return False


class DocumentRepository(Generic[DocumentT]):
    """
    Manages JSON documents of one collection on the filesystem.

    Handles:
    - Creating documents with generated IDs and timestamps
    - Loading and listing documents, skipping unreadable ones
    - Atomic saves and deletes
    """

    collection: str = ""
    model: Type[DocumentT]

    def __init__(self, base_path: str = "data"):
        self.base_path = Path(base_path)
        self.collection_path = self.base_path / self.collection

    def ensure(self) -> None:
        self.collection_path.mkdir(parents=True, exist_ok=True)

    def _path(self, document_id: str) -> Path:
        return self.collection_path / f"{document_id}.json"

    def insert(self, data: BaseModel, **extra: Any) -> DocumentT:
        """
        Create and persist a new document from request data.

        Raises:
            LocalIOFailedError: If the document cannot be written
        """
        now = datetime.now(timezone.utc)
        document = self.model(
            id=str(uuid.uuid4()),
            createdAt=now,
            updatedAt=now,
            **data.model_dump(),
            **extra,
        )
        self.save(document)
        logger.info(f"Created {self.collection} document {document.id}")
        return document

    def save(self, document: DocumentT) -> DocumentT:
        """
        Write a document, replacing any previous version.

        Raises:
            LocalIOFailedError: If the document cannot be written
        """
        self.ensure()
        path = self._path(document.id)
        tmp_path = path.with_suffix(".json.tmp")

        try:
            with open(tmp_path, "w") as f:
                f.write(document.model_dump_json(indent=2))
            tmp_path.replace(path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            logger.error(f"Failed to save {self.collection} document {document.id}: {str(e)}")
            raise LocalIOFailedError(str(path), str(e))

        return document

    def get(self, document_id: str) -> Optional[DocumentT]:
        """
        Load a document if it exists.

        Returns None for unknown IDs and unreadable documents.
        """
        if not valid_document_id(document_id):
            logger.warning(f"Invalid {self.collection} ID format: {document_id}")
            return None

        path = self._path(document_id)
        if not path.exists():
            return None

        try:
            with open(path, "r") as f:
                return self.model.model_validate(json.load(f))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Failed to parse {self.collection} document {document_id}: {str(e)}")
            return None
        except OSError as e:
            logger.error(f"Failed to read {self.collection} document {document_id}: {str(e)}")
            return None

    def all(self) -> List[DocumentT]:
        """Every readable document of the collection, in no particular order."""
        if not self.collection_path.exists():
            return []

        documents = []
        for path in self.collection_path.glob("*.json"):
            document = self.get(path.stem)
            if document is not None:
                documents.append(document)
        return documents

    def delete(self, document_id: str) -> bool:
        """
        Delete a document.

        Returns:
            bool: False if the document did not exist

        Raises:
            LocalIOFailedError: If the document cannot be removed
        """
        if not valid_document_id(document_id):
            return False

        path = self._path(document_id)
        if not path.exists():
            return False

        try:
            path.unlink()
        except OSError as e:
            logger.error(f"Failed to delete {self.collection} document {document_id}: {str(e)}")
            raise LocalIOFailedError(str(path), str(e))

        logger.info(f"Deleted {self.collection} document {document_id}")
        return True


class Page(Generic[DocumentT]):
    """One page of a filtered listing."""

    def __init__(self, items: List[DocumentT], total: int, page: int, limit: int):
        self.items = items
        self.total = total
        self.page = page
        self.limit = limit

    @property
    def total_pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


def paginate(items: List[DocumentT], page: int, limit: int, max_limit: int = 100) -> Page:
    """Slice ``items`` to one page; page and limit are clamped to sane bounds."""
    page = max(1, page)
    limit = min(max_limit, max(1, limit))
    start = (page - 1) * limit
    return Page(items[start:start + limit], len(items), page, limit)
