"""
Contact Repository

Stores one JSON document per contact message under
{base_path}/contacts/{id}.json.
"""

from typing import List, Optional

from portfolio.models import Contact

from .document_repository import DocumentRepository

SEARCH_FIELDS = ("name", "email", "subject", "message", "phone")
SORT_FIELDS = ("createdAt", "updatedAt", "name", "email", "subject", "priority")


def _matches(contact: Contact, search: str) -> bool:
    needle = search.lower()
    return any(needle in (getattr(contact, field) or "").lower() for field in SEARCH_FIELDS)


def _sort_key(field: str):
    if field == "priority":
        order = {"low": 0, "medium": 1, "high": 2}
        return lambda c: order[c.priority.value]
    if field in ("createdAt", "updatedAt"):
        return lambda c: getattr(c, field)
    return lambda c: (getattr(c, field) or "").lower()


class ContactRepository(DocumentRepository[Contact]):
    """Contact messages with admin-side filtering and sorting."""

    collection = "contacts"
    model = Contact

    def list(
        self,
        is_read: Optional[bool] = None,
        is_replied: Optional[bool] = None,
        priority: Optional[str] = None,
        project_type: Optional[str] = None,
        search: Optional[str] = None,
        sort_by: str = "createdAt",
        descending: bool = True,
    ) -> List[Contact]:
        if sort_by not in SORT_FIELDS:
            raise ValueError(f"Cannot sort contacts by {sort_by}")

        contacts = []
        for contact in self.all():
            if is_read is not None and contact.isRead != is_read:
                continue
            if is_replied is not None and contact.isReplied != is_replied:
                continue
            if priority is not None and contact.priority.value != priority:
                continue
            if project_type is not None and contact.projectType != project_type:
                continue
            if search and not _matches(contact, search):
                continue
            contacts.append(contact)

        contacts.sort(key=_sort_key(sort_by), reverse=descending)
        return contacts
