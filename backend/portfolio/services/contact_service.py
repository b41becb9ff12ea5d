"""
Contact Service

Accepts contact form submissions and supports their triage by the site
owner. Notification emails are sent by an external worker that watches
the contacts collection; this service only records the message.
"""

import logging
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from portfolio.middleware.error_handler import ContactNotFoundError
from portfolio.models import Contact, ContactPriority, ContactSubmit, ContactUpdate

from .contact_repository import ContactRepository
from .document_repository import Page, paginate

logger = logging.getLogger(__name__)


def _start_of_quarter_window(now: datetime) -> datetime:
    """First day of the month three months back."""
    month = now.month - 3
    year = now.year
    if month < 1:
        month += 12
        year -= 1
    return now.replace(year=year, month=month, day=1, hour=0, minute=0, second=0, microsecond=0)


class ContactService:
    def __init__(self, repository: ContactRepository):
        self.repository = repository

    def submit(
        self,
        data: ContactSubmit,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Contact:
        contact = self.repository.insert(data, ipAddress=ip_address, userAgent=user_agent)
        logger.info(f"Contact message {contact.id} received from {contact.email}")
        return contact

    def get(self, contact_id: str, mark_read: bool = False) -> Tuple[Contact, bool]:
        """
        Load a contact message.

        Returns:
            The contact and whether this call marked it as read
        """
        contact = self.repository.get(contact_id)
        if contact is None:
            raise ContactNotFoundError(contact_id)

        if mark_read and not contact.isRead:
            now = datetime.now(timezone.utc)
            contact.isRead = True
            contact.readAt = now
            contact.updatedAt = now
            self.repository.save(contact)
            return contact, True

        return contact, False

    def list(
        self,
        is_read: Optional[bool] = None,
        is_replied: Optional[bool] = None,
        priority: Optional[str] = None,
        project_type: Optional[str] = None,
        search: Optional[str] = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
        page: int = 1,
        limit: int = 10,
    ) -> Page:
        contacts = self.repository.list(
            is_read=is_read,
            is_replied=is_replied,
            priority=priority,
            project_type=project_type,
            search=search,
            sort_by=sort_by,
            descending=sort_order == "desc",
        )
        return paginate(contacts, page, limit)

    def update(self, contact_id: str, changes: ContactUpdate) -> Contact:
        """Apply triage changes, stamping readAt and repliedAt on first transition."""
        contact, _ = self.get(contact_id)
        now = datetime.now(timezone.utc)

        for field, value in changes.model_dump(exclude_unset=True).items():
            if value is None:
                continue
            setattr(contact, field, value)

        if changes.isRead and contact.readAt is None:
            contact.readAt = now
        if changes.isReplied and contact.repliedAt is None:
            contact.repliedAt = now
        contact.updatedAt = now

        logger.info(f"Updated contact {contact_id}")
        return self.repository.save(contact)

    def delete(self, contact_id: str) -> Contact:
        contact, _ = self.get(contact_id)
        self.repository.delete(contact_id)
        return contact

    def stats(self) -> dict:
        contacts = self.repository.all()
        now = datetime.now(timezone.utc)
        today = now.replace(hour=0, minute=0, second=0, microsecond=0)

        priority_stats = {p.value: 0 for p in ContactPriority}
        priority_stats.update(Counter(c.priority.value for c in contacts))

        response_hours = [
            (c.repliedAt - c.createdAt).total_seconds() / 3600
            for c in contacts
            if c.isReplied and c.repliedAt is not None
        ]

        def since(start: datetime) -> int:
            return sum(1 for c in contacts if c.createdAt >= start)

        return {
            "totalContacts": len(contacts),
            "unreadContacts": sum(1 for c in contacts if not c.isRead),
            "unrepliedContacts": sum(1 for c in contacts if not c.isReplied),
            "priorityStats": priority_stats,
            "contactsByType": dict(Counter(c.projectType or "unspecified" for c in contacts)),
            "timeStats": {
                "today": since(today),
                "week": since(now - timedelta(days=7)),
                "month": since(now - timedelta(days=30)),
                "quarter": since(_start_of_quarter_window(now)),
            },
            "avgResponseTimeHours": (
                round(sum(response_hours) / len(response_hours), 1) if response_hours else None
            ),
            "lastUpdated": now.isoformat(),
        }
