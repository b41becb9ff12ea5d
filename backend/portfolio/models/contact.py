"""
Contact Pydantic Models

Schemas for messages submitted through the site's contact form and their
admin-side triage.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


class ContactPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ContactSubmit(BaseModel):
    """Fields a visitor submits through the contact form."""

    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=254, pattern=EMAIL_PATTERN)
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)
    phone: Optional[str] = Field(None, max_length=30)
    company: Optional[str] = Field(None, max_length=100)
    projectType: Optional[str] = Field(None, max_length=100)
    budget: Optional[str] = Field(None, max_length=100)

    @field_validator("name", "subject", "message")
    @classmethod
    def strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.strip().lower()


class ContactUpdate(BaseModel):
    """Admin-side triage fields; everything else is read-only."""

    isRead: Optional[bool] = None
    isReplied: Optional[bool] = None
    priority: Optional[ContactPriority] = None
    notes: Optional[str] = Field(None, max_length=2000)
    tags: Optional[List[str]] = None


class Contact(ContactSubmit):
    """A persisted contact message."""

    id: str
    priority: ContactPriority = ContactPriority.MEDIUM
    isRead: bool = False
    readAt: Optional[datetime] = None
    isReplied: bool = False
    repliedAt: Optional[datetime] = None
    notes: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    ipAddress: Optional[str] = None
    userAgent: Optional[str] = None
    createdAt: datetime
    updatedAt: datetime


class ContactReceipt(BaseModel):
    """What the visitor gets back after submitting."""

    id: str
    name: str
    email: str
    subject: str
    submittedAt: datetime


class ContactSubmitResponse(BaseModel):
    success: bool = True
    message: str
    data: ContactReceipt


class ContactResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: Contact
    meta: Optional[Dict[str, Any]] = None


class ContactListResponse(BaseModel):
    success: bool = True
    count: int
    total: int
    totalPages: int
    currentPage: int
    hasNextPage: bool
    hasPrevPage: bool
    data: List[Contact]


class ContactDeleteResponse(BaseModel):
    success: bool = True
    message: str
    data: Dict[str, Any]


class ContactStatsResponse(BaseModel):
    success: bool = True
    data: Dict[str, Any]
