"""
Contact API Routes

Public form submission plus admin triage of received messages.
"""

import logging
from datetime import datetime, timezone
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Request

from portfolio.models import (
    ContactDeleteResponse,
    ContactListResponse,
    ContactPriority,
    ContactReceipt,
    ContactResponse,
    ContactStatsResponse,
    ContactSubmit,
    ContactSubmitResponse,
    ContactUpdate,
)
from portfolio.services.contact_service import ContactService
from portfolio.services.store_factory import get_contact_service

logger = logging.getLogger(__name__)

router = APIRouter()

SortField = Literal["createdAt", "updatedAt", "name", "email", "subject", "priority"]


@router.post("/submit", response_model=ContactSubmitResponse, status_code=201)
async def submit_contact(
    payload: ContactSubmit,
    request: Request,
    service: ContactService = Depends(get_contact_service),
) -> ContactSubmitResponse:
    contact = service.submit(
        payload,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return ContactSubmitResponse(
        message="Thank you for your message! I'll get back to you soon.",
        data=ContactReceipt(
            id=contact.id,
            name=contact.name,
            email=contact.email,
            subject=contact.subject,
            submittedAt=contact.createdAt,
        ),
    )


@router.get("/admin", response_model=ContactListResponse)
async def list_contacts(
    isRead: Optional[bool] = Query(None),
    isReplied: Optional[bool] = Query(None),
    priority: Optional[ContactPriority] = Query(None),
    projectType: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    sortBy: SortField = Query("createdAt"),
    sortOrder: Literal["asc", "desc"] = Query("desc"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: ContactService = Depends(get_contact_service),
) -> ContactListResponse:
    result = service.list(
        is_read=isRead,
        is_replied=isReplied,
        priority=priority.value if priority else None,
        project_type=projectType,
        search=search,
        sort_by=sortBy,
        sort_order=sortOrder,
        page=page,
        limit=limit,
    )
    return ContactListResponse(
        count=len(result.items),
        total=result.total,
        totalPages=result.total_pages,
        currentPage=result.page,
        hasNextPage=result.has_next,
        hasPrevPage=result.has_prev,
        data=result.items,
    )


@router.get("/admin/stats", response_model=ContactStatsResponse)
async def contact_stats(
    service: ContactService = Depends(get_contact_service),
) -> ContactStatsResponse:
    return ContactStatsResponse(data=service.stats())


@router.get("/{contact_id}", response_model=ContactResponse)
async def get_contact(
    contact_id: str,
    service: ContactService = Depends(get_contact_service),
) -> ContactResponse:
    """Fetch a message; viewing it marks it as read."""
    contact, was_marked = service.get(contact_id, mark_read=True)
    return ContactResponse(data=contact, meta={"wasMarkedAsRead": was_marked})


@router.put("/{contact_id}", response_model=ContactResponse)
async def update_contact(
    contact_id: str,
    payload: ContactUpdate,
    service: ContactService = Depends(get_contact_service),
) -> ContactResponse:
    contact = service.update(contact_id, payload)
    return ContactResponse(message="Contact updated successfully", data=contact)


@router.delete("/{contact_id}", response_model=ContactDeleteResponse)
async def delete_contact(
    contact_id: str,
    service: ContactService = Depends(get_contact_service),
) -> ContactDeleteResponse:
    contact = service.delete(contact_id)
    logger.info(f"Contact {contact.id} deleted")
    return ContactDeleteResponse(
        message="Contact deleted successfully",
        data={
            "deletedId": contact.id,
            "deletedAt": datetime.now(timezone.utc).isoformat(),
        },
    )
