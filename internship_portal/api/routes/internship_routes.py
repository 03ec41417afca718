"""
Internship Routes

GET /internships - List internships visible to the caller
POST /internships - Post an internship (employer only, starts pending_review)
GET /internships/{internship_id} - Get internship details
PUT /internships/{internship_id} - Edit details and/or change status
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from internship_portal.core.auth import Principal, get_current_principal
from internship_portal.services import internship_service
from internship_portal.services.notifier import notify, NEW_INTERNSHIP, UPDATED_INTERNSHIP
from internship_portal.schemas.schemas import (
    InternshipCreate, InternshipUpdate, InternshipResponse, InternshipListResponse, InternshipStatus
)

router = APIRouter(prefix="/internships", tags=["Internships"])


def _hint(internship: dict) -> dict:
    return {
        "internship_id": internship["internship_id"],
        "employer_id": internship["employer_id"],
        "status": internship["status"],
    }


@router.get("", response_model=InternshipListResponse)
async def list_internships(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: Optional[InternshipStatus] = Query(None),
    search: Optional[str] = Query(None, description="Search in title"),
    all_active: bool = Query(False, description="Employers: list every active internship instead of your own"),
    principal: Principal = Depends(get_current_principal),
):
    """List internships with filters and pagination."""
    rows, total = internship_service.list_internships(
        principal, status=status, search=search, all_active=all_active, page=page, page_size=page_size
    )
    return InternshipListResponse(
        internships=[InternshipResponse(**r) for r in rows], total=total, page=page, page_size=page_size
    )


@router.post("", response_model=InternshipResponse, status_code=201)
async def create_internship(data: InternshipCreate, principal: Principal = Depends(get_current_principal)):
    """Post a new internship. It stays pending_review until an admin approves it."""
    internship = internship_service.create_internship(principal, data.model_dump())
    await notify(NEW_INTERNSHIP, _hint(internship))
    return internship


@router.get("/{internship_id}", response_model=InternshipResponse)
async def get_internship(internship_id: int, principal: Principal = Depends(get_current_principal)):
    """Get details of a specific internship."""
    return internship_service.get_internship(principal, internship_id)


@router.put("/{internship_id}", response_model=InternshipResponse)
async def update_internship(
    internship_id: int,
    update: InternshipUpdate,
    principal: Principal = Depends(get_current_principal),
):
    """
    Edit an internship and/or move it to a new status.

    Owners may edit details and close their postings; admins approve
    (active) or reject pending postings.
    """
    changes = update.model_dump(exclude_unset=True, exclude={"status"})

    if not changes and update.status is None:
        return internship_service.get_internship(principal, internship_id)

    internship = internship_service.update_internship(principal, internship_id, changes, new_status=update.status)
    await notify(UPDATED_INTERNSHIP, _hint(internship))
    return internship
