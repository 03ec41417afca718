"""
Application Routes

GET /applications - List applications visible to the caller
POST /applications - Apply to an internship (student only)
PUT /applications/{application_id} - Update application status (owning employer or admin)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from internship_portal.core.auth import Principal, get_current_principal
from internship_portal.services import application_service
from internship_portal.services.notifier import notify, NEW_APPLICATION, UPDATED_APPLICATION
from internship_portal.schemas.schemas import (
    ApplicationCreate, ApplicationResponse, ApplicationStatus, ApplicationStatusUpdate
)

router = APIRouter(prefix="/applications", tags=["Applications"])


def _hint(application: dict) -> dict:
    return {
        "application_id": application["application_id"],
        "internship_id": application["internship_id"],
        "status": application["status"],
    }


@router.get("", response_model=List[ApplicationResponse])
async def list_applications(
    internship_id: Optional[int] = Query(None),
    status: Optional[ApplicationStatus] = Query(None),
    principal: Principal = Depends(get_current_principal),
):
    """Students see their own applications, employers the ones to their internships."""
    return application_service.list_applications(principal, internship_id=internship_id, status=status)


@router.post("", response_model=ApplicationResponse, status_code=201)
async def submit_application(data: ApplicationCreate, principal: Principal = Depends(get_current_principal)):
    """Apply to an active internship. Cannot apply twice to the same internship."""
    application = application_service.submit_application(
        principal, data.internship_id, data.model_dump(mode="json", exclude={"internship_id"})
    )
    await notify(NEW_APPLICATION, _hint(application))
    return application


@router.put("/{application_id}", response_model=ApplicationResponse)
async def update_application_status(
    application_id: int,
    update: ApplicationStatusUpdate,
    principal: Principal = Depends(get_current_principal),
):
    """Move an application to reviewed, shortlisted or rejected."""
    application = application_service.update_application_status(principal, application_id, update.status)
    await notify(UPDATED_APPLICATION, _hint(application))
    return application
