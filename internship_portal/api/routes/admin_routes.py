"""
Admin Routes

GET /admin/accounts - List accounts (filter by role / approval)
GET /admin/employers - List employer accounts, pending ones with ?approved=false
PUT /admin/employers/{employer_id}/approve - Approve an employer so it can login
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from internship_portal.core.auth import Principal, get_current_principal
from internship_portal.services import account_service
from internship_portal.services.notifier import notify, EMPLOYER_APPROVED
from internship_portal.schemas.schemas import AccountResponse, Role

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/accounts", response_model=List[AccountResponse])
async def list_accounts(
    role: Optional[Role] = Query(None),
    approved: Optional[bool] = Query(None),
    principal: Principal = Depends(get_current_principal),
):
    """List accounts for user management."""
    return account_service.list_accounts(principal, role=role, approved=approved)


@router.get("/employers", response_model=List[AccountResponse])
async def list_employers(
    approved: Optional[bool] = Query(None),
    principal: Principal = Depends(get_current_principal),
):
    """List employer accounts. Use approved=false for the approval queue."""
    return account_service.list_accounts(principal, role=Role.employer, approved=approved)


@router.put("/employers/{employer_id}/approve", response_model=AccountResponse)
async def approve_employer(employer_id: int, principal: Principal = Depends(get_current_principal)):
    """Approve an employer account."""
    employer = account_service.approve_employer(principal, employer_id)
    await notify(EMPLOYER_APPROVED, {"employer_id": employer_id})
    return employer
