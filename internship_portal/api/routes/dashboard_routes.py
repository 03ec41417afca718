"""
Dashboard Routes

GET /dashboard - Counters for the caller's role dashboard
"""

from fastapi import APIRouter, Depends

from internship_portal.core.auth import Principal, get_current_principal
from internship_portal.services.dashboard_service import dashboard_summary
from internship_portal.schemas.schemas import DashboardResponse

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard(principal: Principal = Depends(get_current_principal)):
    return dashboard_summary(principal)
