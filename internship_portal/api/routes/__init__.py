"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from internship_portal.api.routes.account_routes import router as account_router
from internship_portal.api.routes.internship_routes import router as internship_router
from internship_portal.api.routes.application_routes import router as application_router
from internship_portal.api.routes.admin_routes import router as admin_router
from internship_portal.api.routes.dashboard_routes import router as dashboard_router
from internship_portal.api.routes.realtime_routes import router as realtime_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(account_router)
api_router.include_router(internship_router)
api_router.include_router(application_router)
api_router.include_router(admin_router)
api_router.include_router(dashboard_router)
api_router.include_router(realtime_router)
