"""
Campus Internship Portal - Main Application

FastAPI backend with:
- Relational store (PostgreSQL in production, SQLite for local runs/tests)
- JWT authentication with per-role accounts
- Policy-table access control for internships and applications
- WebSocket change hints for the single-page frontend

Run: uvicorn internship_portal.main:app --reload
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from internship_portal import __version__
from internship_portal.api.routes import api_router
from internship_portal.core.config import Settings, get_settings
from internship_portal.core.errors import InvalidToken, PortalError, StoreUnavailable, ValidationFailed
from internship_portal.core.log_config import configure_logging
from internship_portal.db.database import init_schema, test_store_connection

settings = get_settings()
configure_logging()
logger = structlog.get_logger(__name__)


def check_startup_settings(settings: Settings) -> None:
    """Refuse to start without a token signing secret."""
    if not settings.jwt_secret_key:
        raise RuntimeError("JWT_SECRET_KEY is not set; refusing to start")


@asynccontextmanager
async def lifespan(app: FastAPI):
    check_startup_settings(settings)
    init_schema()
    logger.info("startup_complete", version=__version__)
    yield


# Create FastAPI app
app = FastAPI(
    title="Campus Internship Portal",
    description="""
    Internship portal for students, employers and campus admins.

    ## Features
    - **Accounts**: signup/login per role, employer approval by admins
    - **Internships**: employers post, admins review, students browse active postings
    - **Applications**: one application per student per internship, reviewed by the posting employer
    - **Dashboards**: per-role counters
    - **Realtime**: `/ws` change hints for the frontend
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(api_router)


# ============================================================
# ERROR MAPPING
# ============================================================

@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    body = {"kind": exc.kind, "detail": exc.message}
    headers = None
    if isinstance(exc, ValidationFailed):
        body["errors"] = exc.errors
    if isinstance(exc, InvalidToken):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content=body, headers=headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(p) for p in err["loc"] if p != "body") or "body", "message": err["msg"]}
        for err in exc.errors()
    ]
    return await portal_error_handler(request, ValidationFailed(errors))


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("store_error", path=request.url.path, method=request.method, exc_info=exc)
    return await portal_error_handler(request, StoreUnavailable())


@app.get("/", tags=["Health"])
async def root():
    """Basic health check."""
    return {"status": "healthy", "app": "Campus Internship Portal", "version": __version__}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    store_ok = test_store_connection()
    return {
        "status": "healthy" if store_ok else "degraded",
        "store": "connected" if store_ok else "disconnected",
    }
