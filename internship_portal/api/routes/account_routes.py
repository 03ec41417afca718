"""
Account Routes

POST /accounts/{role}/signup - Register a student/employer (admin: super admin only)
POST /accounts/{role}/login - Login and get JWT token
GET /accounts/me - Get own profile
PUT /accounts/me - Update own profile
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from internship_portal.core.auth import Principal, bearer_scheme, get_current_principal, validate_token
from internship_portal.core.policy import SELF_SIGNUP_ROLES, authorize_signup
from internship_portal.services import account_service
from internship_portal.schemas.schemas import (
    SIGNUP_SCHEMAS, Role, LoginRequest, TokenResponse, SignupResponse, ProfileUpdate, AccountResponse
)

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post("/{role}/signup", response_model=SignupResponse, status_code=201)
async def signup(
    role: Role,
    payload: Dict[str, Any] = Body(...),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
):
    """
    Register a new account for the given role.

    The body depends on the role: students send full_name, employers send
    company_name and contact_name. Employers must be approved by an admin
    before they can log in. A token is only looked at for admin signup.
    """
    principal = None
    if credentials is not None and role not in SELF_SIGNUP_ROLES:
        principal = validate_token(credentials.credentials)
    authorize_signup(principal, role)

    try:
        data = SIGNUP_SCHEMAS[role].model_validate(payload)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors())

    account = account_service.register_account(role, data.model_dump(), data.password)

    message = "Account created. Please login."
    if not account["approved"]:
        message = "Account created. An admin must approve it before you can login."
    return SignupResponse(
        account_id=account["account_id"], role=role, approved=account["approved"], message=message
    )


@router.post("/{role}/login", response_model=TokenResponse)
async def login(role: Role, request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    return account_service.authenticate(role, request.email, request.password)


@router.get("/me", response_model=AccountResponse)
async def get_me(principal: Principal = Depends(get_current_principal)):
    """Get current authenticated account's profile."""
    return account_service.get_account(principal.account_id)


@router.put("/me", response_model=AccountResponse)
async def update_me(data: ProfileUpdate, principal: Principal = Depends(get_current_principal)):
    """Update own profile. Only provided fields are updated."""
    return account_service.update_profile(principal, data.model_dump(exclude_unset=True))
