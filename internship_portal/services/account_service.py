"""
Account Service - signup, login and profile management.

The (role, email) unique constraint in the accounts table is the authority
for duplicate detection; the SELECT before the INSERT only saves a bcrypt
round for the common case.
"""

from typing import List, Optional

import structlog
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from internship_portal.db.database import get_db_session, execute_raw_sql
from internship_portal.core.auth import Principal, hash_password, verify_password, create_access_token
from internship_portal.core.errors import DuplicateEmail, InvalidCredentials, NotApproved, NotFound, ValidationFailed
from internship_portal.core.policy import Action, authorize
from internship_portal.schemas.schemas import Role, TokenResponse

logger = structlog.get_logger(__name__)

ACCOUNT_COLUMNS = """
    account_id, role, email, approved, full_name, phone, department, year_of_study,
    roll_number, cgpa, company_name, contact_name, industry, website, location,
    description, created_at
"""

# Profile columns each role may set at signup or edit afterwards
PROFILE_FIELDS = {
    Role.student: ("full_name", "phone", "department", "year_of_study", "roll_number", "cgpa"),
    Role.employer: ("company_name", "contact_name", "phone", "industry", "website", "location", "description"),
    Role.admin: ("full_name", "phone"),
    Role.super_admin: ("full_name", "phone"),
}


def register_account(role: Role, profile: dict, raw_password: str) -> dict:
    """
    Create an account and return it (without the password hash).

    Employers start unapproved; every other role is approved on creation.
    """
    email = profile["email"].lower()
    fields = {k: v for k, v in profile.items() if k in PROFILE_FIELDS[role] and v is not None}

    existing = execute_raw_sql(
        "SELECT account_id FROM accounts WHERE role = :role AND email = :email",
        {"role": role.value, "email": email}
    )
    if existing:
        raise DuplicateEmail()

    columns = ["role", "email", "password_hash", "approved"] + list(fields)
    params = {
        "role": role.value,
        "email": email,
        "password_hash": hash_password(raw_password),
        "approved": role != Role.employer,
        **fields,
    }
    try:
        with get_db_session() as db:
            result = db.execute(
                text(f"""
                    INSERT INTO accounts ({', '.join(columns)}, created_at, updated_at)
                    VALUES ({', '.join(':' + c for c in columns)}, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)
                    RETURNING account_id
                """),
                params
            )
            account_id = result.fetchone()[0]
    except IntegrityError:
        raise DuplicateEmail()

    logger.info("account_registered", account_id=account_id, role=role.value)
    return get_account(account_id)


def authenticate(role: Role, email: str, raw_password: str) -> TokenResponse:
    """Check credentials for (role, email) and issue a session token."""
    rows = execute_raw_sql(
        "SELECT account_id, password_hash, approved FROM accounts WHERE role = :role AND email = :email",
        {"role": role.value, "email": email.lower()}
    )
    account = rows[0] if rows else None

    if not verify_password(raw_password, account["password_hash"] if account else None):
        logger.info("login_failed", role=role.value)
        raise InvalidCredentials()

    if role == Role.employer and not account["approved"]:
        raise NotApproved()

    token, expires_at = create_access_token(account["account_id"], role)
    logger.info("login_succeeded", account_id=account["account_id"], role=role.value)
    return TokenResponse(access_token=token, account_id=account["account_id"], role=role, expires_at=expires_at)


def get_account(account_id: int) -> dict:
    rows = execute_raw_sql(
        f"SELECT {ACCOUNT_COLUMNS} FROM accounts WHERE account_id = :id",
        {"id": account_id}
    )
    if not rows:
        raise NotFound("Account not found")
    return rows[0]


def update_profile(principal: Principal, changes: dict) -> dict:
    """Update the caller's own profile. Only provided fields are updated."""
    allowed = PROFILE_FIELDS[principal.role]
    changes = {k: v for k, v in changes.items() if v is not None}

    rejected = [k for k in changes if k not in allowed]
    if rejected:
        raise ValidationFailed(
            [{"field": k, "message": f"not editable for {principal.role.value} accounts"} for k in rejected]
        )
    if not changes:
        raise ValidationFailed([{"field": "body", "message": "No fields to update"}])

    updates = [f"{field} = :{field}" for field in changes]
    with get_db_session() as db:
        result = db.execute(
            text(f"UPDATE accounts SET {', '.join(updates)}, updated_at = CURRENT_TIMESTAMP WHERE account_id = :id"),
            {"id": principal.account_id, **changes}
        )
        if result.rowcount == 0:
            raise NotFound("Account not found")

    return get_account(principal.account_id)


def approve_employer(principal: Principal, employer_id: int) -> dict:
    """Mark an employer account as approved. Approving twice is harmless."""
    authorize(principal, Action.approve_employer)

    with get_db_session() as db:
        result = db.execute(
            text("""
                UPDATE accounts SET approved = :approved, updated_at = CURRENT_TIMESTAMP
                WHERE account_id = :id AND role = :role
            """),
            {"approved": True, "id": employer_id, "role": Role.employer.value}
        )
        if result.rowcount == 0:
            raise NotFound("Employer not found")

    logger.info("employer_approved", employer_id=employer_id, approved_by=principal.account_id)
    return get_account(employer_id)


def list_accounts(principal: Principal, role: Optional[Role] = None, approved: Optional[bool] = None) -> List[dict]:
    """Admin listing of accounts, optionally by role and approval state."""
    authorize(principal, Action.list_accounts)

    sql = f"SELECT {ACCOUNT_COLUMNS} FROM accounts WHERE 1 = 1"
    params = {}
    if role:
        sql += " AND role = :role"
        params["role"] = role.value
    if approved is not None:
        sql += " AND approved = :approved"
        params["approved"] = approved

    sql += " ORDER BY created_at DESC, account_id DESC"
    return execute_raw_sql(sql, params)
