"""
Internship Service - postings and their review/close lifecycle.

Who sees and changes what is decided by core.policy; this module only
runs the queries.
"""

from typing import List, Optional, Tuple

import structlog
from sqlalchemy import text

from internship_portal.db.database import get_db_session, execute_raw_sql
from internship_portal.core.auth import Principal
from internship_portal.core.errors import InvalidTransition
from internship_portal.core.policy import (
    Action, INTERNSHIP_SCOPES, INTERNSHIP_TRANSITIONS, INTERNSHIP_VISIBILITY,
    authorize, check_transition, ensure_visible,
)
from internship_portal.schemas.schemas import InternshipStatus

logger = structlog.get_logger(__name__)

EDITABLE_FIELDS = ("title", "description", "requirements", "location", "stipend", "duration")

INTERNSHIP_SELECT = """
    SELECT i.internship_id, i.employer_id, e.company_name, i.title, i.description,
           i.requirements, i.location, i.stipend, i.duration, i.status,
           i.created_at, i.updated_at
    FROM internships i
    JOIN accounts e ON i.employer_id = e.account_id
"""


def _fetch(internship_id: int) -> Optional[dict]:
    rows = execute_raw_sql(INTERNSHIP_SELECT + " WHERE i.internship_id = :id", {"id": internship_id})
    return rows[0] if rows else None


def list_internships(
    principal: Principal,
    status: Optional[InternshipStatus] = None,
    search: Optional[str] = None,
    all_active: bool = False,
    page: int = 1,
    page_size: int = 20,
) -> Tuple[List[dict], int]:
    """
    Internships visible to the caller.

    Students only ever get active postings. Employers get their own
    postings, or every active posting with all_active=True. Admins get
    everything.
    """
    authorize(principal, Action.list_internships)

    scope, params = INTERNSHIP_SCOPES[principal.role](principal, all_active)
    where = f" WHERE {scope}"

    if status:
        where += " AND i.status = :status"
        params["status"] = status.value
    if search:
        where += " AND LOWER(i.title) LIKE :search"
        params["search"] = f"%{search.lower()}%"

    total = execute_raw_sql(
        "SELECT COUNT(*) AS total FROM internships i" + where, params
    )[0]["total"]

    params.update({"limit": page_size, "offset": (page - 1) * page_size})
    rows = execute_raw_sql(
        INTERNSHIP_SELECT + where
        + " ORDER BY i.created_at DESC, i.internship_id DESC LIMIT :limit OFFSET :offset",
        params
    )
    return rows, total


def get_internship(principal: Principal, internship_id: int) -> dict:
    authorize(principal, Action.view_internship)
    return ensure_visible(INTERNSHIP_VISIBILITY, principal, _fetch(internship_id))


def create_internship(principal: Principal, fields: dict) -> dict:
    """Post a new internship. Always starts in pending_review."""
    authorize(principal, Action.create_internship)

    values = {k: fields.get(k) for k in EDITABLE_FIELDS}
    with get_db_session() as db:
        result = db.execute(
            text("""
                INSERT INTO internships (employer_id, title, description, requirements, location,
                    stipend, duration, status, created_at, updated_at)
                VALUES (:employer_id, :title, :description, :requirements, :location,
                    :stipend, :duration, :status, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)
                RETURNING internship_id
            """),
            {"employer_id": principal.account_id, "status": InternshipStatus.pending_review.value, **values}
        )
        internship_id = result.fetchone()[0]

    logger.info("internship_created", internship_id=internship_id, employer_id=principal.account_id)
    return _fetch(internship_id)


def update_internship(
    principal: Principal,
    internship_id: int,
    changes: dict,
    new_status: Optional[InternshipStatus] = None,
) -> dict:
    """
    Edit posting details and/or move the posting to a new status.

    Every check runs before anything is written, and both statements share
    one transaction: a refused status change leaves the details untouched.
    Edits are owner only, and only before the posting is closed or rejected.
    """
    if changes:
        authorize(principal, Action.edit_internship)
    if new_status is not None:
        authorize(principal, Action.transition_internship)

    internship = get_internship(principal, internship_id)
    current = InternshipStatus(internship["status"])

    if changes:
        authorize(principal, Action.edit_internship, internship)
        if not INTERNSHIP_TRANSITIONS[current]:
            raise InvalidTransition(f"Cannot edit a {current.value} internship")
    if new_status is not None:
        authorize(principal, Action.transition_internship, internship, new_status=new_status)
        check_transition(INTERNSHIP_TRANSITIONS, current, new_status)

    changes = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS and v is not None}
    if not changes and new_status is None:
        return internship

    updates = [f"{field} = :{field}" for field in changes]
    params = {"id": internship_id, "current": current.value, **changes}
    if new_status is not None:
        updates.append("status = :new")
        params["new"] = new_status.value

    with get_db_session() as db:
        result = db.execute(
            text(f"""
                UPDATE internships SET {', '.join(updates)}, updated_at = CURRENT_TIMESTAMP
                WHERE internship_id = :id AND status = :current
            """),
            params
        )
        # Conditional on the status that was read, so a concurrent change is
        # never overwritten with an older state.
        if result.rowcount == 0:
            raise InvalidTransition("Internship status changed, reload and retry")

    if changes:
        logger.info("internship_updated", internship_id=internship_id, fields=sorted(changes))
    if new_status is not None:
        logger.info(
            "internship_status_changed", internship_id=internship_id,
            from_status=current.value, to_status=new_status.value, by=principal.account_id
        )
    return _fetch(internship_id)


def transition_internship_status(principal: Principal, internship_id: int, new_status: InternshipStatus) -> dict:
    """
    Move an internship along pending_review -> active -> closed (or
    pending_review -> rejected).

    Employers may only close their own postings; admins may only approve
    or reject.
    """
    return update_internship(principal, internship_id, {}, new_status=new_status)
