"""
Application Service - students applying to internships and employers
reviewing them.

The unique (student_id, internship_id) constraint is the only guard that
holds under concurrent submissions. The SELECT beforehand is a shortcut;
a losing concurrent INSERT surfaces as IntegrityError and is reported as
DuplicateApplication like any other duplicate.
"""

from typing import List, Optional

import structlog
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from internship_portal.db.database import get_db_session, execute_raw_sql
from internship_portal.core.auth import Principal
from internship_portal.core.errors import DuplicateApplication, InternshipNotActive, InvalidTransition, NotFound
from internship_portal.core.policy import (
    Action, APPLICATION_SCOPES, APPLICATION_TRANSITIONS, APPLICATION_VISIBILITY,
    authorize, check_transition, ensure_visible,
)
from internship_portal.schemas.schemas import ApplicationStatus, InternshipStatus

logger = structlog.get_logger(__name__)

APPLICATION_SELECT = """
    SELECT a.application_id, a.student_id, s.full_name AS student_name, a.internship_id,
           i.title AS internship_title, i.employer_id, e.company_name, a.status,
           a.cover_letter, a.availability, a.start_date, a.created_at, a.updated_at
    FROM applications a
    JOIN internships i ON a.internship_id = i.internship_id
    JOIN accounts s ON a.student_id = s.account_id
    JOIN accounts e ON i.employer_id = e.account_id
"""


def _fetch(application_id: int) -> Optional[dict]:
    rows = execute_raw_sql(APPLICATION_SELECT + " WHERE a.application_id = :id", {"id": application_id})
    return rows[0] if rows else None


def list_applications(
    principal: Principal,
    internship_id: Optional[int] = None,
    status: Optional[ApplicationStatus] = None,
) -> List[dict]:
    """
    Applications visible to the caller: a student's own, the ones sent to
    an employer's internships, or all of them for admins.
    """
    authorize(principal, Action.list_applications)

    scope, params = APPLICATION_SCOPES[principal.role](principal)
    sql = APPLICATION_SELECT + f" WHERE {scope}"

    if internship_id:
        sql += " AND a.internship_id = :internship_id"
        params["internship_id"] = internship_id
    if status:
        sql += " AND a.status = :status"
        params["status"] = status.value

    sql += " ORDER BY a.created_at DESC, a.application_id DESC"
    return execute_raw_sql(sql, params)


def submit_application(principal: Principal, internship_id: int, fields: dict) -> dict:
    """Apply to an active internship. A student can apply to an internship once."""
    authorize(principal, Action.submit_application)

    internship = execute_raw_sql(
        "SELECT status FROM internships WHERE internship_id = :id", {"id": internship_id}
    )
    if not internship:
        raise NotFound("Internship not found")
    if internship[0]["status"] != InternshipStatus.active.value:
        raise InternshipNotActive()

    existing = execute_raw_sql(
        "SELECT application_id FROM applications WHERE student_id = :sid AND internship_id = :iid",
        {"sid": principal.account_id, "iid": internship_id}
    )
    if existing:
        raise DuplicateApplication()

    # INSERT ... SELECT so an internship closed in the meantime inserts nothing
    try:
        with get_db_session() as db:
            result = db.execute(
                text("""
                    INSERT INTO applications (student_id, internship_id, status, cover_letter,
                        availability, start_date, created_at, updated_at)
                    SELECT :sid, i.internship_id, :status, :cover_letter, :availability, :start_date,
                        CURRENT_TIMESTAMP, CURRENT_TIMESTAMP
                    FROM internships i
                    WHERE i.internship_id = :iid AND i.status = :active
                    RETURNING application_id
                """),
                {
                    "sid": principal.account_id, "iid": internship_id,
                    "status": ApplicationStatus.pending.value,
                    "cover_letter": fields.get("cover_letter"),
                    "availability": fields.get("availability"),
                    "start_date": fields.get("start_date"),
                    "active": InternshipStatus.active.value,
                }
            )
            row = result.fetchone()
    except IntegrityError:
        logger.info("duplicate_application_rejected", student_id=principal.account_id, internship_id=internship_id)
        raise DuplicateApplication()

    if row is None:
        raise InternshipNotActive()

    logger.info("application_submitted", application_id=row[0], student_id=principal.account_id,
                internship_id=internship_id)
    return _fetch(row[0])


def update_application_status(principal: Principal, application_id: int, new_status: ApplicationStatus) -> dict:
    """Review an application. Owning employer of the internship, or an admin."""
    authorize(principal, Action.update_application_status)
    application = ensure_visible(APPLICATION_VISIBILITY, principal, _fetch(application_id))
    authorize(principal, Action.update_application_status, application)

    current = ApplicationStatus(application["status"])
    check_transition(APPLICATION_TRANSITIONS, current, new_status)

    with get_db_session() as db:
        result = db.execute(
            text("""
                UPDATE applications SET status = :new, updated_at = CURRENT_TIMESTAMP
                WHERE application_id = :id AND status = :current
            """),
            {"id": application_id, "new": new_status.value, "current": current.value}
        )
        if result.rowcount == 0:
            raise InvalidTransition("Application status changed, reload and retry")

    logger.info("application_status_changed", application_id=application_id,
                from_status=current.value, to_status=new_status.value, by=principal.account_id)
    return _fetch(application_id)
