"""
Dashboard Service - per-role counters for the portal dashboards.

Counts go through the same scopes as the list endpoints, so a dashboard
never counts rows its owner could not list.
"""

from typing import Dict

from internship_portal.db.database import execute_raw_sql
from internship_portal.core.auth import Principal
from internship_portal.core.policy import Action, APPLICATION_SCOPES, INTERNSHIP_SCOPES, authorize
from internship_portal.schemas.schemas import ADMIN_ROLES, Role


def _counts(sql: str, params: dict) -> Dict[str, int]:
    return {r["status"]: r["total"] for r in execute_raw_sql(sql, params)}


def dashboard_summary(principal: Principal) -> dict:
    authorize(principal, Action.view_dashboard)
    summary = {"role": principal.role}

    if principal.role != Role.student:
        scope, params = INTERNSHIP_SCOPES[principal.role](principal, False)
        summary["internships_by_status"] = _counts(
            f"SELECT i.status, COUNT(*) AS total FROM internships i WHERE {scope} GROUP BY i.status",
            params
        )

    scope, params = APPLICATION_SCOPES[principal.role](principal)
    summary["applications_by_status"] = _counts(
        f"""
            SELECT a.status, COUNT(*) AS total
            FROM applications a JOIN internships i ON a.internship_id = i.internship_id
            WHERE {scope} GROUP BY a.status
        """,
        params
    )

    if principal.role in ADMIN_ROLES:
        rows = execute_raw_sql(
            """
                SELECT
                    SUM(CASE WHEN role = :employer AND approved = :no THEN 1 ELSE 0 END) AS pending_employers,
                    SUM(CASE WHEN role = :student THEN 1 ELSE 0 END) AS total_students,
                    SUM(CASE WHEN role = :employer THEN 1 ELSE 0 END) AS total_employers
                FROM accounts
            """,
            {"employer": Role.employer.value, "student": Role.student.value, "no": False}
        )
        summary.update({k: int(v or 0) for k, v in rows[0].items()})

    return summary
