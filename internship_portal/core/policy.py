"""
Access-control policy.

Three tables drive every authorization decision:

- POLICY: (role, action) -> predicate(principal, resource, context).
  A missing entry means the role may never perform the action.
- VISIBILITY: which single rows a role may see. Rows that fail this
  check are reported as NotFound, so tenants never learn about each
  other's resources.
- *_SCOPES: the same visibility rules as SQL filters for list queries.

Status state machines for internships and applications live here too.
"""

from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from internship_portal.core.auth import Principal
from internship_portal.core.errors import Forbidden, InvalidTransition, NotFound
from internship_portal.schemas.schemas import (
    ADMIN_ROLES, ApplicationStatus, InternshipStatus, Role,
)


class Action(str, Enum):
    list_internships = "list_internships"
    view_internship = "view_internship"
    create_internship = "create_internship"
    edit_internship = "edit_internship"
    transition_internship = "transition_internship"
    list_applications = "list_applications"
    submit_application = "submit_application"
    update_application_status = "update_application_status"
    approve_employer = "approve_employer"
    list_accounts = "list_accounts"
    view_dashboard = "view_dashboard"


Rule = Callable[[Principal, Optional[dict], Dict[str, Any]], bool]


def _always(principal: Principal, resource: Optional[dict], context: Dict[str, Any]) -> bool:
    return True


def _owns_internship(principal, internship, context) -> bool:
    return internship is not None and internship["employer_id"] == principal.account_id


def _owner_closing(principal, internship, context) -> bool:
    return _owns_internship(principal, internship, context) and \
        context.get("new_status") == InternshipStatus.closed


def _admin_review(principal, internship, context) -> bool:
    return context.get("new_status") in (InternshipStatus.active, InternshipStatus.rejected)


def _owns_applied_internship(principal, application, context) -> bool:
    return application is not None and application["employer_id"] == principal.account_id


POLICY: Dict[Tuple[Role, Action], Rule] = {
    (Role.student, Action.list_internships): _always,
    (Role.student, Action.view_internship): _always,
    (Role.student, Action.list_applications): _always,
    (Role.student, Action.submit_application): _always,
    (Role.student, Action.view_dashboard): _always,

    (Role.employer, Action.list_internships): _always,
    (Role.employer, Action.view_internship): _always,
    (Role.employer, Action.create_internship): _always,
    (Role.employer, Action.edit_internship): _owns_internship,
    (Role.employer, Action.transition_internship): _owner_closing,
    (Role.employer, Action.list_applications): _always,
    (Role.employer, Action.update_application_status): _owns_applied_internship,
    (Role.employer, Action.view_dashboard): _always,
}

for _role in ADMIN_ROLES:
    POLICY.update({
        (_role, Action.list_internships): _always,
        (_role, Action.view_internship): _always,
        (_role, Action.transition_internship): _admin_review,
        (_role, Action.list_applications): _always,
        (_role, Action.update_application_status): _always,
        (_role, Action.approve_employer): _always,
        (_role, Action.list_accounts): _always,
        (_role, Action.view_dashboard): _always,
    })


def authorize(principal: Principal, action: Action, resource: Optional[dict] = None, **context) -> None:
    """
    Raise Forbidden unless the principal may perform `action`.

    Called without a resource it only checks that the role has an entry
    for the action at all, which lets handlers reject a role before
    touching the store.
    """
    rule = POLICY.get((principal.role, action))
    if rule is None:
        raise Forbidden()
    if resource is not None and not rule(principal, resource, context):
        raise Forbidden()


# ============================================================
# ROW VISIBILITY
# ============================================================

INTERNSHIP_VISIBILITY: Dict[Role, Rule] = {
    Role.student: lambda p, i, ctx: i["status"] == InternshipStatus.active.value,
    Role.employer: lambda p, i, ctx: i["employer_id"] == p.account_id
    or i["status"] == InternshipStatus.active.value,
    Role.admin: _always,
    Role.super_admin: _always,
}

APPLICATION_VISIBILITY: Dict[Role, Rule] = {
    Role.student: lambda p, a, ctx: a["student_id"] == p.account_id,
    Role.employer: lambda p, a, ctx: a["employer_id"] == p.account_id,
    Role.admin: _always,
    Role.super_admin: _always,
}


def ensure_visible(table: Dict[Role, Rule], principal: Principal, resource: Optional[dict]) -> dict:
    """Return the row, or raise NotFound if it is absent or hidden from this role."""
    if resource is None or not table[principal.role](principal, resource, {}):
        raise NotFound()
    return resource


# SQL filters over `internships i` / `applications a JOIN internships i`.
# Each returns (clause, params); params are always bound, never inlined.

def _employer_internship_scope(principal: Principal, all_active: bool) -> Tuple[str, dict]:
    if all_active:
        return "i.status = :scope_status", {"scope_status": InternshipStatus.active.value}
    return "i.employer_id = :scope_account", {"scope_account": principal.account_id}


INTERNSHIP_SCOPES: Dict[Role, Callable[[Principal, bool], Tuple[str, dict]]] = {
    Role.student: lambda p, all_active: ("i.status = :scope_status", {"scope_status": InternshipStatus.active.value}),
    Role.employer: _employer_internship_scope,
    Role.admin: lambda p, all_active: ("1 = 1", {}),
    Role.super_admin: lambda p, all_active: ("1 = 1", {}),
}

APPLICATION_SCOPES: Dict[Role, Callable[[Principal], Tuple[str, dict]]] = {
    Role.student: lambda p: ("a.student_id = :scope_account", {"scope_account": p.account_id}),
    Role.employer: lambda p: ("i.employer_id = :scope_account", {"scope_account": p.account_id}),
    Role.admin: lambda p: ("1 = 1", {}),
    Role.super_admin: lambda p: ("1 = 1", {}),
}


# ============================================================
# SIGNUP
# ============================================================

SELF_SIGNUP_ROLES = frozenset({Role.student, Role.employer})


def authorize_signup(principal: Optional[Principal], role: Role) -> None:
    """
    Students and employers sign up on their own. Admins are created by a
    super admin; super admins only through scripts/create_super_admin.py.
    """
    if role in SELF_SIGNUP_ROLES:
        return
    if role == Role.admin and principal is not None and principal.role == Role.super_admin:
        return
    raise Forbidden()


# ============================================================
# STATUS STATE MACHINES (forward only)
# ============================================================

INTERNSHIP_TRANSITIONS = {
    InternshipStatus.pending_review: {InternshipStatus.active, InternshipStatus.rejected, InternshipStatus.closed},
    InternshipStatus.active: {InternshipStatus.closed},
    InternshipStatus.closed: set(),
    InternshipStatus.rejected: set(),
}

APPLICATION_TRANSITIONS = {
    ApplicationStatus.pending: {ApplicationStatus.reviewed, ApplicationStatus.shortlisted, ApplicationStatus.rejected},
    ApplicationStatus.reviewed: {ApplicationStatus.shortlisted, ApplicationStatus.rejected},
    ApplicationStatus.shortlisted: {ApplicationStatus.rejected},
    ApplicationStatus.rejected: set(),
}


def check_transition(transitions: dict, current, new) -> None:
    if new not in transitions[current]:
        raise InvalidTransition(f"Cannot move from '{current.value}' to '{new.value}'")
