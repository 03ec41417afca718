import itertools

import pytest

from internship_portal.core.auth import Principal
from internship_portal.core.errors import Forbidden, InvalidTransition, NotFound
from internship_portal.core.policy import (
    Action, APPLICATION_TRANSITIONS, INTERNSHIP_TRANSITIONS, INTERNSHIP_VISIBILITY,
    authorize, authorize_signup, check_transition, ensure_visible,
)
from internship_portal.schemas.schemas import ApplicationStatus, InternshipStatus, Role

STUDENT = Principal(1, Role.student)
EMPLOYER = Principal(2, Role.employer)
OTHER_EMPLOYER = Principal(3, Role.employer)
ADMIN = Principal(4, Role.admin)
SUPER_ADMIN = Principal(5, Role.super_admin)


def internship(status="pending_review", employer_id=2):
    return {"internship_id": 10, "employer_id": employer_id, "status": status}


@pytest.mark.parametrize("principal", [STUDENT, ADMIN, SUPER_ADMIN])
def test_only_employers_create_internships(principal):
    with pytest.raises(Forbidden):
        authorize(principal, Action.create_internship)
    authorize(EMPLOYER, Action.create_internship)


def test_employer_may_only_close_own_internship():
    authorize(EMPLOYER, Action.transition_internship, internship(), new_status=InternshipStatus.closed)

    for new_status in (InternshipStatus.active, InternshipStatus.rejected):
        with pytest.raises(Forbidden):
            authorize(EMPLOYER, Action.transition_internship, internship(), new_status=new_status)
    with pytest.raises(Forbidden):
        authorize(OTHER_EMPLOYER, Action.transition_internship, internship(), new_status=InternshipStatus.closed)


@pytest.mark.parametrize("principal", [ADMIN, SUPER_ADMIN])
def test_admins_only_approve_or_reject(principal):
    for new_status in (InternshipStatus.active, InternshipStatus.rejected):
        authorize(principal, Action.transition_internship, internship(), new_status=new_status)
    for new_status in (InternshipStatus.closed, InternshipStatus.pending_review):
        with pytest.raises(Forbidden):
            authorize(principal, Action.transition_internship, internship(), new_status=new_status)


def test_students_never_transition_or_review():
    with pytest.raises(Forbidden):
        authorize(STUDENT, Action.transition_internship)
    with pytest.raises(Forbidden):
        authorize(STUDENT, Action.update_application_status)
    with pytest.raises(Forbidden):
        authorize(STUDENT, Action.approve_employer)


def test_visibility_hides_other_tenants_pending_rows():
    assert ensure_visible(INTERNSHIP_VISIBILITY, EMPLOYER, internship())
    assert ensure_visible(INTERNSHIP_VISIBILITY, OTHER_EMPLOYER, internship("active"))
    assert ensure_visible(INTERNSHIP_VISIBILITY, ADMIN, internship("rejected"))

    with pytest.raises(NotFound):
        ensure_visible(INTERNSHIP_VISIBILITY, OTHER_EMPLOYER, internship())
    with pytest.raises(NotFound):
        ensure_visible(INTERNSHIP_VISIBILITY, STUDENT, internship())
    with pytest.raises(NotFound):
        ensure_visible(INTERNSHIP_VISIBILITY, ADMIN, None)


def test_signup_rules():
    authorize_signup(None, Role.student)
    authorize_signup(None, Role.employer)
    authorize_signup(SUPER_ADMIN, Role.admin)

    for principal, role in [(None, Role.admin), (ADMIN, Role.admin), (None, Role.super_admin),
                            (SUPER_ADMIN, Role.super_admin)]:
        with pytest.raises(Forbidden):
            authorize_signup(principal, role)


INTERNSHIP_RANK = {
    InternshipStatus.pending_review: 0,
    InternshipStatus.active: 1,
    InternshipStatus.closed: 2,
    InternshipStatus.rejected: 2,
}
APPLICATION_RANK = {
    ApplicationStatus.pending: 0,
    ApplicationStatus.reviewed: 1,
    ApplicationStatus.shortlisted: 2,
    ApplicationStatus.rejected: 3,
}


@pytest.mark.parametrize("transitions, rank", [
    (INTERNSHIP_TRANSITIONS, INTERNSHIP_RANK),
    (APPLICATION_TRANSITIONS, APPLICATION_RANK),
])
def test_state_machines_only_move_forward(transitions, rank):
    for current, new in itertools.product(rank, repeat=2):
        if rank[new] <= rank[current]:
            with pytest.raises(InvalidTransition):
                check_transition(transitions, current, new)


def test_rejected_internship_cannot_be_closed():
    with pytest.raises(InvalidTransition):
        check_transition(INTERNSHIP_TRANSITIONS, InternshipStatus.rejected, InternshipStatus.closed)
    check_transition(INTERNSHIP_TRANSITIONS, InternshipStatus.pending_review, InternshipStatus.closed)
