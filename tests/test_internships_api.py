import pytest


def test_new_internship_always_starts_pending(client, employer):
    _, headers = employer

    resp = client.post("/internships", json={"title": "Data Intern", "status": "active"}, headers=headers)

    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "pending_review"
    assert body["company_name"] == "Hr"
    assert body["employer_id"] == employer[0].account_id


def test_only_employers_post_internships(client, student, admin):
    for _, headers in (student, admin):
        resp = client.post("/internships", json={"title": "Data Intern"}, headers=headers)
        assert resp.status_code == 403
        assert resp.json()["kind"] == "Forbidden"


def test_student_only_sees_active_internships(client, student, employer, admin, post_internship):
    _, emp = employer
    _, adm = admin
    post_internship(emp, "Pending One")
    active = post_internship(emp, "Active One", adm, "active")
    post_internship(emp, "Rejected One", adm, "rejected")
    closed = post_internship(emp, "Closed One", adm, "active")
    client.put(f"/internships/{closed['internship_id']}", json={"status": "closed"}, headers=emp)

    resp = client.get("/internships", headers=student[1])

    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 1
    assert [i["internship_id"] for i in body["internships"]] == [active["internship_id"]]

    # Even asking for another status explicitly returns nothing
    resp = client.get("/internships", params={"status": "pending_review"}, headers=student[1])
    assert resp.json()["internships"] == []


def test_student_cannot_open_pending_internship(client, student, employer, post_internship):
    pending = post_internship(employer[1])

    resp = client.get(f"/internships/{pending['internship_id']}", headers=student[1])

    assert resp.status_code == 404
    assert resp.json()["kind"] == "NotFound"


def test_employer_sees_own_internships_or_all_active(client, employer, other_employer, admin, post_internship):
    _, emp = employer
    _, other = other_employer
    _, adm = admin
    own_pending = post_internship(emp, "Mine Pending")
    theirs_pending = post_internship(other, "Theirs Pending")
    theirs_active = post_internship(other, "Theirs Active", adm, "active")

    own = client.get("/internships", headers=emp).json()
    assert [i["internship_id"] for i in own["internships"]] == [own_pending["internship_id"]]

    everything_active = client.get("/internships", params={"all_active": "true"}, headers=emp).json()
    assert [i["internship_id"] for i in everything_active["internships"]] == [theirs_active["internship_id"]]

    resp = client.get(f"/internships/{theirs_pending['internship_id']}", headers=emp)
    assert resp.status_code == 404


def test_admin_sees_everything_and_filters_by_status(client, employer, admin, post_internship):
    _, emp = employer
    _, adm = admin
    post_internship(emp, "One")
    post_internship(emp, "Two", adm, "active")

    assert client.get("/internships", headers=adm).json()["total"] == 2
    pending = client.get("/internships", params={"status": "pending_review"}, headers=adm).json()
    assert [i["title"] for i in pending["internships"]] == ["One"]


def test_search_and_pagination(client, employer, post_internship):
    _, emp = employer
    for n in range(5):
        post_internship(emp, f"Backend Intern {n}")
    post_internship(emp, "Design Intern")

    page = client.get("/internships", params={"search": "backend", "page": 2, "page_size": 2}, headers=emp).json()

    assert page["total"] == 5
    assert page["page"] == 2
    assert len(page["internships"]) == 2
    assert all("Backend" in i["title"] for i in page["internships"])


def test_review_lifecycle(client, employer, admin, post_internship):
    _, emp = employer
    _, adm = admin
    internship = post_internship(emp)
    url = f"/internships/{internship['internship_id']}"

    resp = client.put(url, json={"status": "active"}, headers=adm)
    assert resp.status_code == 200
    assert resp.json()["status"] == "active"

    resp = client.put(url, json={"status": "closed"}, headers=emp)
    assert resp.status_code == 200
    assert resp.json()["status"] == "closed"


def test_employer_cannot_approve_own_internship(client, employer, post_internship):
    _, emp = employer
    internship = post_internship(emp)

    resp = client.put(f"/internships/{internship['internship_id']}", json={"status": "active"}, headers=emp)

    assert resp.status_code == 403
    assert resp.json()["kind"] == "Forbidden"


def test_admin_cannot_close_internship(client, employer, admin, post_internship):
    internship = post_internship(employer[1], admin_headers=admin[1], status="active")

    resp = client.put(f"/internships/{internship['internship_id']}", json={"status": "closed"}, headers=admin[1])

    assert resp.status_code == 403


def test_other_employer_cannot_touch_pending_internship(client, employer, other_employer, post_internship):
    internship = post_internship(employer[1])
    url = f"/internships/{internship['internship_id']}"

    for payload in ({"status": "closed"}, {"title": "Hijacked"}):
        resp = client.put(url, json=payload, headers=other_employer[1])
        assert resp.status_code == 404
        assert resp.json()["kind"] == "NotFound"


def test_other_employer_cannot_close_active_internship(client, employer, other_employer, admin, post_internship):
    internship = post_internship(employer[1], admin_headers=admin[1], status="active")

    resp = client.put(f"/internships/{internship['internship_id']}", json={"status": "closed"},
                      headers=other_employer[1])

    assert resp.status_code == 403


@pytest.mark.parametrize("path, target", [
    (["active"], "pending_review"),
    (["active"], "rejected"),
    (["active"], "active"),
    (["rejected"], "active"),
    (["active", "closed"], "active"),
])
def test_status_never_moves_backward(client, employer, admin, post_internship, path, target):
    _, emp = employer
    _, adm = admin
    internship = post_internship(emp)
    url = f"/internships/{internship['internship_id']}"
    for status in path:
        headers = emp if status == "closed" else adm
        assert client.put(url, json={"status": status}, headers=headers).status_code == 200

    resp = client.put(url, json={"status": target}, headers=adm)

    assert resp.status_code in (403, 409)
    if target in ("active", "rejected"):
        assert resp.json()["kind"] == "InvalidTransition"
    assert client.get(url, headers=adm).json()["status"] == path[-1]


def test_student_cannot_change_status(client, student, employer, admin, post_internship):
    internship = post_internship(employer[1], admin_headers=admin[1], status="active")

    resp = client.put(f"/internships/{internship['internship_id']}", json={"status": "closed"}, headers=student[1])

    assert resp.status_code == 403


def test_owner_edits_details_until_closed(client, employer, admin, post_internship):
    _, emp = employer
    internship = post_internship(emp)
    url = f"/internships/{internship['internship_id']}"

    resp = client.put(url, json={"title": "Senior Backend Intern", "stipend": "20000/month"}, headers=emp)
    assert resp.status_code == 200
    assert resp.json()["title"] == "Senior Backend Intern"
    assert resp.json()["stipend"] == "20000/month"
    assert resp.json()["status"] == "pending_review"

    client.put(url, json={"status": "closed"}, headers=emp)
    resp = client.put(url, json={"title": "Too Late"}, headers=emp)
    assert resp.status_code == 409
    assert resp.json()["kind"] == "InvalidTransition"


def test_admin_cannot_edit_details(client, employer, admin, post_internship):
    internship = post_internship(employer[1])

    resp = client.put(f"/internships/{internship['internship_id']}", json={"title": "Admin Title"}, headers=admin[1])

    assert resp.status_code == 403


def test_missing_internship_is_not_found(client, admin):
    assert client.get("/internships/999", headers=admin[1]).status_code == 404
    assert client.put("/internships/999", json={"status": "active"}, headers=admin[1]).status_code == 404


def test_refused_status_change_leaves_details_untouched(client, employer, post_internship):
    _, emp = employer
    internship = post_internship(emp)
    url = f"/internships/{internship['internship_id']}"

    resp = client.put(url, json={"title": "Changed Title", "status": "active"}, headers=emp)
    assert resp.status_code == 403

    resp = client.get(url, headers=emp)
    assert resp.json()["title"] == "Backend Intern"
    assert resp.json()["status"] == "pending_review"


def test_edit_and_close_in_one_request(client, employer, post_internship):
    _, emp = employer
    internship = post_internship(emp)

    resp = client.put(f"/internships/{internship['internship_id']}",
                      json={"title": "Filled", "status": "closed"}, headers=emp)

    assert resp.status_code == 200
    assert resp.json()["title"] == "Filled"
    assert resp.json()["status"] == "closed"
