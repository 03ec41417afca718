"""
Shared fixtures. The app is pointed at a throwaway SQLite file before any
internship_portal module is imported, since settings are read at import.
"""

import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="portal-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'portal.db')}"
os.environ["JWT_SECRET_KEY"] = "test-signing-secret"
os.environ["BCRYPT_ROUNDS"] = "10"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from internship_portal.main import app
from internship_portal.core.auth import Principal
from internship_portal.db.database import Base, engine, get_db_session, init_schema
from internship_portal.schemas.schemas import Role
from internship_portal.services.account_service import register_account

PASSWORD = "Password1"


@pytest.fixture(autouse=True)
def clean_store():
    init_schema()
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_account():
    """Create an account straight through the service. Employers are approved unless told otherwise."""
    def _make(role: Role, email: str, approved: bool = True, **profile):
        if role == Role.employer:
            profile.setdefault("company_name", email.split("@")[0].title())
            profile.setdefault("contact_name", "Pat Contact")
        else:
            profile.setdefault("full_name", email.split("@")[0].title())
        account = register_account(role, {"email": email, **profile}, PASSWORD)
        if role == Role.employer and approved:
            with get_db_session() as db:
                db.execute(
                    text("UPDATE accounts SET approved = :yes WHERE account_id = :id"),
                    {"yes": True, "id": account["account_id"]}
                )
        return Principal(account_id=account["account_id"], role=role)
    return _make


@pytest.fixture
def login(client):
    """Return Authorization headers for an existing account."""
    def _login(role: Role, email: str, password: str = PASSWORD) -> dict:
        resp = client.post(f"/accounts/{role.value}/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}
    return _login


@pytest.fixture
def student(make_account, login):
    principal = make_account(Role.student, "alice@x.edu")
    return principal, login(Role.student, "alice@x.edu")


@pytest.fixture
def employer(make_account, login):
    principal = make_account(Role.employer, "hr@acme.com")
    return principal, login(Role.employer, "hr@acme.com")


@pytest.fixture
def other_employer(make_account, login):
    principal = make_account(Role.employer, "jobs@globex.com")
    return principal, login(Role.employer, "jobs@globex.com")


@pytest.fixture
def admin(make_account, login):
    principal = make_account(Role.admin, "dean@x.edu")
    return principal, login(Role.admin, "dean@x.edu")


@pytest.fixture
def post_internship(client):
    """Post an internship as an employer, optionally moving it to a status as admin."""
    def _post(employer_headers: dict, title: str = "Backend Intern", admin_headers: dict = None, status: str = None):
        resp = client.post("/internships", json={"title": title, "description": "Build APIs"}, headers=employer_headers)
        assert resp.status_code == 201, resp.text
        internship = resp.json()
        if status:
            resp = client.put(f"/internships/{internship['internship_id']}", json={"status": status},
                              headers=admin_headers)
            assert resp.status_code == 200, resp.text
            internship = resp.json()
        return internship
    return _post
