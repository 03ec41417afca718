#!/usr/bin/env python3
"""
Create a super admin account.

Super admins cannot sign up over HTTP; they are created here and can then
create admin accounts through POST /accounts/admin/signup.

Usage: python scripts/create_super_admin.py <email> <full name>
       (the password is prompted for)
"""
import sys
sys.path.insert(0, '.')

from getpass import getpass

from pydantic import ValidationError

from internship_portal.core.errors import DuplicateEmail
from internship_portal.db.database import init_schema
from internship_portal.schemas.schemas import AdminSignup, Role
from internship_portal.services.account_service import register_account


def main():
    if len(sys.argv) < 3:
        print(__doc__)
        sys.exit(2)

    email, full_name = sys.argv[1], " ".join(sys.argv[2:])
    password = getpass("Password: ")
    if password != getpass("Repeat password: "):
        print("❌ Passwords do not match")
        sys.exit(1)

    try:
        data = AdminSignup(email=email, full_name=full_name, password=password)
    except ValidationError as e:
        for err in e.errors():
            print(f"❌ {'.'.join(str(p) for p in err['loc'])}: {err['msg']}")
        sys.exit(1)

    init_schema()
    try:
        account = register_account(Role.super_admin, data.model_dump(), data.password)
    except DuplicateEmail:
        print(f"⚠️  A super admin with email {email} already exists")
        sys.exit(1)

    print(f"✅ Super admin created (account_id={account['account_id']})")


if __name__ == "__main__":
    main()
