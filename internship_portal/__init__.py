"""
Campus Internship Portal
REST backend for students, employers and campus admins.

Architecture:
- Relational store: accounts, internships, applications (single source of truth)
- JWT session tokens carrying (account_id, role)
- Policy tables decide who may see and change which rows
"""

__version__ = "1.0.0"
