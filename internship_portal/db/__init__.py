"""
Database module - relational store connection and table definitions.
"""
from internship_portal.db.database import get_db_session, execute_raw_sql, init_schema, test_store_connection

__all__ = [
    "get_db_session",
    "execute_raw_sql",
    "init_schema",
    "test_store_connection",
]
