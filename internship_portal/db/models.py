"""
Table definitions.

Only used to create the schema; all reads and writes go through
parameterized text() SQL.
"""

from datetime import datetime

from sqlalchemy import (
    Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text,
    UniqueConstraint,
)

from internship_portal.db.database import Base


class Account(Base):
    __tablename__ = "accounts"
    __table_args__ = (UniqueConstraint("role", "email", name="uq_accounts_role_email"),)

    account_id = Column(Integer, primary_key=True, autoincrement=True)
    role = Column(String(20), nullable=False, index=True)
    email = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    approved = Column(Boolean, nullable=False, default=False)

    # Student profile
    full_name = Column(String(100))
    phone = Column(String(20))
    department = Column(String(100))
    year_of_study = Column(String(20))
    roll_number = Column(String(50))
    cgpa = Column(Float)

    # Employer profile
    company_name = Column(String(200))
    contact_name = Column(String(100))
    industry = Column(String(100))
    website = Column(String(255))
    location = Column(String(100))
    description = Column(Text)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class Internship(Base):
    __tablename__ = "internships"

    internship_id = Column(Integer, primary_key=True, autoincrement=True)
    employer_id = Column(Integer, ForeignKey("accounts.account_id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    requirements = Column(Text)
    location = Column(String(100))
    stipend = Column(String(50))
    duration = Column(String(50))
    status = Column(String(20), nullable=False, default="pending_review", index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("student_id", "internship_id", name="uq_applications_student_internship"),
    )

    application_id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("accounts.account_id"), nullable=False, index=True)
    internship_id = Column(Integer, ForeignKey("internships.internship_id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="pending")
    cover_letter = Column(Text)
    availability = Column(String(20))
    start_date = Column(String(20))
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)
