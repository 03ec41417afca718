"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List, Dict
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class Role(str, Enum):
    student = "student"
    employer = "employer"
    admin = "admin"
    super_admin = "super_admin"


class InternshipStatus(str, Enum):
    pending_review = "pending_review"
    active = "active"
    closed = "closed"
    rejected = "rejected"


class ApplicationStatus(str, Enum):
    pending = "pending"
    reviewed = "reviewed"
    shortlisted = "shortlisted"
    rejected = "rejected"


class Availability(str, Enum):
    full_time = "full-time"
    part_time = "part-time"


ADMIN_ROLES = frozenset({Role.admin, Role.super_admin})


# ============================================================
# ACCOUNT SCHEMAS
# ============================================================

class _SignupBase(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    phone: Optional[str] = Field(None, max_length=20)

class StudentSignup(_SignupBase):
    full_name: str = Field(..., min_length=1, max_length=100)
    department: Optional[str] = Field(None, max_length=100)
    year_of_study: Optional[str] = Field(None, max_length=20)
    roll_number: Optional[str] = Field(None, max_length=50)

class EmployerSignup(_SignupBase):
    company_name: str = Field(..., min_length=1, max_length=200)
    contact_name: str = Field(..., min_length=1, max_length=100)
    industry: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=100)

class AdminSignup(_SignupBase):
    full_name: str = Field(..., min_length=1, max_length=100)


SIGNUP_SCHEMAS = {
    Role.student: StudentSignup,
    Role.employer: EmployerSignup,
    Role.admin: AdminSignup,
    Role.super_admin: AdminSignup,
}


class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    account_id: int
    role: Role
    expires_at: datetime

class SignupResponse(BaseModel):
    account_id: int
    role: Role
    approved: bool
    message: str

class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    department: Optional[str] = Field(None, max_length=100)
    year_of_study: Optional[str] = Field(None, max_length=20)
    roll_number: Optional[str] = Field(None, max_length=50)
    cgpa: Optional[float] = Field(None, ge=0, le=10)
    company_name: Optional[str] = Field(None, min_length=1, max_length=200)
    contact_name: Optional[str] = Field(None, min_length=1, max_length=100)
    industry: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None

class AccountResponse(BaseModel):
    account_id: int
    role: Role
    email: str
    approved: bool
    full_name: Optional[str] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    year_of_study: Optional[str] = None
    roll_number: Optional[str] = None
    cgpa: Optional[float] = None
    company_name: Optional[str] = None
    contact_name: Optional[str] = None
    industry: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime


# ============================================================
# INTERNSHIP SCHEMAS
# ============================================================

class InternshipCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: Optional[str] = None
    requirements: Optional[str] = None
    location: Optional[str] = Field(None, max_length=100)
    stipend: Optional[str] = Field(None, max_length=50)
    duration: Optional[str] = Field(None, max_length=50)

class InternshipUpdate(BaseModel):
    """Status transition and/or field edits. Either may be sent alone."""
    status: Optional[InternshipStatus] = None
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = None
    requirements: Optional[str] = None
    location: Optional[str] = Field(None, max_length=100)
    stipend: Optional[str] = Field(None, max_length=50)
    duration: Optional[str] = Field(None, max_length=50)

class InternshipResponse(BaseModel):
    internship_id: int
    employer_id: int
    company_name: Optional[str] = None
    title: str
    description: Optional[str] = None
    requirements: Optional[str] = None
    location: Optional[str] = None
    stipend: Optional[str] = None
    duration: Optional[str] = None
    status: InternshipStatus
    created_at: datetime
    updated_at: datetime

class InternshipListResponse(BaseModel):
    internships: List[InternshipResponse]
    total: int
    page: int
    page_size: int


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(BaseModel):
    internship_id: int
    cover_letter: Optional[str] = None
    availability: Optional[Availability] = None
    start_date: Optional[str] = Field(None, max_length=20)

class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus

class ApplicationResponse(BaseModel):
    application_id: int
    student_id: int
    student_name: Optional[str] = None
    internship_id: int
    internship_title: str
    company_name: Optional[str] = None
    status: ApplicationStatus
    cover_letter: Optional[str] = None
    availability: Optional[str] = None
    start_date: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# ============================================================
# DASHBOARD SCHEMAS
# ============================================================

class DashboardResponse(BaseModel):
    role: Role
    internships_by_status: Dict[str, int] = {}
    applications_by_status: Dict[str, int] = {}
    pending_employers: Optional[int] = None
    total_students: Optional[int] = None
    total_employers: Optional[int] = None

