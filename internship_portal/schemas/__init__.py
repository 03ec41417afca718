"""
Schemas module - Request/Response schemas for API endpoints.

- Enums shared by the whole app (Role, InternshipStatus, ApplicationStatus)
- Request schemas (what the API accepts, per-role signup bodies)
- Response schemas (what the API returns)
"""
