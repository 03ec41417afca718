"""
Domain error taxonomy.

Every expected failure is a PortalError subclass carrying a stable
machine-readable `kind` and the HTTP status it maps to. The exception
handlers in main.py turn them into {"kind": ..., "detail": ...} bodies.
"""

from typing import Dict, List, Optional


class PortalError(Exception):
    kind = "PortalError"
    status_code = 400
    default_message = "Request failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class DuplicateEmail(PortalError):
    kind = "DuplicateEmail"
    status_code = 409
    default_message = "An account with this email already exists"


class InvalidCredentials(PortalError):
    kind = "InvalidCredentials"
    status_code = 401
    default_message = "Invalid email or password"


class NotApproved(PortalError):
    kind = "NotApproved"
    status_code = 403
    default_message = "Employer account is awaiting admin approval"


class InvalidToken(PortalError):
    kind = "InvalidToken"
    status_code = 401
    default_message = "Invalid or expired token"


class Forbidden(PortalError):
    kind = "Forbidden"
    status_code = 403
    default_message = "Not allowed"


class InvalidTransition(PortalError):
    kind = "InvalidTransition"
    status_code = 409
    default_message = "Status change not allowed"


class InternshipNotActive(PortalError):
    kind = "InternshipNotActive"
    status_code = 409
    default_message = "Internship is not accepting applications"


class DuplicateApplication(PortalError):
    kind = "DuplicateApplication"
    status_code = 409
    default_message = "Already applied to this internship"


class NotFound(PortalError):
    kind = "NotFound"
    status_code = 404
    default_message = "Not found"


class StoreUnavailable(PortalError):
    kind = "StoreUnavailable"
    status_code = 503
    default_message = "Service temporarily unavailable"


class ValidationFailed(PortalError):
    """Malformed input. `errors` is a list of {"field": ..., "message": ...}."""
    kind = "ValidationError"
    status_code = 422
    default_message = "Request validation failed"

    def __init__(self, errors: List[Dict[str, str]], message: Optional[str] = None):
        self.errors = errors
        super().__init__(message)
