"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT session token creation/validation
- FastAPI dependencies for protected routes
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from internship_portal.core.config import get_settings
from internship_portal.core.errors import InvalidToken
from internship_portal.schemas.schemas import Role

settings = get_settings()

# Password hashing
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)

# Bearer token extractor. Missing headers are reported as InvalidToken by
# the dependencies below rather than by FastAPI.
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """A validated (account_id, role) pair taken from a session token."""
    account_id: int
    role: Role


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """
    Verify password against hash.

    With no stored hash a dummy verification still runs, so unknown
    accounts take as long as wrong passwords.
    """
    if hashed_password is None:
        pwd_context.dummy_verify()
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(account_id: int, role: Role, expires_delta: Optional[timedelta] = None) -> tuple:
    """Create JWT access token. Returns (token, expires_at)."""
    issued_at = datetime.now(timezone.utc)
    expire = issued_at + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    claims = {"sub": str(account_id), "role": role.value, "iat": issued_at, "exp": expire}
    token = jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return token, expire


def validate_token(token: str) -> Principal:
    """
    Decode and verify a session token.

    Bad signature, expiry, malformed payload and unknown role all raise
    the same InvalidToken.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        return Principal(account_id=int(payload["sub"]), role=Role(payload["role"]))
    except (JWTError, KeyError, TypeError, ValueError):
        raise InvalidToken()


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    """
    FastAPI dependency - Get the authenticated caller.

    Usage:
        @router.get("/protected")
        async def route(principal: Principal = Depends(get_current_principal)):
            ...
    """
    if credentials is None:
        raise InvalidToken()
    return validate_token(credentials.credentials)
