"""
Session authentication for FastAPI.

Users sign in with email/password (checked against the Users sheet) and
receive a signed session token. Requests present it as a Bearer token; the
token carries the user's email and role, so no lookup is needed per request.
"""

from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from tasksheet.config import Settings, get_settings
from tasksheet.exceptions import ForbiddenError, UnauthenticatedError
from tasksheet.logging_config import get_logger
from tasksheet.models import Role, User

logger = get_logger(__name__)

security = HTTPBearer(auto_error=False)


class AuthenticatedUser:
    """The principal behind a request: an email and a role."""

    def __init__(self, email: str, role: Role):
        self.email = email
        self.role = role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def __repr__(self):
        return f"AuthenticatedUser(email={self.email}, role={self.role.value})"


def create_session_token(user: User, settings: Settings, now: datetime | None = None) -> str:
    """Sign a session token for ``user`` valid for ``settings.session_ttl_minutes``."""
    issued_at = now or datetime.now(timezone.utc)
    claims = {
        "sub": user.email,
        "role": user.role.value,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.session_ttl_minutes),
    }
    return jwt.encode(claims, settings.session_secret, algorithm=settings.session_algorithm)


def decode_session_token(token: str, settings: Settings) -> AuthenticatedUser:
    """
    Verify a session token and return its principal.

    Raises:
        UnauthenticatedError: If the token is expired, tampered with or malformed.
    """
    try:
        claims = jwt.decode(token, settings.session_secret, algorithms=[settings.session_algorithm])
    except jwt.ExpiredSignatureError:
        logger.warning("Expired session token")
        raise UnauthenticatedError("Session has expired")
    except jwt.InvalidTokenError:
        logger.warning("Invalid session token")
        raise UnauthenticatedError("Invalid session token")

    email = claims.get("sub")
    if not email:
        raise UnauthenticatedError("Invalid session token")
    try:
        role = Role(claims.get("role", Role.MEMBER.value))
    except ValueError:
        role = Role.MEMBER
    return AuthenticatedUser(email=email, role=role)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_settings),
) -> AuthenticatedUser:
    """
    Resolve the session token on the request.

    Raises:
        UnauthenticatedError: If no token is provided or it is invalid.
    """
    if credentials is None:
        raise UnauthenticatedError()

    user = decode_session_token(credentials.credentials, settings)
    logger.debug(f"Authenticated user: {user.email} ({user.role.value})")
    return user


async def require_admin(
    user: AuthenticatedUser = Depends(get_current_user),
) -> AuthenticatedUser:
    """Only Admins pass."""
    if not user.is_admin:
        raise ForbiddenError("Only admins can create projects")
    return user
