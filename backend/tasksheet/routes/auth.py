"""
Signup and login routes.
"""

from fastapi import APIRouter, Depends

from tasksheet.auth import create_session_token
from tasksheet.config import Settings, get_settings
from tasksheet.exceptions import UnauthenticatedError
from tasksheet.logging_config import get_logger
from tasksheet.schemas import Credentials, SignupResponse, TokenResponse
from tasksheet.services.users import UserRegistry
from tasksheet.store import get_user_registry

logger = get_logger(__name__)

router = APIRouter()


@router.post("/signup", response_model=SignupResponse)
async def signup(
    credentials: Credentials,
    users: UserRegistry = Depends(get_user_registry),
) -> SignupResponse:
    """Register a new Member account."""
    user = await users.signup(credentials.email, credentials.password)
    logger.info(f"Signed up {user.email}")
    return SignupResponse()


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: Credentials,
    users: UserRegistry = Depends(get_user_registry),
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    """Exchange email/password for a session token."""
    user = await users.authenticate(credentials.email, credentials.password)
    if user is None:
        raise UnauthenticatedError("Incorrect email or password")

    return TokenResponse(
        token=create_session_token(user, settings),
        email=user.email,
        role=user.role,
    )
