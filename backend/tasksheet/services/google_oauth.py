"""
Google OAuth 2.0 web-server flow: consent URL and authorization-code exchange.

The resulting access token is what the task endpoints expect as ``accessToken``.
"""

from urllib.parse import urlencode

import httpx

from tasksheet.config import Settings
from tasksheet.exceptions import UpstreamError
from tasksheet.logging_config import get_logger

logger = get_logger(__name__)

OAUTH_SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive.readonly",
]
CALLBACK_PATH = "/auth/google/callback"


def redirect_uri_for(settings: Settings, base_url: str) -> str:
    """Configured redirect URI, or the callback page on the requesting host."""
    return settings.google_redirect_uri or f"{base_url.rstrip('/')}{CALLBACK_PATH}"


def build_auth_url(settings: Settings, redirect_uri: str) -> str:
    """Consent screen URL requesting offline access to sheets and drive (read-only)."""
    if not settings.google_client_id:
        raise UpstreamError("Failed to generate auth URL")

    params = {
        "client_id": settings.google_client_id,
        "redirect_uri": redirect_uri,
        "response_type": "code",
        "scope": " ".join(OAUTH_SCOPES),
        "access_type": "offline",
    }
    return f"{settings.google_auth_url}?{urlencode(params)}"


async def exchange_code(
    code: str,
    settings: Settings,
    redirect_uri: str,
    http_client: httpx.AsyncClient,
) -> dict:
    """
    Trade an authorization code for tokens.

    Returns:
        The token endpoint's JSON (``access_token``, ``refresh_token``, ...).

    Raises:
        UpstreamError: If the token endpoint is unreachable or refuses the code.
    """
    try:
        response = await http_client.post(
            settings.google_token_url,
            data={
                "code": code,
                "client_id": settings.google_client_id,
                "client_secret": settings.google_client_secret,
                "redirect_uri": redirect_uri,
                "grant_type": "authorization_code",
            },
        )
        response.raise_for_status()
        tokens = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise UpstreamError("Failed to exchange authorization code", cause=exc) from exc

    if not tokens.get("access_token"):
        raise UpstreamError("Failed to exchange authorization code")

    logger.info(f"Exchanged authorization code (refresh token issued: {bool(tokens.get('refresh_token'))})")
    return tokens
