"""
Google OAuth routes: consent URL and code exchange.
"""

import httpx
from fastapi import APIRouter, Depends, Request

from tasksheet.auth import AuthenticatedUser, get_current_user
from tasksheet.config import Settings, get_settings
from tasksheet.schemas import AuthUrlResponse, OAuthCallbackRequest, OAuthTokensResponse
from tasksheet.services.google_oauth import build_auth_url, exchange_code, redirect_uri_for
from tasksheet.store import get_oauth_http_client

router = APIRouter()


@router.get("/auth", response_model=AuthUrlResponse)
async def get_auth_url(
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
) -> AuthUrlResponse:
    redirect_uri = redirect_uri_for(settings, str(request.base_url))
    return AuthUrlResponse(auth_url=build_auth_url(settings, redirect_uri))


@router.post("/callback", response_model=OAuthTokensResponse)
async def oauth_callback(
    body: OAuthCallbackRequest,
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_oauth_http_client),
) -> OAuthTokensResponse:
    redirect_uri = redirect_uri_for(settings, str(request.base_url))
    tokens = await exchange_code(body.code, settings, redirect_uri, http_client)
    return OAuthTokensResponse(
        access_token=tokens["access_token"],
        refresh_token=tokens.get("refresh_token"),
    )
