"""Google APIs OAuth service.

Handles the consent URL, code exchange, user info lookup and access token
refresh for Gmail + Google Calendar access.
"""

import logging
from typing import Any
from urllib.parse import urlencode

import httpx

from connected_accounts.core.config import settings
from connected_accounts.services.http_service import DEFAULT_TIMEOUT, request_with_retries

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
GOOGLE_APIS_SCOPES = [
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/userinfo.profile",
    "https://www.googleapis.com/auth/gmail.readonly",
    "https://www.googleapis.com/auth/calendar.events",
]


class GoogleOAuthError(Exception):
    """Google rejected or failed an OAuth request."""

    pass


class GoogleOAuthInvalidGrantError(GoogleOAuthError):
    """Refresh token was revoked or expired; the user must re-link."""

    pass


def get_google_apis_auth_url(redirect_uri: str, state: str) -> str:
    """Generate Google APIs OAuth authorization URL (offline access)."""
    params = {
        "client_id": settings.GOOGLE_CLIENT_ID,
        "redirect_uri": redirect_uri,
        "response_type": "code",
        "scope": " ".join(GOOGLE_APIS_SCOPES),
        "access_type": "offline",
        "prompt": "consent",
        "include_granted_scopes": "true",
        "state": state,
    }
    return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"


async def exchange_google_apis_code(code: str, redirect_uri: str) -> dict[str, Any]:
    """Exchange authorization code for tokens."""
    async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as client:
        response = await client.post(
            GOOGLE_TOKEN_URL,
            data={
                "client_id": settings.GOOGLE_CLIENT_ID,
                "client_secret": settings.GOOGLE_CLIENT_SECRET,
                "code": code,
                "grant_type": "authorization_code",
                "redirect_uri": redirect_uri,
            },
        )
    if response.status_code != 200:
        raise GoogleOAuthError(f"Google code exchange failed ({response.status_code})")

    tokens = response.json()
    if not tokens.get("access_token") or not tokens.get("refresh_token"):
        # Google only returns a refresh token with prompt=consent + offline access
        raise GoogleOAuthError("Google code exchange returned no refresh token")
    return tokens


async def get_google_user_info(access_token: str) -> dict[str, Any]:
    """Get user info (email, name) for the authorized Google account."""
    async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as client:
        response = await request_with_retries(
            lambda: client.get(
                GOOGLE_USERINFO_URL,
                headers={"Authorization": f"Bearer {access_token}"},
            )
        )
    if response.status_code != 200:
        raise GoogleOAuthError(f"Google user info lookup failed ({response.status_code})")
    return response.json()


async def refresh_google_access_token(refresh_token: str) -> dict[str, Any]:
    """Trade a refresh token for a new access token."""
    async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as client:
        response = await request_with_retries(
            lambda: client.post(
                GOOGLE_TOKEN_URL,
                data={
                    "client_id": settings.GOOGLE_CLIENT_ID,
                    "client_secret": settings.GOOGLE_CLIENT_SECRET,
                    "refresh_token": refresh_token,
                    "grant_type": "refresh_token",
                },
            )
        )

    if response.status_code == 400:
        error = ""
        try:
            error = response.json().get("error", "")
        except ValueError:
            pass
        if error == "invalid_grant":
            raise GoogleOAuthInvalidGrantError("Google refresh token is no longer valid")

    if response.status_code != 200:
        logger.error("Google token refresh failed: status=%s", response.status_code)
        raise GoogleOAuthError(f"Google token refresh failed ({response.status_code})")

    return response.json()
