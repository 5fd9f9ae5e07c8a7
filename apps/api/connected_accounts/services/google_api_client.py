"""Thin Google REST client shared by the Gmail and Calendar sync services.

Maps HTTP failures to typed exceptions and retries a call once with a fresh
access token when Google answers 401.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar
from uuid import UUID

import httpx

from connected_accounts.repositories import connected_account_repository
from connected_accounts.services import oauth_service
from connected_accounts.services.http_service import request_with_retries
from connected_accounts.services.ports import WorkspaceConnection

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GoogleAPIError(Exception):
    """Google API returned an unexpected status."""

    def __init__(self, status_code: int, message: str | None = None):
        super().__init__(message or f"Google API request failed ({status_code})")
        self.status_code = status_code


class GoogleAPIUnauthorizedError(GoogleAPIError):
    pass


class GoogleAPIThrottledError(GoogleAPIError):
    pass


class GoogleAPINotFoundError(GoogleAPIError):
    pass


class GoogleAPIGoneError(GoogleAPIError):
    pass


_STATUS_ERRORS: dict[int, type[GoogleAPIError]] = {
    401: GoogleAPIUnauthorizedError,
    404: GoogleAPINotFoundError,
    410: GoogleAPIGoneError,
    429: GoogleAPIThrottledError,
}


@dataclass
class AccountCredentials:
    """Decrypted token snapshot of a connected account, detached from any session."""

    connected_account_id: UUID
    workspace_id: UUID
    handle: str
    access_token: str
    refresh_token: str | None


async def google_get_json(
    client: httpx.AsyncClient,
    url: str,
    access_token: str,
    params: dict[str, Any] | None = None,
) -> dict[str, Any]:
    response = await request_with_retries(
        lambda: client.get(
            url,
            params=params,
            headers={"Authorization": f"Bearer {access_token}"},
        )
    )
    if response.status_code == 200:
        return response.json()
    error_cls = _STATUS_ERRORS.get(response.status_code, GoogleAPIError)
    raise error_cls(response.status_code)


async def refresh_account_access_token(
    connection: WorkspaceConnection, credentials: AccountCredentials
) -> str:
    """
    Obtain and persist a new access token for the account.

    A revoked refresh token marks the account as auth-failed before the error
    propagates.
    """
    if not credentials.refresh_token:
        raise oauth_service.GoogleOAuthInvalidGrantError("Connected account has no refresh token")

    try:
        tokens = await oauth_service.refresh_google_access_token(credentials.refresh_token)
    except oauth_service.GoogleOAuthInvalidGrantError:
        with connection.transaction() as session:
            connected_account_repository().mark_auth_failed(
                session, credentials.connected_account_id, credentials.workspace_id
            )
        logger.warning(
            "Connected account %s refresh token rejected, marked auth failed",
            credentials.connected_account_id,
        )
        raise

    access_token = tokens["access_token"]
    with connection.transaction() as session:
        connected_account_repository().update_access_token(
            session,
            access_token,
            credentials.connected_account_id,
            credentials.workspace_id,
        )
    credentials.access_token = access_token
    return access_token


async def call_with_token_refresh(
    connection: WorkspaceConnection,
    credentials: AccountCredentials,
    call: Callable[[str], Awaitable[T]],
) -> T:
    """Run call(access_token); on 401 refresh the token once and retry."""
    try:
        return await call(credentials.access_token)
    except GoogleAPIUnauthorizedError:
        logger.info(
            "Access token expired for connected account %s, refreshing",
            credentials.connected_account_id,
        )
    access_token = await refresh_account_access_token(connection, credentials)
    return await call(access_token)
