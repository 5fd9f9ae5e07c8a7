"""Pydantic schemas for API request/response validation."""

from connected_accounts.schemas.connected_account import (
    CalendarChannelRead,
    ConnectedAccountListResponse,
    ConnectedAccountRead,
    GoogleAccountLink,
    GoogleAPIsOAuthContext,
    MessageChannelRead,
)

__all__ = [
    "CalendarChannelRead",
    "ConnectedAccountListResponse",
    "ConnectedAccountRead",
    "GoogleAccountLink",
    "GoogleAPIsOAuthContext",
    "MessageChannelRead",
]
