"""Workspace entity repositories."""

from connected_accounts.repositories.registry import (
    REPOSITORIES,
    calendar_channel_repository,
    connected_account_repository,
    get_repository,
    message_channel_repository,
)

__all__ = [
    "REPOSITORIES",
    "calendar_channel_repository",
    "connected_account_repository",
    "get_repository",
    "message_channel_repository",
]
