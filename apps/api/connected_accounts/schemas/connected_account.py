"""Pydantic schemas for connected accounts and their channels."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from connected_accounts.db.enums import (
    DEFAULT_CALENDAR_CHANNEL_VISIBILITY,
    DEFAULT_MESSAGE_CHANNEL_VISIBILITY,
    CalendarChannelVisibility,
    MessageChannelVisibility,
)


class GoogleAccountLink(BaseModel):
    """
    Freshly obtained Google tokens plus the workspace context they belong to.

    Visibilities are always populated: a missing or null value becomes
    SHARE_EVERYTHING here, so downstream code never handles None.
    """
    model_config = ConfigDict(frozen=True)

    handle: str = Field(..., min_length=1, max_length=255)
    workspace_member_id: UUID
    workspace_id: UUID
    access_token: str = Field(..., min_length=1)
    refresh_token: str = Field(..., min_length=1)
    calendar_visibility: CalendarChannelVisibility = DEFAULT_CALENDAR_CHANNEL_VISIBILITY
    message_visibility: MessageChannelVisibility = DEFAULT_MESSAGE_CHANNEL_VISIBILITY

    @field_validator("calendar_visibility", mode="before")
    @classmethod
    def _default_calendar_visibility(cls, value):
        return value or DEFAULT_CALENDAR_CHANNEL_VISIBILITY

    @field_validator("message_visibility", mode="before")
    @classmethod
    def _default_message_visibility(cls, value):
        return value or DEFAULT_MESSAGE_CHANNEL_VISIBILITY


class GoogleAPIsOAuthContext(BaseModel):
    """Linking context carried through the Google consent screen in the OAuth state."""
    workspace_id: UUID
    workspace_member_id: UUID
    calendar_visibility: CalendarChannelVisibility | None = None
    message_visibility: MessageChannelVisibility | None = None


class MessageChannelRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    type: str
    handle: str
    visibility: MessageChannelVisibility
    sync_status: str
    synced_at: datetime | None


class CalendarChannelRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    handle: str
    visibility: CalendarChannelVisibility
    is_sync_enabled: bool
    synced_at: datetime | None


class ConnectedAccountRead(BaseModel):
    """Connected account response (tokens are never exposed)."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    handle: str
    provider: str
    account_owner_id: UUID
    auth_failed_at: datetime | None
    created_at: datetime
    updated_at: datetime
    message_channels: list[MessageChannelRead] = []
    calendar_channels: list[CalendarChannelRead] = []


class ConnectedAccountListResponse(BaseModel):
    items: list[ConnectedAccountRead]
