"""Google Calendar incremental sync for a connected account's calendar channel."""

from __future__ import annotations

import logging
from uuid import UUID

import httpx

from connected_accounts.db.models import CalendarChannel
from connected_accounts.repositories import (
    calendar_channel_repository,
    connected_account_repository,
)
from connected_accounts.services.google_api_client import (
    AccountCredentials,
    GoogleAPIGoneError,
    call_with_token_refresh,
    google_get_json,
)
from connected_accounts.services.http_service import DEFAULT_TIMEOUT
from connected_accounts.services.ports import WorkspaceConnection

logger = logging.getLogger(__name__)

GOOGLE_CALENDAR_EVENTS_URL = "https://www.googleapis.com/calendar/v3/calendars/primary/events"
GOOGLE_CALENDAR_PAGE_SIZE = 250


async def list_calendar_events(
    access_token: str, sync_token: str | None
) -> tuple[list[dict], str | None]:
    """
    List changed events since sync_token (or every event when None).

    Returns (events, next_sync_token). An expired sync token (410) restarts
    with a full listing.
    """
    async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as client:
        try:
            return await _list_events(client, access_token, sync_token)
        except GoogleAPIGoneError:
            if not sync_token:
                raise
            logger.info("Calendar sync token expired, running full sync")
            return await _list_events(client, access_token, None)


async def _list_events(
    client: httpx.AsyncClient, access_token: str, sync_token: str | None
) -> tuple[list[dict], str | None]:
    events: list[dict] = []
    page_token: str | None = None
    next_sync_token: str | None = None
    while True:
        params: dict = {"maxResults": GOOGLE_CALENDAR_PAGE_SIZE, "showDeleted": "true"}
        if sync_token:
            params["syncToken"] = sync_token
        if page_token:
            params["pageToken"] = page_token
        data = await google_get_json(client, GOOGLE_CALENDAR_EVENTS_URL, access_token, params)
        events.extend(data.get("items", []))
        page_token = data.get("nextPageToken")
        if not page_token:
            next_sync_token = data.get("nextSyncToken")
            break
    return events, next_sync_token


async def sync_calendar_channel(
    connection: WorkspaceConnection,
    workspace_id: UUID,
    connected_account_id: UUID,
) -> int | None:
    """
    Sync the account's calendar channel.

    Changed event ids land in pending_event_ids together with the new cursor.

    Returns the number of changed events, or None when there is nothing to
    sync (account or channel missing, or sync disabled on the channel).
    """
    with connection.session() as session:
        account = connected_account_repository().get_by_id(
            session, connected_account_id, workspace_id
        )
        if account is None:
            logger.info("Connected account %s not found, skipping calendar sync", connected_account_id)
            return None

        channels = calendar_channel_repository().get_by_connected_account_id(
            session, connected_account_id, workspace_id
        )
        if not channels:
            logger.info("Connected account %s has no calendar channel", connected_account_id)
            return None

        channel = channels[0]
        if not channel.is_sync_enabled:
            logger.info("Calendar sync disabled for channel %s", channel.id)
            return None

        credentials = AccountCredentials(
            connected_account_id=account.id,
            workspace_id=workspace_id,
            handle=account.handle,
            access_token=account.access_token,
            refresh_token=account.refresh_token,
        )
        channel_id = channel.id
        sync_cursor = channel.sync_cursor

    events, next_sync_token = await call_with_token_refresh(
        connection,
        credentials,
        lambda access_token: list_calendar_events(access_token, sync_cursor),
    )

    with connection.transaction() as session:
        channel = session.get(CalendarChannel, channel_id)
        if channel is None:
            logger.info("Calendar channel %s removed during sync", channel_id)
            return None
        calendar_channel_repository().update_sync_cursor(
            session,
            channel,
            next_sync_token or sync_cursor,
            [event["id"] for event in events if event.get("id")],
        )

    logger.info(
        "Calendar sync complete for connected account %s events=%s",
        connected_account_id,
        len(events),
    )
    return len(events)
