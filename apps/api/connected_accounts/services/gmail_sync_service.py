"""Gmail message list fetch for a connected account's message channel.

A channel without a cursor gets a full listing and starts tracking from the
mailbox's current historyId. A channel with a cursor only lists messages added
since that historyId. Gmail forgets old history ids (404), in which case the
fetch falls back to a full listing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

import httpx

from connected_accounts.db.models import MessageChannel
from connected_accounts.jobs.utils import mask_email
from connected_accounts.repositories import (
    connected_account_repository,
    message_channel_repository,
)
from connected_accounts.services.google_api_client import (
    AccountCredentials,
    GoogleAPINotFoundError,
    GoogleAPIThrottledError,
    call_with_token_refresh,
    google_get_json,
)
from connected_accounts.services.http_service import DEFAULT_TIMEOUT
from connected_accounts.services.ports import WorkspaceConnection

logger = logging.getLogger(__name__)

GMAIL_API_BASE = "https://gmail.googleapis.com/gmail/v1/users/me"
GMAIL_LIST_PAGE_SIZE = 500


@dataclass
class MessageListFetchResult:
    message_ids: list[str]
    history_id: str | None
    full_sync: bool


async def _full_message_list(
    client: httpx.AsyncClient, access_token: str
) -> MessageListFetchResult:
    # Read the history id first so messages arriving mid-listing are caught next time
    profile = await google_get_json(client, f"{GMAIL_API_BASE}/profile", access_token)
    history_id = profile.get("historyId")

    message_ids: list[str] = []
    page_token: str | None = None
    while True:
        params: dict = {"maxResults": GMAIL_LIST_PAGE_SIZE}
        if page_token:
            params["pageToken"] = page_token
        data = await google_get_json(client, f"{GMAIL_API_BASE}/messages", access_token, params)
        message_ids.extend(m["id"] for m in data.get("messages", []))
        page_token = data.get("nextPageToken")
        if not page_token:
            break

    return MessageListFetchResult(
        message_ids=message_ids,
        history_id=str(history_id) if history_id else None,
        full_sync=True,
    )


async def _partial_message_list(
    client: httpx.AsyncClient, access_token: str, start_history_id: str
) -> MessageListFetchResult:
    message_ids: list[str] = []
    history_id: str | None = start_history_id
    page_token: str | None = None
    while True:
        params: dict = {
            "startHistoryId": start_history_id,
            "historyTypes": "messageAdded",
            "maxResults": GMAIL_LIST_PAGE_SIZE,
        }
        if page_token:
            params["pageToken"] = page_token
        data = await google_get_json(client, f"{GMAIL_API_BASE}/history", access_token, params)
        for record in data.get("history", []):
            for added in record.get("messagesAdded", []):
                message_ids.append(added["message"]["id"])
        if data.get("historyId"):
            history_id = str(data["historyId"])
        page_token = data.get("nextPageToken")
        if not page_token:
            break

    # The same message can show up in several history records
    unique_ids = list(dict.fromkeys(message_ids))
    return MessageListFetchResult(message_ids=unique_ids, history_id=history_id, full_sync=False)


async def fetch_message_list(
    access_token: str, sync_cursor: str | None
) -> MessageListFetchResult:
    async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as client:
        if not sync_cursor:
            return await _full_message_list(client, access_token)
        try:
            return await _partial_message_list(client, access_token, sync_cursor)
        except GoogleAPINotFoundError:
            logger.info("Gmail history id %s expired, running full message list fetch", sync_cursor)
            return await _full_message_list(client, access_token)


async def sync_message_list(
    connection: WorkspaceConnection,
    workspace_id: UUID,
    connected_account_id: UUID,
) -> int | None:
    """
    Fetch the message list for the account's message channel.

    Fetched ids are appended to the channel's pending_message_ids in the same
    write that advances the cursor, so nothing listed is skipped.

    Returns the number of message ids fetched, or None when there is nothing
    to sync (account or channel gone). Failures mark the channel failed and
    propagate so the job is retried.
    """
    with connection.transaction() as session:
        account = connected_account_repository().get_by_id(
            session, connected_account_id, workspace_id
        )
        if account is None:
            logger.info("Connected account %s not found, skipping message list fetch", connected_account_id)
            return None

        channels = message_channel_repository().get_by_connected_account_id(
            session, connected_account_id, workspace_id
        )
        if not channels:
            logger.info("Connected account %s has no message channel", connected_account_id)
            return None

        channel = channels[0]
        message_channel_repository().mark_sync_ongoing(session, channel)

        credentials = AccountCredentials(
            connected_account_id=account.id,
            workspace_id=workspace_id,
            handle=account.handle,
            access_token=account.access_token,
            refresh_token=account.refresh_token,
        )
        channel_id = channel.id
        sync_cursor = channel.sync_cursor

    try:
        result = await call_with_token_refresh(
            connection,
            credentials,
            lambda access_token: fetch_message_list(access_token, sync_cursor),
        )
    except Exception as exc:
        with connection.transaction() as session:
            channel = session.get(MessageChannel, channel_id)
            if channel is None:
                logger.info("Message channel %s removed during sync", channel_id)
            else:
                message_channel_repository().mark_sync_failed(
                    session, channel, throttled=isinstance(exc, GoogleAPIThrottledError)
                )
        raise

    with connection.transaction() as session:
        channel = session.get(MessageChannel, channel_id)
        if channel is None:
            logger.info("Message channel %s removed during sync", channel_id)
            return None
        message_channel_repository().mark_sync_succeeded(
            session, channel, result.history_id, result.message_ids
        )

    logger.info(
        "Fetched %s message ids for %s (full=%s)",
        len(result.message_ids),
        mask_email(credentials.handle),
        result.full_sync,
    )
    return len(result.message_ids)
