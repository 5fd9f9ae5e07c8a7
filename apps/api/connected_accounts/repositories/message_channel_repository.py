"""Message channel persistence and sync bookkeeping."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from connected_accounts.db.enums import (
    DEFAULT_MESSAGE_CHANNEL_SYNC_STATUS,
    MessageChannelSyncStatus,
    MessageChannelType,
    MessageChannelVisibility,
)
from connected_accounts.db.models import MessageChannel


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def merge_pending_ids(existing: list[str] | None, fetched: list[str]) -> list[str]:
    # Keeps first-seen order; a new list so the JSON column is flagged dirty
    return list(dict.fromkeys([*(existing or []), *fetched]))


class MessageChannelRepository:
    model = MessageChannel

    def get_by_connected_account_id(
        self, session: Session, connected_account_id: UUID, workspace_id: UUID
    ) -> list[MessageChannel]:
        stmt = (
            select(MessageChannel)
            .where(
                MessageChannel.connected_account_id == connected_account_id,
                MessageChannel.workspace_id == workspace_id,
            )
            .order_by(MessageChannel.created_at, MessageChannel.id)
        )
        return list(session.scalars(stmt))

    def create(
        self,
        session: Session,
        *,
        id: UUID,
        workspace_id: UUID,
        connected_account_id: UUID,
        type: MessageChannelType,
        handle: str,
        visibility: MessageChannelVisibility,
    ) -> MessageChannel:
        channel = MessageChannel(
            id=id,
            workspace_id=workspace_id,
            connected_account_id=connected_account_id,
            type=type.value,
            handle=handle,
            visibility=visibility.value,
        )
        session.add(channel)
        session.flush()
        return channel

    def reset_sync(
        self, session: Session, connected_account_id: UUID, workspace_id: UUID
    ) -> None:
        """Return every channel of the account to its never-synced state."""
        session.execute(
            update(MessageChannel)
            .where(
                MessageChannel.connected_account_id == connected_account_id,
                MessageChannel.workspace_id == workspace_id,
            )
            .values(
                sync_status=DEFAULT_MESSAGE_CHANNEL_SYNC_STATUS.value,
                sync_cursor=None,
                sync_stage_started_at=None,
                synced_at=None,
                throttle_failure_count=0,
                updated_at=_now_utc(),
            )
            .execution_options(synchronize_session="fetch")
        )

    def mark_sync_ongoing(self, session: Session, channel: MessageChannel) -> None:
        channel.sync_status = MessageChannelSyncStatus.ONGOING.value
        channel.sync_stage_started_at = _now_utc()
        channel.updated_at = _now_utc()
        session.flush()

    def mark_sync_succeeded(
        self,
        session: Session,
        channel: MessageChannel,
        sync_cursor: str | None,
        message_ids: list[str],
    ) -> None:
        """Advance the cursor and queue the fetched ids for import in one write."""
        now = _now_utc()
        channel.pending_message_ids = merge_pending_ids(channel.pending_message_ids, message_ids)
        channel.sync_status = MessageChannelSyncStatus.SUCCEEDED.value
        channel.sync_cursor = sync_cursor
        channel.sync_stage_started_at = None
        channel.synced_at = now
        channel.throttle_failure_count = 0
        channel.updated_at = now
        session.flush()

    def mark_sync_failed(
        self, session: Session, channel: MessageChannel, *, throttled: bool = False
    ) -> None:
        channel.sync_status = MessageChannelSyncStatus.FAILED.value
        channel.sync_stage_started_at = None
        if throttled:
            channel.throttle_failure_count += 1
        channel.updated_at = _now_utc()
        session.flush()
