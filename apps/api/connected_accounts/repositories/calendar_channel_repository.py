"""Calendar channel persistence."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from connected_accounts.db.enums import CalendarChannelVisibility
from connected_accounts.db.models import CalendarChannel
from connected_accounts.repositories.message_channel_repository import merge_pending_ids


class CalendarChannelRepository:
    model = CalendarChannel

    def get_by_connected_account_id(
        self, session: Session, connected_account_id: UUID, workspace_id: UUID
    ) -> list[CalendarChannel]:
        stmt = (
            select(CalendarChannel)
            .where(
                CalendarChannel.connected_account_id == connected_account_id,
                CalendarChannel.workspace_id == workspace_id,
            )
            .order_by(CalendarChannel.created_at, CalendarChannel.id)
        )
        return list(session.scalars(stmt))

    def create(
        self,
        session: Session,
        *,
        id: UUID,
        workspace_id: UUID,
        connected_account_id: UUID,
        handle: str,
        visibility: CalendarChannelVisibility,
    ) -> CalendarChannel:
        channel = CalendarChannel(
            id=id,
            workspace_id=workspace_id,
            connected_account_id=connected_account_id,
            handle=handle,
            visibility=visibility.value,
        )
        session.add(channel)
        session.flush()
        return channel

    def update_sync_cursor(
        self,
        session: Session,
        channel: CalendarChannel,
        sync_cursor: str | None,
        event_ids: list[str],
    ) -> None:
        now = datetime.now(timezone.utc)
        channel.pending_event_ids = merge_pending_ids(channel.pending_event_ids, event_ids)
        channel.sync_cursor = sync_cursor
        channel.synced_at = now
        channel.updated_at = now
        session.flush()
