"""SQLAlchemy ORM models for message channels."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import datetime

from sqlalchemy import JSON, ForeignKey, Index, Integer, String, Text, Uuid, func, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from connected_accounts.db.base import Base
from connected_accounts.db.enums import DEFAULT_MESSAGE_CHANNEL_SYNC_STATUS

if TYPE_CHECKING:
    from connected_accounts.db.models import ConnectedAccount


class MessageChannel(Base):
    """
    Mailbox of a connected account that gets imported into the CRM.

    Sync bookkeeping (status, cursor, timings, throttle counter) is reset
    whenever the owning account is re-linked.
    """

    __tablename__ = "message_channels"
    __table_args__ = (
        Index("idx_message_channels_account", "workspace_id", "connected_account_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    workspace_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    connected_account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("connected_accounts.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    handle: Mapped[str] = mapped_column(String(255), nullable=False)
    visibility: Mapped[str] = mapped_column(String(30), nullable=False)

    # Sync bookkeeping
    sync_status: Mapped[str] = mapped_column(
        String(20),
        default=DEFAULT_MESSAGE_CHANNEL_SYNC_STATUS.value,
        server_default=text(f"'{DEFAULT_MESSAGE_CHANNEL_SYNC_STATUS.value}'"),
        nullable=False,
    )
    sync_cursor: Mapped[str | None] = mapped_column(Text, nullable=True)  # Gmail historyId
    sync_stage_started_at: Mapped[datetime | None] = mapped_column(nullable=True)
    synced_at: Mapped[datetime | None] = mapped_column(nullable=True)
    throttle_failure_count: Mapped[int] = mapped_column(
        Integer, default=0, server_default=text("0"), nullable=False
    )
    # Message ids listed by the last fetches, waiting to be imported
    pending_message_ids: Mapped[list[str]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"),
        default=list,
        server_default=text("'[]'"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)

    connected_account: Mapped["ConnectedAccount"] = relationship(
        back_populates="message_channels"
    )
