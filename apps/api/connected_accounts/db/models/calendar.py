"""SQLAlchemy ORM models for calendar channels."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, ForeignKey, Index, String, Text, Uuid, func, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from connected_accounts.db.base import Base

if TYPE_CHECKING:
    from connected_accounts.db.models import ConnectedAccount


class CalendarChannel(Base):
    """Calendar of a connected account whose events are synced into the CRM."""

    __tablename__ = "calendar_channels"
    __table_args__ = (
        Index("idx_calendar_channels_account", "workspace_id", "connected_account_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    workspace_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    connected_account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("connected_accounts.id", ondelete="CASCADE"), nullable=False
    )
    handle: Mapped[str] = mapped_column(String(255), nullable=False)
    visibility: Mapped[str] = mapped_column(String(30), nullable=False)
    is_sync_enabled: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default=text("true"), nullable=False
    )
    sync_cursor: Mapped[str | None] = mapped_column(Text, nullable=True)  # Google nextSyncToken
    synced_at: Mapped[datetime | None] = mapped_column(nullable=True)
    # Changed event ids since the last import, including cancelled ones
    pending_event_ids: Mapped[list[str]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"),
        default=list,
        server_default=text("'[]'"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)

    connected_account: Mapped["ConnectedAccount"] = relationship(
        back_populates="calendar_channels"
    )
