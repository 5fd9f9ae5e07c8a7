"""SQLAlchemy ORM models for connected (linked) external accounts."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import datetime

from sqlalchemy import Index, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from connected_accounts.db.base import Base
from connected_accounts.db.types import EncryptedString

if TYPE_CHECKING:
    from connected_accounts.db.models import (
        CalendarChannel,
        MessageChannel,
    )


class ConnectedAccount(Base):
    """
    An external-provider identity (e.g. a Google account) connected by a
    workspace member.

    Tokens are encrypted at rest. No uniqueness constraint on
    (workspace, owner, handle): concurrent first links can both insert.
    """

    __tablename__ = "connected_accounts"
    __table_args__ = (
        Index(
            "idx_connected_accounts_owner_handle",
            "workspace_id",
            "account_owner_id",
            "handle",
        ),
        Index("idx_connected_accounts_account_owner", "account_owner_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    workspace_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    handle: Mapped[str] = mapped_column(String(255), nullable=False)
    provider: Mapped[str] = mapped_column(String(30), nullable=False)
    access_token: Mapped[str] = mapped_column(EncryptedString, nullable=False)
    refresh_token: Mapped[str | None] = mapped_column(EncryptedString, nullable=True)
    # Members live in the primary database; the account may live in a dedicated one
    account_owner_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    # Set when the provider rejects our credentials; cleared on re-link
    auth_failed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)

    # Relationships
    message_channels: Mapped[list["MessageChannel"]] = relationship(
        back_populates="connected_account", passive_deletes=True
    )
    calendar_channels: Mapped[list["CalendarChannel"]] = relationship(
        back_populates="connected_account", passive_deletes=True
    )
