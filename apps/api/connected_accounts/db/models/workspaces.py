"""SQLAlchemy ORM models for workspaces, members and their data sources."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Index, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from connected_accounts.db.base import Base


class Workspace(Base):
    """A tenant in the multi-tenant system."""

    __tablename__ = "workspaces"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)

    data_sources: Mapped[list["DataSource"]] = relationship(
        back_populates="workspace", cascade="all, delete-orphan"
    )


class DataSource(Base):
    """
    Where a workspace's records live.

    A NULL url means the primary application database. When a workspace has
    several rows, the most recently created one is authoritative.
    """

    __tablename__ = "data_sources"
    __table_args__ = (Index("idx_data_sources_workspace_created", "workspace_id", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    workspace_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False
    )
    url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)

    workspace: Mapped["Workspace"] = relationship(back_populates="data_sources")


class WorkspaceMember(Base):
    """A user's membership in a workspace; owns connected accounts."""

    __tablename__ = "workspace_members"
    __table_args__ = (Index("idx_workspace_members_workspace", "workspace_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    workspace_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False
    )
    user_email: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
