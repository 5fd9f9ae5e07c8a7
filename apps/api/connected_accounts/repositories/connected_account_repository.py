"""Connected account persistence."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from connected_accounts.db.enums import ConnectedAccountProvider
from connected_accounts.db.models import ConnectedAccount


class ConnectedAccountRepository:
    model = ConnectedAccount

    def get_all_by_handle_and_workspace_member_id(
        self,
        session: Session,
        handle: str,
        workspace_member_id: UUID,
        workspace_id: UUID,
    ) -> list[ConnectedAccount]:
        """
        Accounts this member already connected for a handle.

        Expected to hold zero or one row; when a race produced duplicates the
        oldest one comes first and is the one callers should use.
        """
        stmt = (
            select(ConnectedAccount)
            .where(
                ConnectedAccount.workspace_id == workspace_id,
                ConnectedAccount.account_owner_id == workspace_member_id,
                ConnectedAccount.handle == handle,
            )
            .order_by(ConnectedAccount.created_at, ConnectedAccount.id)
        )
        return list(session.scalars(stmt))

    def get_all_by_workspace_member_id(
        self,
        session: Session,
        workspace_member_id: UUID,
        workspace_id: UUID,
    ) -> list[ConnectedAccount]:
        stmt = (
            select(ConnectedAccount)
            .options(
                selectinload(ConnectedAccount.message_channels),
                selectinload(ConnectedAccount.calendar_channels),
            )
            .where(
                ConnectedAccount.workspace_id == workspace_id,
                ConnectedAccount.account_owner_id == workspace_member_id,
            )
            .order_by(ConnectedAccount.created_at, ConnectedAccount.id)
        )
        return list(session.scalars(stmt))

    def get_by_id(
        self, session: Session, connected_account_id: UUID, workspace_id: UUID
    ) -> ConnectedAccount | None:
        stmt = select(ConnectedAccount).where(
            ConnectedAccount.id == connected_account_id,
            ConnectedAccount.workspace_id == workspace_id,
        )
        return session.scalars(stmt).first()

    def create(
        self,
        session: Session,
        *,
        id: UUID,
        workspace_id: UUID,
        handle: str,
        provider: ConnectedAccountProvider,
        access_token: str,
        refresh_token: str,
        account_owner_id: UUID,
    ) -> ConnectedAccount:
        account = ConnectedAccount(
            id=id,
            workspace_id=workspace_id,
            handle=handle,
            provider=provider.value,
            access_token=access_token,
            refresh_token=refresh_token,
            account_owner_id=account_owner_id,
        )
        session.add(account)
        session.flush()
        return account

    def update_access_token_and_refresh_token(
        self,
        session: Session,
        access_token: str,
        refresh_token: str,
        connected_account_id: UUID,
        workspace_id: UUID,
    ) -> None:
        """Store re-authorized tokens and clear any previous auth failure."""
        session.execute(
            update(ConnectedAccount)
            .where(
                ConnectedAccount.id == connected_account_id,
                ConnectedAccount.workspace_id == workspace_id,
            )
            .values(
                access_token=access_token,
                refresh_token=refresh_token,
                auth_failed_at=None,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session="fetch")
        )

    def update_access_token(
        self,
        session: Session,
        access_token: str,
        connected_account_id: UUID,
        workspace_id: UUID,
    ) -> None:
        session.execute(
            update(ConnectedAccount)
            .where(
                ConnectedAccount.id == connected_account_id,
                ConnectedAccount.workspace_id == workspace_id,
            )
            .values(access_token=access_token, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session="fetch")
        )

    def mark_auth_failed(
        self, session: Session, connected_account_id: UUID, workspace_id: UUID
    ) -> None:
        now = datetime.now(timezone.utc)
        session.execute(
            update(ConnectedAccount)
            .where(
                ConnectedAccount.id == connected_account_id,
                ConnectedAccount.workspace_id == workspace_id,
            )
            .values(auth_failed_at=now, updated_at=now)
            .execution_options(synchronize_session="fetch")
        )
