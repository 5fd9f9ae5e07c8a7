"""Google APIs account linking.

After a workspace member authorizes Google access, create (or refresh) the
connected account with its message channel and, when calendar sync is
enabled, its calendar channel, all in one transaction. Sync jobs are enqueued
only after that transaction commits.

Enqueueing is not part of the transaction: if it fails the account stays
linked and the next re-link enqueues again.
"""

from __future__ import annotations

import logging
import uuid
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from connected_accounts.core.feature_flags import FeatureFlag
from connected_accounts.core.structured_logging import build_log_context
from connected_accounts.db.enums import (
    ConnectedAccountProvider,
    JobType,
    MessageChannelType,
)
from connected_accounts.jobs.utils import mask_email
from connected_accounts.repositories import (
    calendar_channel_repository,
    connected_account_repository,
    message_channel_repository,
)
from connected_accounts.schemas.connected_account import GoogleAccountLink
from connected_accounts.services.ports import DataStore, FeatureFlags, JobQueue

logger = logging.getLogger(__name__)

GOOGLE_CALENDAR_SYNC_RETRY_LIMIT = 2


class GoogleAPIsServiceError(Exception):
    """Base exception for Google account linking errors."""

    pass


class ConnectedAccountTransactionError(GoogleAPIsServiceError):
    """The account/channel write failed and was rolled back."""

    pass


class SyncJobDispatchError(GoogleAPIsServiceError):
    """The account was saved but a sync job could not be enqueued."""

    def __init__(self, connected_account_id: UUID, job_type: JobType):
        super().__init__(
            f"Failed to enqueue {job_type.value} for connected account {connected_account_id}"
        )
        self.connected_account_id = connected_account_id
        self.job_type = job_type


def refresh_google_refresh_token(
    link: GoogleAccountLink,
    *,
    data_store: DataStore,
    feature_flags: FeatureFlags,
    messaging_queue: JobQueue,
    calendar_queue: JobQueue,
) -> UUID:
    """
    Link a Google account to a workspace member, or refresh an existing link.

    Returns the connected account id (new or existing).

    Raises:
        DataSourceNotFoundError: workspace has no data source (nothing written)
        ConnectedAccountTransactionError: write failed, fully rolled back
        SyncJobDispatchError: write committed, a sync job was not enqueued
    """
    log_context = build_log_context(
        workspace_id=str(link.workspace_id),
        workspace_member_id=str(link.workspace_member_id),
    )

    connection = data_store.resolve_connection(link.workspace_id)

    is_calendar_enabled = feature_flags.get(FeatureFlag.CALENDAR_PROVIDER_GOOGLE_ENABLED)

    with connection.session() as session:
        connected_accounts = (
            connected_account_repository().get_all_by_handle_and_workspace_member_id(
                session,
                link.handle,
                link.workspace_member_id,
                link.workspace_id,
            )
        )
        existing_account_id = connected_accounts[0].id if connected_accounts else None

    if len(connected_accounts) > 1:
        logger.warning(
            "Found %s connected accounts for handle %s, using the oldest",
            len(connected_accounts),
            mask_email(link.handle),
            extra=log_context,
        )

    connected_account_id = existing_account_id or uuid.uuid4()

    try:
        with connection.transaction() as session:
            if existing_account_id is None:
                _create_connected_account(
                    session, link, connected_account_id, is_calendar_enabled
                )
            else:
                _refresh_connected_account(session, link, connected_account_id)
    except SQLAlchemyError as exc:
        logger.exception(
            "Connected account write failed for handle %s",
            mask_email(link.handle),
            extra=log_context,
        )
        raise ConnectedAccountTransactionError(
            f"Failed to save connected account for workspace {link.workspace_id}"
        ) from exc

    logger.info(
        "Connected account %s %s for handle %s",
        connected_account_id,
        "refreshed" if existing_account_id else "created",
        mask_email(link.handle),
        extra=log_context,
    )

    enqueue_sync_jobs(
        connected_account_id,
        link.workspace_id,
        is_calendar_enabled,
        feature_flags=feature_flags,
        messaging_queue=messaging_queue,
        calendar_queue=calendar_queue,
    )
    return connected_account_id


def _create_connected_account(
    session,
    link: GoogleAccountLink,
    connected_account_id: UUID,
    is_calendar_enabled: bool,
) -> None:
    connected_account_repository().create(
        session,
        id=connected_account_id,
        workspace_id=link.workspace_id,
        handle=link.handle,
        provider=ConnectedAccountProvider.GOOGLE,
        access_token=link.access_token,
        refresh_token=link.refresh_token,
        account_owner_id=link.workspace_member_id,
    )

    message_channel_repository().create(
        session,
        id=uuid.uuid4(),
        workspace_id=link.workspace_id,
        connected_account_id=connected_account_id,
        type=MessageChannelType.EMAIL,
        handle=link.handle,
        visibility=link.message_visibility,
    )

    if is_calendar_enabled:
        calendar_channel_repository().create(
            session,
            id=uuid.uuid4(),
            workspace_id=link.workspace_id,
            connected_account_id=connected_account_id,
            handle=link.handle,
            visibility=link.calendar_visibility,
        )


def _refresh_connected_account(
    session,
    link: GoogleAccountLink,
    connected_account_id: UUID,
) -> None:
    connected_account_repository().update_access_token_and_refresh_token(
        session,
        link.access_token,
        link.refresh_token,
        connected_account_id,
        link.workspace_id,
    )

    message_channel_repository().reset_sync(
        session, connected_account_id, link.workspace_id
    )


def enqueue_sync_jobs(
    connected_account_id: UUID,
    workspace_id: UUID,
    is_calendar_enabled: bool,
    *,
    feature_flags: FeatureFlags,
    messaging_queue: JobQueue,
    calendar_queue: JobQueue,
) -> None:
    """
    Enqueue the initial message list fetch and calendar sync for an account.

    Runs after the account transaction committed. Jobs are added one after the
    other; a failure stops there and leaves earlier jobs enqueued.
    """
    payload = {
        "workspace_id": str(workspace_id),
        "connected_account_id": str(connected_account_id),
    }

    if feature_flags.get(FeatureFlag.MESSAGING_PROVIDER_GMAIL_ENABLED):
        _enqueue(
            messaging_queue,
            JobType.MESSAGING_MESSAGE_LIST_FETCH,
            payload,
            connected_account_id,
        )

    if (
        feature_flags.get(FeatureFlag.CALENDAR_PROVIDER_GOOGLE_ENABLED)
        and is_calendar_enabled
    ):
        _enqueue(
            calendar_queue,
            JobType.GOOGLE_CALENDAR_SYNC,
            payload,
            connected_account_id,
            retry_limit=GOOGLE_CALENDAR_SYNC_RETRY_LIMIT,
        )


def _enqueue(
    queue: JobQueue,
    job_type: JobType,
    payload: dict,
    connected_account_id: UUID,
    retry_limit: int | None = None,
) -> None:
    try:
        queue.add(job_type.value, dict(payload), retry_limit=retry_limit)
    except Exception as exc:
        logger.exception(
            "Failed to enqueue %s",
            job_type.value,
            extra=build_log_context(
                workspace_id=payload["workspace_id"],
                connected_account_id=str(connected_account_id),
            ),
        )
        raise SyncJobDispatchError(connected_account_id, job_type) from exc
