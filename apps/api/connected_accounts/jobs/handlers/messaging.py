"""Messaging job handlers."""

from __future__ import annotations

import logging

from connected_accounts.core.structured_logging import build_log_context
from connected_accounts.db.enums import JobType
from connected_accounts.jobs.utils import require_uuid

logger = logging.getLogger(__name__)


async def process_messaging_message_list_fetch(db, job) -> None:
    """
    Fetch the Gmail message list for a connected account.

    Payload:
      - workspace_id (required): workspace UUID
      - connected_account_id (required): connected account UUID
    """
    from connected_accounts.services import gmail_sync_service
    from connected_accounts.services.data_source_service import SqlAlchemyDataStore

    payload = job.payload or {}
    job_type = JobType.MESSAGING_MESSAGE_LIST_FETCH.value
    workspace_id = require_uuid(payload, "workspace_id", job_type)
    connected_account_id = require_uuid(payload, "connected_account_id", job_type)

    connection = SqlAlchemyDataStore(db).resolve_connection(workspace_id)
    fetched = await gmail_sync_service.sync_message_list(
        connection, workspace_id, connected_account_id
    )
    logger.info(
        "Message list fetch finished fetched=%s",
        fetched,
        extra=build_log_context(
            workspace_id=str(workspace_id),
            connected_account_id=str(connected_account_id),
            job_id=str(job.id),
        ),
    )
