"""Calendar job handlers."""

from __future__ import annotations

import logging

from connected_accounts.core.structured_logging import build_log_context
from connected_accounts.db.enums import JobType
from connected_accounts.jobs.utils import require_uuid

logger = logging.getLogger(__name__)


async def process_google_calendar_sync(db, job) -> None:
    """
    Sync Google Calendar events for a connected account.

    Payload:
      - workspace_id (required): workspace UUID
      - connected_account_id (required): connected account UUID
    """
    from connected_accounts.services import google_calendar_sync_service
    from connected_accounts.services.data_source_service import SqlAlchemyDataStore

    payload = job.payload or {}
    job_type = JobType.GOOGLE_CALENDAR_SYNC.value
    workspace_id = require_uuid(payload, "workspace_id", job_type)
    connected_account_id = require_uuid(payload, "connected_account_id", job_type)

    connection = SqlAlchemyDataStore(db).resolve_connection(workspace_id)
    changed = await google_calendar_sync_service.sync_calendar_channel(
        connection, workspace_id, connected_account_id
    )
    logger.info(
        "Google calendar sync finished changed=%s",
        changed,
        extra=build_log_context(
            workspace_id=str(workspace_id),
            connected_account_id=str(connected_account_id),
            job_id=str(job.id),
        ),
    )
