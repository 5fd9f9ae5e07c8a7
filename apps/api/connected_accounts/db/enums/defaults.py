"""Centralized defaults for enums."""

from connected_accounts.db.enums.calendar import CalendarChannelVisibility
from connected_accounts.db.enums.jobs import JobStatus
from connected_accounts.db.enums.messaging import (
    MessageChannelSyncStatus,
    MessageChannelVisibility,
)


DEFAULT_JOB_STATUS: JobStatus = JobStatus.PENDING
DEFAULT_MESSAGE_CHANNEL_VISIBILITY: MessageChannelVisibility = (
    MessageChannelVisibility.SHARE_EVERYTHING
)
DEFAULT_CALENDAR_CHANNEL_VISIBILITY: CalendarChannelVisibility = (
    CalendarChannelVisibility.SHARE_EVERYTHING
)
DEFAULT_MESSAGE_CHANNEL_SYNC_STATUS: MessageChannelSyncStatus = (
    MessageChannelSyncStatus.NOT_SYNCED
)
