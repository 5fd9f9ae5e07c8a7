"""Enum definitions for application constants."""

from connected_accounts.db.enums.accounts import ConnectedAccountProvider
from connected_accounts.db.enums.calendar import CalendarChannelVisibility
from connected_accounts.db.enums.defaults import (
    DEFAULT_CALENDAR_CHANNEL_VISIBILITY,
    DEFAULT_JOB_STATUS,
    DEFAULT_MESSAGE_CHANNEL_SYNC_STATUS,
    DEFAULT_MESSAGE_CHANNEL_VISIBILITY,
)
from connected_accounts.db.enums.jobs import JobStatus, JobType, MessageQueue
from connected_accounts.db.enums.messaging import (
    MessageChannelSyncStatus,
    MessageChannelType,
    MessageChannelVisibility,
)

__all__ = [
    "CalendarChannelVisibility",
    "ConnectedAccountProvider",
    "DEFAULT_CALENDAR_CHANNEL_VISIBILITY",
    "DEFAULT_JOB_STATUS",
    "DEFAULT_MESSAGE_CHANNEL_SYNC_STATUS",
    "DEFAULT_MESSAGE_CHANNEL_VISIBILITY",
    "JobStatus",
    "JobType",
    "MessageChannelSyncStatus",
    "MessageChannelType",
    "MessageChannelVisibility",
    "MessageQueue",
]
