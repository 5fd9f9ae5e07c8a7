"""Message channel enums."""

from enum import Enum


class MessageChannelType(str, Enum):
    EMAIL = "email"
    SMS = "sms"


class MessageChannelVisibility(str, Enum):
    """How much of a channel's messages teammates can see."""

    METADATA = "metadata"  # Participants and timestamps only
    SUBJECT = "subject"  # Metadata plus subject line
    SHARE_EVERYTHING = "share_everything"


class MessageChannelSyncStatus(str, Enum):
    """Message list sync state of a channel."""

    NOT_SYNCED = "not_synced"
    ONGOING = "ongoing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
