"""Calendar channel enums."""

from enum import Enum


class CalendarChannelVisibility(str, Enum):
    """How much of a channel's events teammates can see."""

    METADATA = "metadata"  # Busy/free blocks and participants only
    SHARE_EVERYTHING = "share_everything"
