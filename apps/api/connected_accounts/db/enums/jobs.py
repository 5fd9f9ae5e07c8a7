"""Job-related enums."""

from enum import Enum


class MessageQueue(str, Enum):
    """Named queues jobs are routed to."""

    MESSAGING = "messaging_queue"
    CALENDAR = "calendar_queue"


class JobType(str, Enum):
    """Types of background jobs."""

    MESSAGING_MESSAGE_LIST_FETCH = "messaging_message_list_fetch"
    GOOGLE_CALENDAR_SYNC = "google_calendar_sync"


class JobStatus(str, Enum):
    """Status of background jobs."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
