"""Job handler registry."""

from __future__ import annotations

from typing import Awaitable, Callable, Mapping

from connected_accounts.db.enums import JobType
from connected_accounts.jobs.handlers import calendar, messaging

JobHandler = Callable[[object, object], Awaitable[None]]

JOB_HANDLERS: Mapping[str, JobHandler] = {
    JobType.MESSAGING_MESSAGE_LIST_FETCH.value: messaging.process_messaging_message_list_fetch,
    JobType.GOOGLE_CALENDAR_SYNC.value: calendar.process_google_calendar_sync,
}


def resolve_job_handler(job_type: str) -> JobHandler:
    handler = JOB_HANDLERS.get(job_type)
    if not handler:
        raise ValueError(f"Unknown job type: {job_type}")
    return handler
