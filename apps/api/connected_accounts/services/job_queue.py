"""Job queue backed by the jobs table."""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from connected_accounts.db.enums import JobType, MessageQueue
from connected_accounts.services import job_service

logger = logging.getLogger(__name__)


class DatabaseJobQueue:
    """
    Enqueue jobs on one named queue.

    retry_limit is the number of retries after the first attempt, so a job
    added with retry_limit=2 runs at most three times.
    """

    def __init__(self, db: Session, queue: MessageQueue):
        self.db = db
        self.queue = queue

    def add(
        self,
        job_name: str,
        payload: dict[str, Any],
        *,
        retry_limit: int | None = None,
    ) -> None:
        job_type = JobType(job_name)
        workspace_id = payload.get("workspace_id")
        if not workspace_id:
            raise ValueError(f"Missing workspace_id in {job_type.value} payload")

        max_attempts = retry_limit + 1 if retry_limit is not None else None
        try:
            job = job_service.schedule_job(
                db=self.db,
                workspace_id=UUID(str(workspace_id)),
                queue=self.queue,
                job_type=job_type,
                payload=payload,
                max_attempts=max_attempts,
            )
        except SQLAlchemyError:
            self.db.rollback()
            raise
        logger.info(
            "Enqueued job %s type=%s queue=%s max_attempts=%s",
            job.id,
            job_type.value,
            self.queue.value,
            job.max_attempts,
        )
