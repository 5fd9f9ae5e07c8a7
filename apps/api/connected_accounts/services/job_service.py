"""Job service - business logic for background job scheduling and processing."""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session

from connected_accounts.core.config import settings
from connected_accounts.db.enums import JobStatus, JobType, MessageQueue
from connected_accounts.db.models import Job


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def schedule_job(
    db: Session,
    workspace_id: UUID,
    queue: MessageQueue,
    job_type: JobType,
    payload: dict,
    run_at: datetime | None = None,
    max_attempts: int | None = None,
) -> Job:
    """
    Schedule a new background job.

    If run_at is None, the job runs immediately.
    max_attempts counts the first run; None uses JOB_DEFAULT_MAX_ATTEMPTS.
    """
    job = Job(
        workspace_id=workspace_id,
        queue=queue.value,
        job_type=job_type.value,
        payload=payload,
        run_at=run_at or _now_utc(),
        status=JobStatus.PENDING.value,
        attempts=0,
        max_attempts=max_attempts or settings.JOB_DEFAULT_MAX_ATTEMPTS,
    )
    db.add(job)
    db.commit()
    db.refresh(job)
    return job


def _pending_query(db: Session, queues: list[str] | None):
    query = db.query(Job).filter(
        Job.status == JobStatus.PENDING.value,
        Job.run_at <= _now_utc(),
    )
    if queues:
        query = query.filter(Job.queue.in_(queues))
    return query.order_by(Job.run_at)


def claim_pending_jobs(
    db: Session, limit: int = 10, queues: list[str] | None = None
) -> list[Job]:
    """
    Atomically claim due jobs for this worker.

    Rows locked by another worker are skipped (PostgreSQL SKIP LOCKED).
    Claimed jobs are returned already marked running with attempts incremented.
    """
    jobs = (
        _pending_query(db, queues)
        .limit(limit)
        .with_for_update(skip_locked=True)
        .all()
    )
    for job in jobs:
        job.status = JobStatus.RUNNING.value
        job.attempts += 1
    db.commit()
    for job in jobs:
        db.refresh(job)
    return jobs


def mark_job_completed(db: Session, job: Job) -> Job:
    """Mark a job as completed."""
    job.status = JobStatus.COMPLETED.value
    job.completed_at = _now_utc()
    job.last_error = None
    db.commit()
    db.refresh(job)
    return job


def mark_job_failed(db: Session, job: Job, error: str) -> Job:
    """
    Mark a job as failed.

    If attempts < max_attempts, reset to pending for retry.
    """
    job.last_error = error
    if job.attempts < job.max_attempts:
        job.status = JobStatus.PENDING.value
    else:
        job.status = JobStatus.FAILED.value
    db.commit()
    db.refresh(job)
    return job
