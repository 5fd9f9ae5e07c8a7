from datetime import datetime, timedelta, timezone

import pytest

from connected_accounts.db.enums import JobStatus, JobType, MessageQueue
from connected_accounts.db.models import Job
from connected_accounts.services import job_service
from connected_accounts.services.job_queue import DatabaseJobQueue


def _schedule(db, ctx, queue=MessageQueue.MESSAGING, job_type=JobType.MESSAGING_MESSAGE_LIST_FETCH, **kwargs):
    return job_service.schedule_job(
        db=db,
        workspace_id=ctx.workspace_id,
        queue=queue,
        job_type=job_type,
        payload={"workspace_id": str(ctx.workspace_id)},
        **kwargs,
    )


def test_schedule_job_uses_default_max_attempts(db, test_workspace):
    job = _schedule(db, test_workspace)

    assert job.status == JobStatus.PENDING.value
    assert job.attempts == 0
    assert job.max_attempts == 3
    assert job.queue == MessageQueue.MESSAGING.value


def test_claim_pending_jobs_marks_running(db, test_workspace):
    _schedule(db, test_workspace, run_at=datetime.now(timezone.utc) - timedelta(seconds=2))
    _schedule(db, test_workspace, run_at=datetime.now(timezone.utc) - timedelta(seconds=1))

    claimed = job_service.claim_pending_jobs(db, limit=1)
    assert len(claimed) == 1
    claimed_job = claimed[0]
    assert claimed_job.status == JobStatus.RUNNING.value
    assert claimed_job.attempts == 1

    pending = db.query(Job).filter(Job.status == JobStatus.PENDING.value).all()
    assert len(pending) == 1
    assert pending[0].id != claimed_job.id


def test_claim_pending_jobs_filters_by_queue(db, test_workspace):
    _schedule(db, test_workspace)
    calendar_job = _schedule(
        db, test_workspace, queue=MessageQueue.CALENDAR, job_type=JobType.GOOGLE_CALENDAR_SYNC
    )

    claimed = job_service.claim_pending_jobs(db, limit=10, queues=[MessageQueue.CALENDAR.value])

    assert [job.id for job in claimed] == [calendar_job.id]


def test_future_jobs_are_not_due(db, test_workspace):
    _schedule(db, test_workspace, run_at=datetime.now(timezone.utc) + timedelta(hours=1))

    assert job_service.claim_pending_jobs(db) == []


def test_mark_job_failed_retries_until_max_attempts(db, test_workspace):
    _schedule(db, test_workspace, max_attempts=2)

    job = job_service.claim_pending_jobs(db)[0]
    job_service.mark_job_failed(db, job, "boom")
    assert job.status == JobStatus.PENDING.value
    assert job.last_error == "boom"

    job = job_service.claim_pending_jobs(db)[0]
    job_service.mark_job_failed(db, job, "boom again")
    assert job.status == JobStatus.FAILED.value
    assert job.attempts == 2


def test_mark_job_completed(db, test_workspace):
    _schedule(db, test_workspace)
    job = job_service.claim_pending_jobs(db)[0]

    job_service.mark_job_completed(db, job)

    assert job.status == JobStatus.COMPLETED.value
    assert job.completed_at is not None


# =============================================================================
# DatabaseJobQueue
# =============================================================================

def test_job_queue_translates_retry_limit(db, test_workspace):
    queue = DatabaseJobQueue(db, MessageQueue.CALENDAR)

    queue.add(
        JobType.GOOGLE_CALENDAR_SYNC.value,
        {"workspace_id": str(test_workspace.workspace_id), "connected_account_id": "x"},
        retry_limit=2,
    )

    job = db.query(Job).one()
    assert job.max_attempts == 3
    assert job.queue == MessageQueue.CALENDAR.value
    assert job.job_type == JobType.GOOGLE_CALENDAR_SYNC.value


def test_job_queue_without_retry_limit_uses_default(db, test_workspace):
    DatabaseJobQueue(db, MessageQueue.MESSAGING).add(
        JobType.MESSAGING_MESSAGE_LIST_FETCH.value,
        {"workspace_id": str(test_workspace.workspace_id)},
    )

    assert db.query(Job).one().max_attempts == 3


def test_job_queue_rejects_unknown_job_name(db, test_workspace):
    queue = DatabaseJobQueue(db, MessageQueue.MESSAGING)

    with pytest.raises(ValueError):
        queue.add("not-a-job", {"workspace_id": str(test_workspace.workspace_id)})


def test_job_queue_requires_workspace_id(db):
    queue = DatabaseJobQueue(db, MessageQueue.MESSAGING)

    with pytest.raises(ValueError):
        queue.add(JobType.MESSAGING_MESSAGE_LIST_FETCH.value, {"connected_account_id": "x"})

    assert db.query(Job).count() == 0
