"""
Background worker for processing scheduled jobs.

Usage:
    python -m connected_accounts.worker

The worker polls for pending jobs and processes them.
For production, run this as a separate process (e.g., systemd service, Docker container).
"""

import asyncio
import logging
import os

from connected_accounts.core.config import settings
from connected_accounts.core.monitoring import report_exception, setup_monitoring
from connected_accounts.core.structured_logging import build_log_context
from connected_accounts.db.session import SessionLocal
from connected_accounts.jobs.registry import resolve_job_handler
from connected_accounts.services import job_service
from connected_accounts.services.data_source_service import dispose_engines

monitoring_enabled = setup_monitoring("connected-accounts-worker")

logger = logging.getLogger(__name__)

# Worker configuration
POLL_INTERVAL_SECONDS = settings.WORKER_POLL_INTERVAL
BATCH_SIZE = settings.WORKER_BATCH_SIZE


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


async def process_job(db, job) -> None:
    """Process a single job based on its type."""
    logger.info(
        "Processing job %s (type=%s, attempt=%s)",
        job.id,
        job.job_type,
        job.attempts,
    )
    handler = resolve_job_handler(job.job_type)
    await handler(db, job)


async def run_once(db, queues: list[str] | None = None) -> int:
    """Claim and process one batch of due jobs. Returns the number processed."""
    jobs = job_service.claim_pending_jobs(db, limit=BATCH_SIZE, queues=queues)
    if jobs:
        logger.info("Claimed %s pending jobs", len(jobs))

    for job in jobs:
        try:
            await process_job(db, job)
            job_service.mark_job_completed(db, job)
            logger.info("Job %s completed successfully", job.id)
        except Exception as e:
            db.rollback()
            job_service.mark_job_failed(db, job, f"{type(e).__name__}: {e}")
            logger.error(
                "Job %s failed: %s (attempt %s/%s)",
                job.id,
                type(e).__name__,
                job.attempts,
                job.max_attempts,
                extra=build_log_context(
                    workspace_id=str(job.workspace_id),
                    job_id=str(job.id),
                ),
            )
            report_exception(monitoring_enabled)

    return len(jobs)


async def worker_loop() -> None:
    """Main worker loop - polls for and processes pending jobs."""
    queues = settings.worker_queues_list or None
    logger.info(
        "Worker starting (poll interval: %ss, batch size: %s, queues: %s)",
        POLL_INTERVAL_SECONDS,
        BATCH_SIZE,
        ",".join(queues) if queues else "all",
    )

    while True:
        with SessionLocal() as db:
            try:
                await run_once(db, queues)
            except Exception:
                logger.exception("Error in worker loop")
                report_exception(monitoring_enabled)

        await asyncio.sleep(POLL_INTERVAL_SECONDS)


def main() -> None:
    """Entry point for the worker."""
    configure_logging()
    try:
        asyncio.run(worker_loop())
    except KeyboardInterrupt:
        logger.info("Worker shutting down")
    except Exception:
        report_exception(monitoring_enabled)
        logger.exception(
            "Worker crashed",
            extra=build_log_context(
                request_id=os.getenv("WORKER_INSTANCE_ID"),
                route="worker",
                method="background",
            ),
        )
        raise
    finally:
        dispose_engines()


if __name__ == "__main__":
    main()
