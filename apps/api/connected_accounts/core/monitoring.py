"""Error tracking (Sentry) setup shared by the API and the worker."""

import logging
import os

from connected_accounts.core.config import settings

logger = logging.getLogger(__name__)


def _monitoring_enabled() -> bool:
    if not settings.SENTRY_DSN or settings.ENV == "dev":
        return False
    if os.getenv("TESTING", "").lower() in ("1", "true", "yes"):
        return False
    return True


def setup_monitoring(service_name: str) -> bool:
    """Initialize Sentry when configured. Returns True if enabled."""
    if not _monitoring_enabled():
        return False

    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        server_name=service_name,
        release=settings.VERSION,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,  # 10% of requests for performance monitoring
        send_default_pii=False,  # Don't send PII to Sentry
    )
    logger.info("Sentry initialized for %s", service_name)
    return True


def report_exception(enabled: bool) -> None:
    """Send the exception currently being handled to Sentry."""
    if not enabled:
        return
    import sentry_sdk

    sentry_sdk.capture_exception()
