"""Rate limiting configuration for the API."""

import os

from slowapi import Limiter
from slowapi.util import get_remote_address

from connected_accounts.core.config import settings

IS_TESTING = os.getenv("TESTING", "").lower() in ("1", "true", "yes")

# In-memory storage is per process; point RATE_LIMIT_STORAGE_URI at Redis for multi-worker deployments
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    enabled=not IS_TESTING,
)

OAUTH_RATE_LIMIT = f"{settings.RATE_LIMIT_OAUTH}/minute"
