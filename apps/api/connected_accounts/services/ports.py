"""Capabilities the account-linking flow depends on.

The orchestration in google_apis_service receives these explicitly so the
storage, flag and queue backends can be swapped (e.g. in tests).
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, Protocol
from uuid import UUID

from sqlalchemy.orm import Session


class WorkspaceConnection(Protocol):
    """An open handle on one workspace's data store."""

    def session(self) -> AbstractContextManager[Session]:
        """Session for reads; nothing is committed."""
        ...

    def transaction(self) -> AbstractContextManager[Session]:
        """Session inside a single transaction: commit on exit, rollback on error."""
        ...


class DataStore(Protocol):
    def resolve_connection(self, workspace_id: UUID) -> WorkspaceConnection:
        ...


class FeatureFlags(Protocol):
    def get(self, name: str) -> bool:
        ...


class JobQueue(Protocol):
    def add(
        self,
        job_name: str,
        payload: dict[str, Any],
        *,
        retry_limit: int | None = None,
    ) -> None:
        ...
