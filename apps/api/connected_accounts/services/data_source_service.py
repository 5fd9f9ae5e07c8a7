"""Workspace data source resolution and connection handling.

A workspace's records live either in the primary database (data source url
is NULL) or in a dedicated database. Engines for dedicated databases are
pooled per URL; sessions and transactions are opened per call.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator
from uuid import UUID

from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import Session

from connected_accounts.db.models import DataSource
from connected_accounts.db.session import create_engine_for_url

logger = logging.getLogger(__name__)

_engines: dict[str, Engine] = {}
_engines_lock = threading.Lock()


class DataSourceError(Exception):
    """Base exception for data source errors."""

    pass


class DataSourceNotFoundError(DataSourceError):
    """Workspace has no data source registered."""

    def __init__(self, workspace_id: UUID):
        super().__init__(f"No data source found for workspace {workspace_id}")
        self.workspace_id = workspace_id


def get_last_data_source_or_fail(db: Session, workspace_id: UUID) -> DataSource:
    """Return the most recently registered data source for a workspace."""
    data_source = (
        db.query(DataSource)
        .filter(DataSource.workspace_id == workspace_id)
        .order_by(DataSource.created_at.desc())
        .first()
    )
    if not data_source:
        raise DataSourceNotFoundError(workspace_id)
    return data_source


def get_engine_for_url(url: str) -> Engine:
    """Get (or lazily create) the pooled engine for a workspace database."""
    with _engines_lock:
        engine = _engines.get(url)
        if engine is None:
            engine = create_engine_for_url(url)
            _engines[url] = engine
        return engine


def dispose_engines() -> None:
    """Dispose every pooled workspace engine (worker/app shutdown)."""
    with _engines_lock:
        for engine in _engines.values():
            engine.dispose()
        _engines.clear()


class WorkspaceDataSource:
    """Connection to one workspace's data store."""

    def __init__(self, bind: Engine | Connection, workspace_id: UUID):
        self.bind = bind
        self.workspace_id = workspace_id

    @contextmanager
    def session(self) -> Iterator[Session]:
        with Session(bind=self.bind, autoflush=False) as session:
            yield session

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        with Session(bind=self.bind, autoflush=False) as session:
            with session.begin():
                yield session


def connect_to_data_source(
    data_source: DataSource, default_bind: Engine | Connection
) -> WorkspaceDataSource:
    """Open a connection handle for a data source record."""
    if data_source.url:
        bind = get_engine_for_url(data_source.url)
    else:
        bind = default_bind
    return WorkspaceDataSource(bind, data_source.workspace_id)


class SqlAlchemyDataStore:
    """Resolve workspace connections from data source metadata in the primary database."""

    def __init__(self, db: Session):
        self.db = db

    def resolve_connection(self, workspace_id: UUID) -> WorkspaceDataSource:
        data_source = get_last_data_source_or_fail(self.db, workspace_id)
        logger.debug(
            "Resolved data source %s for workspace %s (dedicated=%s)",
            data_source.id,
            workspace_id,
            bool(data_source.url),
        )
        return connect_to_data_source(data_source, self.db.get_bind())
