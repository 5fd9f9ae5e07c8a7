"""
Test configuration and fixtures.

Provides:
- A throwaway SQLite database per test (schema from Base.metadata)
- Workspace / member / data source fixtures
- In-memory job queue and feature flag doubles
- HTTPX AsyncClient wired to the app with get_db overridden
"""
import os
import uuid
from dataclasses import dataclass, field
from typing import AsyncGenerator, Generator

from cryptography.fernet import Fernet

# Settings are read at import time; configure the environment first
os.environ["TESTING"] = "1"
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("TOKEN_ENCRYPTION_KEY", Fernet.generate_key().decode())
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session, sessionmaker

from connected_accounts.core.deps import get_db
from connected_accounts.db.base import Base
import connected_accounts.db.models  # noqa: F401
from connected_accounts.db.models import DataSource, Workspace, WorkspaceMember
from connected_accounts.db.session import create_engine_for_url
from connected_accounts.services.data_source_service import SqlAlchemyDataStore


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """File-backed SQLite engine so separate sessions see each other's commits."""
    engine = create_engine_for_url(f"sqlite:///{tmp_path / 'workspace.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    yield session
    session.close()


@dataclass
class WorkspaceContext:
    workspace: Workspace
    member: WorkspaceMember
    data_source: DataSource

    @property
    def workspace_id(self) -> uuid.UUID:
        return self.workspace.id

    @property
    def member_id(self) -> uuid.UUID:
        return self.member.id


@pytest.fixture(scope="function")
def test_workspace(db: Session) -> WorkspaceContext:
    """Workspace on the primary database with one member."""
    workspace = Workspace(id=uuid.uuid4(), display_name="Test Workspace")
    db.add(workspace)
    db.flush()

    member = WorkspaceMember(
        id=uuid.uuid4(),
        workspace_id=workspace.id,
        user_email=f"member-{uuid.uuid4().hex[:8]}@test.com",
        name="Test Member",
    )
    data_source = DataSource(id=uuid.uuid4(), workspace_id=workspace.id, url=None)
    db.add_all([member, data_source])
    db.commit()
    return WorkspaceContext(workspace=workspace, member=member, data_source=data_source)


@pytest.fixture(scope="function")
def data_store(db: Session) -> SqlAlchemyDataStore:
    return SqlAlchemyDataStore(db)


# =============================================================================
# Capability doubles
# =============================================================================

@dataclass
class FakeFeatureFlags:
    flags: dict[str, bool] = field(default_factory=dict)

    def get(self, name) -> bool:
        key = getattr(name, "value", name)
        return self.flags.get(key, False)


@dataclass
class RecordingJobQueue:
    """Job queue double that records adds, optionally failing every call."""

    error: Exception | None = None
    added: list[dict] = field(default_factory=list)

    def add(self, job_name, payload, *, retry_limit=None) -> None:
        if self.error is not None:
            raise self.error
        self.added.append(
            {"job_name": job_name, "payload": payload, "retry_limit": retry_limit}
        )


@pytest.fixture
def all_flags_on() -> FakeFeatureFlags:
    return FakeFeatureFlags(
        {
            "CALENDAR_PROVIDER_GOOGLE_ENABLED": True,
            "MESSAGING_PROVIDER_GMAIL_ENABLED": True,
        }
    )


@pytest.fixture
def messaging_queue() -> RecordingJobQueue:
    return RecordingJobQueue()


@pytest.fixture
def calendar_queue() -> RecordingJobQueue:
    return RecordingJobQueue()


# =============================================================================
# HTTP Client
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient against the app with the test database session."""
    from connected_accounts.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"User-Agent": "pytest-agent"},
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def make_flags():
    return lambda flags=None: FakeFeatureFlags(dict(flags or {}))


@pytest.fixture
def make_queue():
    return lambda error=None: RecordingJobQueue(error=error)
