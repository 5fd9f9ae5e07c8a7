import uuid
from datetime import datetime, timedelta, timezone

import pytest

from connected_accounts.db.models import DataSource, Workspace
from connected_accounts.services import data_source_service
from connected_accounts.services.data_source_service import (
    DataSourceNotFoundError,
    SqlAlchemyDataStore,
    get_last_data_source_or_fail,
)


def test_latest_data_source_wins(db, test_workspace):
    newer = DataSource(
        workspace_id=test_workspace.workspace_id,
        url="sqlite:///newer.db",
        created_at=datetime.now(timezone.utc) + timedelta(hours=1),
    )
    db.add(newer)
    db.commit()

    data_source = get_last_data_source_or_fail(db, test_workspace.workspace_id)

    assert data_source.id == newer.id


def test_missing_data_source_raises(db):
    workspace = Workspace(id=uuid.uuid4(), display_name="Empty")
    db.add(workspace)
    db.commit()

    with pytest.raises(DataSourceNotFoundError) as exc_info:
        get_last_data_source_or_fail(db, workspace.id)

    assert exc_info.value.workspace_id == workspace.id


def test_null_url_uses_primary_bind(db, db_engine, test_workspace):
    connection = SqlAlchemyDataStore(db).resolve_connection(test_workspace.workspace_id)

    assert connection.bind is db_engine
    assert connection.workspace_id == test_workspace.workspace_id


def test_dedicated_url_engines_are_cached(tmp_path):
    url = f"sqlite:///{tmp_path / 'dedicated.db'}"
    try:
        first = data_source_service.get_engine_for_url(url)
        second = data_source_service.get_engine_for_url(url)
        assert first is second
    finally:
        data_source_service.dispose_engines()

    assert data_source_service._engines == {}


def test_transaction_rolls_back_on_error(db, test_workspace):
    connection = SqlAlchemyDataStore(db).resolve_connection(test_workspace.workspace_id)

    with pytest.raises(RuntimeError):
        with connection.transaction() as session:
            session.add(Workspace(id=uuid.uuid4(), display_name="Doomed"))
            session.flush()
            raise RuntimeError("abort")

    assert db.query(Workspace).count() == 1
