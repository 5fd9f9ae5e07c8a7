import pytest
from click.testing import CliRunner

from connected_accounts import cli as cli_module
from connected_accounts.db.models import DataSource, Workspace, WorkspaceMember


@pytest.fixture
def cli_db(monkeypatch, session_factory):
    monkeypatch.setattr(cli_module, "SessionLocal", session_factory)
    return session_factory


def test_create_workspace_adds_primary_data_source(cli_db, db):
    result = CliRunner().invoke(cli_module.cli, ["create-workspace", "--name", "Acme"])

    assert result.exit_code == 0
    assert "Created workspace: Acme" in result.output
    workspace = db.query(Workspace).one()
    data_source = db.query(DataSource).one()
    assert data_source.workspace_id == workspace.id
    assert data_source.url is None


def test_add_member_and_data_source(cli_db, db, test_workspace):
    runner = CliRunner()
    workspace_id = str(test_workspace.workspace_id)

    result = runner.invoke(
        cli_module.cli,
        ["add-member", "--workspace-id", workspace_id, "--email", "New@Acme.com"],
    )
    assert result.exit_code == 0
    assert db.query(WorkspaceMember).filter_by(user_email="new@acme.com").count() == 1

    result = runner.invoke(
        cli_module.cli,
        ["add-data-source", "--workspace-id", workspace_id, "--url", "sqlite:///acme.db"],
    )
    assert result.exit_code == 0
    assert db.query(DataSource).filter_by(url="sqlite:///acme.db").count() == 1


def test_add_member_unknown_workspace(cli_db):
    result = CliRunner().invoke(
        cli_module.cli,
        ["add-member", "--workspace-id", "00000000-0000-0000-0000-000000000000", "--email", "x@y.z"],
    )

    assert "Workspace not found" in result.output
