"""CLI tools for connected accounts administration."""

from uuid import UUID

import click

from connected_accounts.db.models import DataSource, Workspace, WorkspaceMember
from connected_accounts.db.session import SessionLocal


@click.group()
def cli():
    """Connected accounts CLI tools."""
    pass


@cli.command()
@click.option("--name", required=True, help="Workspace display name")
@click.option(
    "--data-source-url",
    default=None,
    help="Optional database URL for the workspace (default: primary database)",
)
def create_workspace(name: str, data_source_url: str | None):
    """
    Create a workspace and its initial data source.

    Example:
        python -m connected_accounts.cli create-workspace --name "Acme"
    """
    db = SessionLocal()
    try:
        workspace = Workspace(display_name=name.strip())
        db.add(workspace)
        db.flush()

        db.add(DataSource(workspace_id=workspace.id, url=data_source_url))
        db.commit()

        click.echo(f"✓ Created workspace: {workspace.display_name}")
        click.echo(f"  ID: {workspace.id}")
        click.echo(f"  Data source: {data_source_url or 'primary database'}")

    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
    finally:
        db.close()


@cli.command()
@click.option("--workspace-id", required=True, type=click.UUID, help="Workspace ID")
@click.option("--email", required=True, help="Member email address")
@click.option("--name", default=None, help="Optional display name")
def add_member(workspace_id: UUID, email: str, name: str | None):
    """
    Add a member to a workspace.

    Example:
        python -m connected_accounts.cli add-member --workspace-id <uuid> --email "jane@acme.com"
    """
    db = SessionLocal()
    try:
        workspace = db.get(Workspace, workspace_id)
        if not workspace:
            click.echo(f"❌ Workspace not found: {workspace_id}")
            return

        member = WorkspaceMember(
            workspace_id=workspace.id,
            user_email=email.lower().strip(),
            name=name,
        )
        db.add(member)
        db.commit()

        click.echo(f"✓ Added {member.user_email} to {workspace.display_name}")
        click.echo(f"  Member ID: {member.id}")

    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
    finally:
        db.close()


@cli.command()
@click.option("--workspace-id", required=True, type=click.UUID, help="Workspace ID")
@click.option("--url", default=None, help="Database URL (omit for the primary database)")
def add_data_source(workspace_id: UUID, url: str | None):
    """
    Point a workspace at a new data source.

    The newest data source wins, so this switches the workspace over.

    Example:
        python -m connected_accounts.cli add-data-source --workspace-id <uuid> --url "postgresql+psycopg://..."
    """
    db = SessionLocal()
    try:
        workspace = db.get(Workspace, workspace_id)
        if not workspace:
            click.echo(f"❌ Workspace not found: {workspace_id}")
            return

        data_source = DataSource(workspace_id=workspace.id, url=url)
        db.add(data_source)
        db.commit()

        click.echo(f"✓ Added data source {data_source.id} for {workspace.display_name}")

    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
    finally:
        db.close()


if __name__ == "__main__":
    cli()
