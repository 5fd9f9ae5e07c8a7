"""Baseline: workspaces, data sources, connected accounts, channels, jobs.

Revision ID: 0001_connected_accounts_baseline
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic
revision = "0001_connected_accounts_baseline"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ==========================================================================
    # 1. Workspaces and data sources
    # ==========================================================================
    op.create_table(
        "workspaces",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("display_name", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    op.create_table(
        "data_sources",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "workspace_id",
            sa.Uuid(),
            sa.ForeignKey("workspaces.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("url", sa.Text(), nullable=True, comment="NULL means the primary database"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index(
        "idx_data_sources_workspace_created",
        "data_sources",
        ["workspace_id", "created_at"],
    )

    op.create_table(
        "workspace_members",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "workspace_id",
            sa.Uuid(),
            sa.ForeignKey("workspaces.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("idx_workspace_members_workspace", "workspace_members", ["workspace_id"])

    # ==========================================================================
    # 2. Connected accounts (tokens are Fernet-encrypted text)
    # ==========================================================================
    op.create_table(
        "connected_accounts",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("workspace_id", sa.Uuid(), nullable=False),
        sa.Column("handle", sa.String(255), nullable=False),
        sa.Column("provider", sa.String(30), nullable=False),
        sa.Column("access_token", sa.Text(), nullable=False),
        sa.Column("refresh_token", sa.Text(), nullable=True),
        sa.Column("account_owner_id", sa.Uuid(), nullable=False),
        sa.Column("auth_failed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index(
        "idx_connected_accounts_owner_handle",
        "connected_accounts",
        ["workspace_id", "account_owner_id", "handle"],
    )
    op.create_index(
        "idx_connected_accounts_account_owner",
        "connected_accounts",
        ["account_owner_id"],
    )

    # ==========================================================================
    # 3. Message and calendar channels
    # ==========================================================================
    op.create_table(
        "message_channels",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("workspace_id", sa.Uuid(), nullable=False),
        sa.Column(
            "connected_account_id",
            sa.Uuid(),
            sa.ForeignKey("connected_accounts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("handle", sa.String(255), nullable=False),
        sa.Column("visibility", sa.String(30), nullable=False),
        sa.Column(
            "sync_status",
            sa.String(20),
            server_default=sa.text("'not_synced'"),
            nullable=False,
        ),
        sa.Column("sync_cursor", sa.Text(), nullable=True),
        sa.Column("sync_stage_started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("synced_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "throttle_failure_count",
            sa.Integer(),
            server_default=sa.text("0"),
            nullable=False,
        ),
        sa.Column(
            "pending_message_ids",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            server_default=sa.text("'[]'"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index(
        "idx_message_channels_account",
        "message_channels",
        ["workspace_id", "connected_account_id"],
    )

    op.create_table(
        "calendar_channels",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("workspace_id", sa.Uuid(), nullable=False),
        sa.Column(
            "connected_account_id",
            sa.Uuid(),
            sa.ForeignKey("connected_accounts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("handle", sa.String(255), nullable=False),
        sa.Column("visibility", sa.String(30), nullable=False),
        sa.Column(
            "is_sync_enabled",
            sa.Boolean(),
            server_default=sa.text("true"),
            nullable=False,
        ),
        sa.Column("sync_cursor", sa.Text(), nullable=True),
        sa.Column("synced_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "pending_event_ids",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            server_default=sa.text("'[]'"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index(
        "idx_calendar_channels_account",
        "calendar_channels",
        ["workspace_id", "connected_account_id"],
    )

    # ==========================================================================
    # 4. Background jobs
    # ==========================================================================
    op.create_table(
        "jobs",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "workspace_id",
            sa.Uuid(),
            sa.ForeignKey("workspaces.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("queue", sa.String(50), nullable=False),
        sa.Column("job_type", sa.String(50), nullable=False),
        sa.Column(
            "payload",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
        ),
        sa.Column(
            "run_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.String(20),
            server_default=sa.text("'pending'"),
            nullable=False,
        ),
        sa.Column("attempts", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("max_attempts", sa.Integer(), server_default=sa.text("3"), nullable=False),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "idx_jobs_pending",
        "jobs",
        ["queue", "status", "run_at"],
        postgresql_where=sa.text("status = 'pending'"),
    )
    op.create_index("idx_jobs_workspace", "jobs", ["workspace_id", "created_at"])


def downgrade() -> None:
    op.drop_index("idx_jobs_workspace", table_name="jobs")
    op.drop_index("idx_jobs_pending", table_name="jobs")
    op.drop_table("jobs")
    op.drop_index("idx_calendar_channels_account", table_name="calendar_channels")
    op.drop_table("calendar_channels")
    op.drop_index("idx_message_channels_account", table_name="message_channels")
    op.drop_table("message_channels")
    op.drop_index("idx_connected_accounts_account_owner", table_name="connected_accounts")
    op.drop_index("idx_connected_accounts_owner_handle", table_name="connected_accounts")
    op.drop_table("connected_accounts")
    op.drop_index("idx_workspace_members_workspace", table_name="workspace_members")
    op.drop_table("workspace_members")
    op.drop_index("idx_data_sources_workspace_created", table_name="data_sources")
    op.drop_table("data_sources")
    op.drop_table("workspaces")
