"""SQLAlchemy ORM models."""

from connected_accounts.db.models.calendar import CalendarChannel
from connected_accounts.db.models.connected_accounts import ConnectedAccount
from connected_accounts.db.models.jobs import Job
from connected_accounts.db.models.messaging import MessageChannel
from connected_accounts.db.models.workspaces import DataSource, Workspace, WorkspaceMember

__all__ = [
    "CalendarChannel",
    "ConnectedAccount",
    "DataSource",
    "Job",
    "MessageChannel",
    "Workspace",
    "WorkspaceMember",
]
